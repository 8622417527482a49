"""
Per-user dashboard aggregates.

Each aggregate takes a user id and a result limit and returns typed rows,
ranked by count (descending) with the grouping key as tie-breaker.
"""
from datetime import datetime, timezone
from typing import List

from sqlalchemy import extract, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.aircraft import AircraftType, RegistrationHistory, SpecificAircraft
from models.airline import Airline
from models.airport import Airport
from models.photo import Photo
from schemas.stats import (
    AircraftSeenCount,
    AirlineCount,
    AirplaneCount,
    AirportCount,
    ManufacturerCount,
    RecentAirport,
    YearCount,
)


def _seen_at():
    return func.coalesce(Photo.taken_at, Photo.created_at)


def _with_aircraft(stmt):
    return (
        stmt.join(RegistrationHistory, Photo.uuid_rh == RegistrationHistory.uuid_rh)
        .join(SpecificAircraft, RegistrationHistory.uuid_sa == SpecificAircraft.uuid)
        .join(AircraftType, SpecificAircraft.icao_type == AircraftType.icao_type)
    )


async def recent_airports_by_user(db: AsyncSession, user_id: int, limit: int = 5) -> List[RecentAirport]:
    last_seen = func.max(_seen_at())
    stmt = (
        select(Airport.icao_code, Airport.name)
        .select_from(Photo)
        .join(Airport, Photo.airport_code == Airport.icao_code)
        .where(Photo.user_id == user_id)
        .group_by(Airport.icao_code, Airport.name)
        .order_by(last_seen.desc(), Airport.icao_code.asc())
        .limit(limit)
    )
    rows = (await db.execute(stmt)).mappings().all()
    return [RecentAirport(**row) for row in rows]


async def airline_counts_by_user(db: AsyncSession, user_id: int, limit: int = 10) -> List[AirlineCount]:
    count = func.count(Photo.id)
    stmt = (
        select(RegistrationHistory.airline, Airline.name, count.label("count"))
        .select_from(Photo)
        .join(RegistrationHistory, Photo.uuid_rh == RegistrationHistory.uuid_rh)
        .outerjoin(Airline, RegistrationHistory.airline == Airline.code)
        .where(Photo.user_id == user_id, RegistrationHistory.airline.is_not(None))
        .group_by(RegistrationHistory.airline, Airline.name)
        .order_by(count.desc(), RegistrationHistory.airline.asc())
        .limit(limit)
    )
    rows = (await db.execute(stmt)).mappings().all()
    return [AirlineCount(**row) for row in rows]


async def airport_counts_by_user(db: AsyncSession, user_id: int, limit: int = 10) -> List[AirportCount]:
    count = func.count(Photo.id)
    stmt = (
        select(Airport.icao_code, Airport.name, count.label("count"))
        .select_from(Photo)
        .join(Airport, Photo.airport_code == Airport.icao_code)
        .where(Photo.user_id == user_id)
        .group_by(Airport.icao_code, Airport.name)
        .order_by(count.desc(), Airport.icao_code.asc())
        .limit(limit)
    )
    rows = (await db.execute(stmt)).mappings().all()
    return [AirportCount(**row) for row in rows]


async def airplane_counts_by_user(db: AsyncSession, user_id: int, limit: int = 8) -> List[AirplaneCount]:
    count = func.count(Photo.id)
    stmt = (
        _with_aircraft(
            select(
                AircraftType.icao_type,
                AircraftType.manufacturer,
                AircraftType.type,
                AircraftType.variant,
                count.label("count"),
            ).select_from(Photo)
        )
        .where(Photo.user_id == user_id)
        .group_by(
            AircraftType.icao_type,
            AircraftType.manufacturer,
            AircraftType.type,
            AircraftType.variant,
        )
        .order_by(count.desc(), AircraftType.icao_type.asc())
        .limit(limit)
    )
    rows = (await db.execute(stmt)).mappings().all()
    return [AirplaneCount(**row) for row in rows]


async def manufacturer_counts_by_user(db: AsyncSession, user_id: int, limit: int = 8) -> List[ManufacturerCount]:
    count = func.count(Photo.id)
    stmt = (
        _with_aircraft(select(AircraftType.manufacturer, count.label("count")).select_from(Photo))
        .where(Photo.user_id == user_id)
        .group_by(AircraftType.manufacturer)
        .order_by(count.desc(), AircraftType.manufacturer.asc())
        .limit(limit)
    )
    rows = (await db.execute(stmt)).mappings().all()
    return [ManufacturerCount(**row) for row in rows]


async def most_seen_aircraft_by_user(db: AsyncSession, user_id: int, limit: int = 8) -> List[AircraftSeenCount]:
    count = func.count(Photo.id)
    stmt = (
        _with_aircraft(
            select(
                RegistrationHistory.registration,
                AircraftType.icao_type,
                count.label("count"),
            ).select_from(Photo)
        )
        .where(Photo.user_id == user_id)
        .group_by(RegistrationHistory.registration, AircraftType.icao_type)
        .order_by(count.desc(), RegistrationHistory.registration.asc())
        .limit(limit)
    )
    rows = (await db.execute(stmt)).mappings().all()
    return [AircraftSeenCount(**row) for row in rows]


async def photo_counts_by_user_by_year(db: AsyncSession, user_id: int, num_years: int = 5) -> List[YearCount]:
    """
    Photos per year for the last ``num_years`` calendar years, oldest first,
    zero-filled. A photo without a capture time counts in its upload year.
    """
    this_year = datetime.now(timezone.utc).year
    first_year = this_year - num_years + 1
    year = extract("year", _seen_at())
    stmt = (
        select(year.label("year"), func.count(Photo.id).label("count"))
        .where(Photo.user_id == user_id, year >= first_year)
        .group_by(year)
    )
    counts = {int(row["year"]): row["count"] for row in (await db.execute(stmt)).mappings().all()}
    return [YearCount(year=y, count=counts.get(y, 0)) for y in range(first_year, this_year + 1)]

