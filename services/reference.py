"""
Reference data: airports, airlines, aircraft types and registration search.
"""
import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import DuplicateAirport, DuplicateKey, ValidationError
from models.aircraft import AircraftType, RegistrationHistory, SpecificAircraft
from models.airline import Airline
from models.airport import Airport
from schemas.aircraft import AircraftSearchResult
from services import stats

logger = logging.getLogger(__name__)

AIRPORT_RESULTS = 5
AIRCRAFT_SEARCH_RESULTS = 10
AIRCRAFT_SEARCH_MIN_CHARS = 2


async def create_airport(
    db: AsyncSession,
    icao_code: str,
    name: str,
    latitude: Optional[float],
    longitude: Optional[float],
) -> Airport:
    """Insert an airport with an uppercased ICAO code. Flushes, does not commit."""
    code = icao_code.strip().upper()
    if await db.get(Airport, code) is not None:
        raise DuplicateAirport()

    airport = Airport(icao_code=code, name=name.strip(), latitude=latitude, longitude=longitude)
    db.add(airport)
    try:
        await db.flush()
    except IntegrityError as exc:
        raise DuplicateAirport() from exc
    logger.info("Airport %s created", code)
    return airport


async def search_airports(db: AsyncSession, user_id: int, q: Optional[str]) -> list[dict]:
    """
    No query: the user's recently used airports, or the first airports by name.
    "K..." with 4+ chars looks like a US ICAO code and is matched as a prefix;
    anything else is a substring match on the name.
    """
    if not q:
        recent = await stats.recent_airports_by_user(db, user_id, AIRPORT_RESULTS)
        if recent:
            return [row.model_dump() for row in recent]
        stmt = select(Airport.icao_code, Airport.name).order_by(Airport.name.asc()).limit(AIRPORT_RESULTS)
    elif q.startswith("K") and len(q) >= 4:
        stmt = (
            select(Airport.icao_code, Airport.name)
            .where(Airport.icao_code.ilike(f"{q}%"))
            .order_by(Airport.name.asc())
            .limit(AIRPORT_RESULTS)
        )
    else:
        stmt = (
            select(Airport.icao_code, Airport.name)
            .where(Airport.name.ilike(f"%{q}%"))
            .order_by(Airport.name.asc())
            .limit(AIRPORT_RESULTS)
        )
    rows = (await db.execute(stmt)).all()
    return [{"icao_code": r.icao_code, "name": r.name} for r in rows]


async def create_aircraft_type(
    db: AsyncSession,
    icao_type: str,
    manufacturer: str,
    type_name: str,
    variant: Optional[str] = None,
) -> AircraftType:
    code = icao_type.strip().upper()
    conflict = DuplicateKey("Aircraft Type with this ICAO Type already exists.")
    if await db.get(AircraftType, code) is not None:
        raise conflict

    aircraft_type = AircraftType(
        icao_type=code,
        manufacturer=manufacturer.strip(),
        type=type_name.strip(),
        variant=variant.strip() if variant else None,
    )
    db.add(aircraft_type)
    try:
        await db.flush()
    except IntegrityError as exc:
        raise conflict from exc
    logger.info("Aircraft type %s created", code)
    return aircraft_type


async def list_aircraft_types(db: AsyncSession) -> List[AircraftType]:
    stmt = select(AircraftType).order_by(
        AircraftType.manufacturer.asc(),
        AircraftType.type.asc(),
        AircraftType.variant.asc(),
    )
    return list((await db.execute(stmt)).scalars().all())


async def list_airlines(db: AsyncSession) -> List[Airline]:
    stmt = select(Airline).order_by(Airline.name.asc())
    return list((await db.execute(stmt)).scalars().all())


async def require_aircraft_type(db: AsyncSession, icao_type: str) -> str:
    code = icao_type.strip().upper()
    if await db.get(AircraftType, code) is None:
        raise ValidationError(f"Unknown aircraft type: {code}")
    return code


async def require_airline(db: AsyncSession, code: str) -> str:
    code = code.strip().upper()
    if await db.get(Airline, code) is None:
        raise ValidationError(f"Unknown airline: {code}")
    return code


async def search_aircraft(db: AsyncSession, q: Optional[str]) -> List[AircraftSearchResult]:
    """Registrations starting with q (case-insensitive), with their airframe and type."""
    if not q or len(q) < AIRCRAFT_SEARCH_MIN_CHARS:
        return []

    stmt = (
        select(
            RegistrationHistory.uuid_rh,
            RegistrationHistory.registration,
            RegistrationHistory.airline,
            RegistrationHistory.is_current,
            SpecificAircraft.manufactured_date,
            AircraftType.icao_type,
            AircraftType.manufacturer,
            AircraftType.type,
            AircraftType.variant,
        )
        .join(SpecificAircraft, RegistrationHistory.uuid_sa == SpecificAircraft.uuid)
        .join(AircraftType, SpecificAircraft.icao_type == AircraftType.icao_type)
        .where(RegistrationHistory.registration.ilike(f"{q}%"))
        .order_by(RegistrationHistory.registration.asc(), RegistrationHistory.created_at.desc())
        .limit(AIRCRAFT_SEARCH_RESULTS)
    )
    rows = (await db.execute(stmt)).mappings().all()
    return [AircraftSearchResult(**row) for row in rows]
