"""
Read-side photo queries: filtered pagination and random sampling.
"""
import json
import random
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.errors import ValidationError
from models.aircraft import AircraftType, RegistrationHistory, SpecificAircraft
from models.photo import Photo

PHOTO_PAGE_LIMIT = 9
RANDOM_SAMPLE_SIZE = 5


@dataclass
class PhotoFilters:
    search: str = ""
    aircraft_types: List[str] = field(default_factory=list)
    manufacturers: List[str] = field(default_factory=list)


def parse_filter_array(raw: Optional[str], name: str) -> List[str]:
    """Query-string filter given as a JSON array of strings, e.g. '["A320","B738"]'."""
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"{name} must be a JSON array") from exc
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValidationError(f"{name} must be a JSON array of strings")
    return value


def _filtered(stmt, user_id: int, filters: PhotoFilters):
    # inner joins: photos without a registration never show up in listings
    stmt = (
        stmt.join(RegistrationHistory, Photo.uuid_rh == RegistrationHistory.uuid_rh)
        .join(SpecificAircraft, RegistrationHistory.uuid_sa == SpecificAircraft.uuid)
        .join(AircraftType, SpecificAircraft.icao_type == AircraftType.icao_type)
        .where(Photo.user_id == user_id)
    )
    if filters.search:
        stmt = stmt.where(RegistrationHistory.registration.ilike(f"%{filters.search}%"))
    if filters.aircraft_types:
        stmt = stmt.where(SpecificAircraft.icao_type.in_([t.upper() for t in filters.aircraft_types]))
    if filters.manufacturers:
        stmt = stmt.where(AircraftType.manufacturer.in_(filters.manufacturers))
    return stmt


def _with_details(stmt):
    return stmt.options(
        selectinload(Photo.airport),
        selectinload(Photo.registration)
        .selectinload(RegistrationHistory.aircraft)
        .selectinload(SpecificAircraft.aircraft_type),
    ).execution_options(populate_existing=True)


async def count_photos(db: AsyncSession, user_id: int, filters: PhotoFilters) -> int:
    stmt = _filtered(select(func.count(Photo.id)).select_from(Photo), user_id, filters)
    return (await db.execute(stmt)).scalar_one()


async def search_photos(
    db: AsyncSession,
    user_id: int,
    filters: PhotoFilters,
    page: int = 1,
    limit: int = PHOTO_PAGE_LIMIT,
) -> Tuple[List[Photo], int]:
    """One page of the user's photos, newest capture first. Returns (photos, total)."""
    total = await count_photos(db, user_id, filters)
    stmt = (
        _with_details(_filtered(select(Photo), user_id, filters))
        .order_by(Photo.taken_at.desc().nulls_last(), Photo.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    photos = (await db.execute(stmt)).scalars().all()
    return list(photos), total


async def sample_photos(
    db: AsyncSession,
    user_id: int,
    filters: PhotoFilters,
    limit: int = RANDOM_SAMPLE_SIZE,
    rng: random.Random | None = None,
) -> Tuple[List[Photo], int, Optional[int]]:
    """
    A window of ``limit`` photos starting at a uniformly random offset in
    [0, total - limit]. Approximately uniform, not a true random sample.
    Returns (photos, total, offset); offset is None when nothing matches.
    """
    total = await count_photos(db, user_id, filters)
    if total == 0:
        return [], 0, None

    rng = rng or random
    offset = rng.randint(0, total - limit) if total > limit else 0
    stmt = (
        _with_details(_filtered(select(Photo), user_id, filters))
        .order_by(Photo.id.asc())
        .offset(offset)
        .limit(limit)
    )
    photos = (await db.execute(stmt)).scalars().all()
    return list(photos), total, offset
