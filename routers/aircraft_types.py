from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db, unit_of_work
from core.errors import ValidationError
from core.security import get_current_user, require_admin
from models.user import User
from schemas.reference import AircraftTypeCreate, AircraftTypeRead
from services import reference

router = APIRouter(prefix="/aircraft-types", tags=["aircraft types"])


@router.post(
    "",
    response_model=AircraftTypeRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add an aircraft type (admins only)",
)
async def create_aircraft_type(
    payload: AircraftTypeCreate,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
):
    if not payload.icao_type or not payload.manufacturer or not payload.type:
        raise ValidationError("ICAO Type, Manufacturer, and Type are required")

    async with unit_of_work(db):
        aircraft_type = await reference.create_aircraft_type(
            db, payload.icao_type, payload.manufacturer, payload.type, payload.variant
        )
    return aircraft_type


@router.get(
    "",
    response_model=List[AircraftTypeRead],
    summary="All aircraft types by manufacturer, type and variant",
)
async def list_aircraft_types(
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return await reference.list_aircraft_types(db)
