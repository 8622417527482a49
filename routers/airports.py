from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db, unit_of_work
from core.errors import ValidationError
from core.security import get_current_user, require_admin
from models.user import User
from schemas.reference import AirportBrief, AirportCreate, AirportRead
from services import reference

router = APIRouter(prefix="/airports", tags=["airports"])


@router.post(
    "",
    response_model=AirportRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add an airport (admins only)",
)
async def create_airport(
    payload: AirportCreate,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
):
    if not payload.icao_code or not payload.name:
        raise ValidationError("ICAO code and Name are required")

    async with unit_of_work(db):
        airport = await reference.create_airport(
            db, payload.icao_code, payload.name, payload.latitude, payload.longitude
        )
    return airport


@router.get(
    "",
    response_model=List[AirportBrief],
    summary="Recent airports, or search by ICAO code / name",
)
async def search_airports(
    q: Optional[str] = Query(None, max_length=64, description="ICAO prefix or part of the name"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await reference.search_airports(db, current_user.id, q)
