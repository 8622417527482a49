from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.security import get_current_user
from models.user import User
from schemas.aircraft import AircraftSearchResult
from services import reference

router = APIRouter(prefix="/aircraft", tags=["aircraft"])


@router.get(
    "/search",
    response_model=List[AircraftSearchResult],
    summary="Registrations starting with q (at least 2 characters)",
)
async def search_aircraft(
    q: Optional[str] = Query(None, max_length=16),
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return await reference.search_aircraft(db, q)
