from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.security import get_current_user
from models.user import User
from schemas.reference import AirlineRead
from services import reference

router = APIRouter(prefix="/airlines", tags=["airlines"])


@router.get("", response_model=List[AirlineRead], summary="All airlines by name")
async def list_airlines(
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return await reference.list_airlines(db)
