# routers/auth.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.errors import DuplicateKey, ValidationError
from core.security import create_access_token, hash_password, verify_password
from models.user import User
from schemas.auth import Credentials, RegisterResponse, TokenResponse, UserInfo

router = APIRouter(prefix="/auth", tags=["Auth"])


def _token_response(user: User, response_cls=TokenResponse):
    token, expires = create_access_token(user)
    return response_cls(
        token=token,
        token_type="bearer",
        expires_in_ms=int(expires.timestamp() * 1000),
        user=UserInfo.model_validate(user),
    )


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account and return a JWT",
)
async def register(
    credentials: Credentials,
    db: AsyncSession = Depends(get_db),
):
    username = credentials.username.strip()
    if not username or not credentials.password:
        raise ValidationError("Username and password required")

    taken = await db.execute(select(User.id).where(User.username == username))
    if taken.scalar_one_or_none() is not None:
        raise DuplicateKey("Username is already taken")

    user = User(username=username, password_hash=hash_password(credentials.password), type="user")
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise DuplicateKey("Username is already taken") from exc
    await db.refresh(user)

    return _token_response(user, RegisterResponse)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Exchange username and password for a JWT",
)
async def login(
    credentials: Credentials,
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(User).where(User.username == credentials.username.strip()))
    user = result.scalar_one_or_none()
    if not user or not verify_password(credentials.password, user.password_hash):
        raise HTTPException(status_code=400, detail="Invalid username or password")

    return _token_response(user)
