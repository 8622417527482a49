from datetime import datetime, timezone

import pytest
from fastapi import HTTPException
from jose import jwt

from core.config import settings
from core.errors import AuthorizationError
from core.security import (
    ALGORITHM,
    create_access_token,
    get_current_user,
    hash_password,
    require_admin,
    verify_password,
)
from models.user import User


def test_password_hash_roundtrip():
    hashed = hash_password("correct horse")

    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("battery staple", hashed)


@pytest.mark.parametrize("plain, hashed", [("", "x"), ("pw", ""), ("pw", "not-a-bcrypt-hash")])
def test_verify_password_rejects_garbage(plain, hashed):
    assert verify_password(plain, hashed) is False


def test_access_token_carries_identity_and_expiry():
    user = User(id=12345601, username="spotter", type="admin")

    token, expires = create_access_token(user)
    payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[ALGORITHM])

    assert payload["user_id"] == 12345601
    assert payload["username"] == "spotter"
    assert payload["type"] == "admin"
    assert payload["exp"] == int(expires.timestamp())
    assert expires > datetime.now(timezone.utc)


async def test_token_for_deleted_user_is_rejected(db_session):
    token, _ = create_access_token(User(id=99999901, username="gone", type="user"))

    with pytest.raises(HTTPException) as exc_info:
        await get_current_user(token=token, db=db_session)
    assert exc_info.value.status_code == 401


async def test_token_signed_with_another_secret_is_rejected(db_session, user):
    token = jwt.encode({"user_id": user.id}, "some-other-secret", algorithm=ALGORITHM)

    with pytest.raises(HTTPException):
        await get_current_user(token=token, db=db_session)


async def test_current_user_resolved_from_token(db_session, user):
    token, _ = create_access_token(user)

    current = await get_current_user(token=token, db=db_session)
    assert current.id == user.id


async def test_require_admin(user, admin):
    assert await require_admin(current_user=admin) is admin
    with pytest.raises(AuthorizationError):
        await require_admin(current_user=user)
