"""
Shared pytest fixtures: an in-memory SQLite database seeded with reference
data, a fake media store, users with bearer tokens and an HTTP client wired
to both through dependency overrides.
"""
import os
from io import BytesIO
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from PIL import Image
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing the app
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "test-key")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test-secret-key")
os.environ.setdefault("AWS_S3_BUCKET_NAME", "test-bucket")
os.environ.setdefault("AWS_S3_ENDPOINT_URL", "http://minio.test:9000")
os.environ.setdefault("AWS_S3_REGION", "us-east-1")

from main import app
from core.database import get_db
from core.errors import MediaDeleteFailure
from core.security import create_access_token, hash_password
from models.base import Base
from models.user import User
from utils.s3 import MediaStore, get_media_store
from utils.seed_db import seed


class FakeMediaStore(MediaStore):
    """In-memory stand-in for MinIO; set fail_deletes to simulate S3 errors."""

    def __init__(self):
        super().__init__(client=None, bucket_name="test-bucket")
        self.objects: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self.fail_deletes = False

    def put(self, key: str, data: bytes, content_type: str = "image/jpeg") -> str:
        self.objects[key] = data
        return key

    def delete(self, key: str) -> None:
        if self.fail_deletes:
            raise MediaDeleteFailure(f"S3 delete failed for {key}: simulated outage")
        self.deleted.append(key)
        self.objects.pop(key, None)


async def count_rows(db: AsyncSession, model, *criteria) -> int:
    stmt = select(func.count()).select_from(model)
    if criteria:
        stmt = stmt.where(*criteria)
    return (await db.execute(stmt)).scalar_one()


def make_jpeg(width: int = 64, height: int = 48, mode: str = "RGB", fmt: str = "JPEG") -> bytes:
    buf = BytesIO()
    Image.new(mode, (width, height), color=(30, 90, 200) if mode == "RGB" else (30, 90, 200, 128)).save(buf, fmt)
    return buf.getvalue()


@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Session over a fresh database holding the sample airlines, types and airports."""
    async_session = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as session:
        await seed(session)
        yield session
        await session.rollback()


@pytest.fixture
def media() -> FakeMediaStore:
    return FakeMediaStore()


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_jpeg()


async def _create_user(db: AsyncSession, username: str, role: str = "user") -> User:
    user = User(username=username, password_hash=hash_password("secret-pass"), type=role)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def user(db_session) -> User:
    return await _create_user(db_session, "spotter")


@pytest.fixture
def user_id(user) -> int:
    # read once, a rollback later in the test expires the instance
    return user.id


@pytest_asyncio.fixture
async def other_user(db_session) -> User:
    return await _create_user(db_session, "rival")


@pytest_asyncio.fixture
async def admin(db_session) -> User:
    return await _create_user(db_session, "boss", role="admin")


def bearer(user: User) -> dict:
    token, _ = create_access_token(user)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(user) -> dict:
    return bearer(user)


@pytest.fixture
def other_headers(other_user) -> dict:
    return bearer(other_user)


@pytest.fixture
def admin_headers(admin) -> dict:
    return bearer(admin)


@pytest_asyncio.fixture
async def client(db_session: AsyncSession, media: FakeMediaStore) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with the database and media store overridden."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_media_store] = lambda: media

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
