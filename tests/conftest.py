from datetime import datetime

import jwt
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.config import settings
from app.core.database import Base, get_db
from app.main import app

# February 2026: month index 1
NOW = datetime(2026, 2, 15, 12, 0, 0)


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def frozen_now(monkeypatch):
    monkeypatch.setattr(settings, "FROZEN_NOW", NOW)
    return NOW


@pytest.fixture
def make_token():
    def _make(user_id=1, email="user@example.com", **extra):
        payload = {"userId": user_id, "email": email, **extra}
        return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return _make


@pytest.fixture
def auth_headers(make_token):
    def _headers(user_id=1, email="user@example.com"):
        return {"Authorization": f"Bearer {make_token(user_id, email)}"}
    return _headers


@pytest.fixture
async def client(session_factory, frozen_now):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
