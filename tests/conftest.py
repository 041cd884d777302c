"""Pytest configuration and fixtures."""

import os

# Point the app at SQLite before any corpusdb module builds its engine.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from corpusdb.db.seed import seed_enumerations, seed_toy_data
from corpusdb.db.session import create_engine, create_schema, get_db
from corpusdb.main import app

# In-memory SQLite; StaticPool keeps every session on the same connection
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ADMIN_ID = 1
SUPERVISOR_ID = 2
REGULAR_ID = 3


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh database with tables and views for each test."""
    engine = create_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )
    await create_schema(engine)

    yield engine

    # The in-memory database goes away with its only connection
    await engine.dispose()


@pytest_asyncio.fixture
async def bare_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """A session on an empty schema (no enumerations, no toy data)."""
    async_session = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def db_session(bare_session: AsyncSession) -> AsyncSession:
    """A session on a schema loaded with enumerations and the toy corpus."""
    await seed_enumerations(bare_session)
    await seed_toy_data(bare_session)
    await bare_session.commit()
    return bare_session


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""

    async def override_get_db():
        try:
            yield db_session
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


def as_user(user_id: int) -> dict:
    """Headers naming the acting user."""
    return {"X-User-Id": str(user_id)}


@pytest_asyncio.fixture
async def admin_headers() -> dict:
    return as_user(ADMIN_ID)


@pytest_asyncio.fixture
async def supervisor_headers() -> dict:
    return as_user(SUPERVISOR_ID)


@pytest_asyncio.fixture
async def regular_headers() -> dict:
    return as_user(REGULAR_ID)
