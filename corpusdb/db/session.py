"""Database engine, session factory and schema bootstrap."""

import logging
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from corpusdb.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


class Base(DeclarativeBase):
    """Declarative base for all corpus tables."""


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite ignores FK clauses unless the pragma is set per connection."""
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_engine(url: str, **kwargs) -> AsyncEngine:
    """Create an async engine with the corpus connection defaults."""
    engine = create_async_engine(url, **kwargs)
    enable_sqlite_foreign_keys(engine)
    return engine


engine = create_engine(settings.database_url, echo=settings.database_echo)

async_session_maker = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a session per request."""
    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def create_schema(bind: AsyncEngine) -> None:
    """Create all tables and the derived views on top of them."""
    # Registers the view DDL listeners on Base.metadata.
    from corpusdb.db import models, views  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_schema(bind: AsyncEngine) -> None:
    """Drop the views and all tables."""
    from corpusdb.db import models, views  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def init_db() -> None:
    """Create the schema and load bootstrap data according to settings."""
    from corpusdb.db.seed import seed_enumerations, seed_toy_data

    await create_schema(engine)

    async with async_session_maker() as db:
        if settings.seed_enumerations:
            await seed_enumerations(db)
        if settings.seed_toy_data:
            await seed_toy_data(db)
        await db.commit()

    logger.info("Schema ready on %s", engine.dialect.name)
