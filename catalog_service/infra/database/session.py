"""Database engine and session management.

The engine is created by ``init_database()`` during application startup and
disposed by ``close_database()`` on shutdown. Use ``get_async_session()``
anywhere outside a request (scripts, tests); route handlers use the
``get_db_session`` dependency.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from catalog_service.core.database.base import Base

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from catalog_service.core.settings.database import DatabaseSettings

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def build_engine(url: str, *, echo: bool = False) -> AsyncEngine:
    """Create an async engine for *url*.

    In-memory SQLite databases live as long as their connection, so they
    share a single connection through ``StaticPool``.
    """
    kwargs: dict[str, Any] = {"echo": echo}
    if url.startswith("sqlite") and ":memory:" in url:
        kwargs["poolclass"] = StaticPool
        kwargs["connect_args"] = {"check_same_thread": False}
    return create_async_engine(url, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create every table registered on ``Base.metadata`` that is missing."""
    # Import models so they register on the metadata
    from catalog_service.features.catalog import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def init_database(settings: DatabaseSettings | None = None) -> AsyncEngine:
    """Create the engine, check connectivity and optionally create tables.

    Raises:
        SQLAlchemyError: If the database cannot be reached.
    """
    global _engine, _session_factory

    if settings is None:
        from catalog_service.core.settings import get_db_settings

        settings = get_db_settings()

    logger.info("Initializing database connection", extra={"echo": settings.echo})

    engine = build_engine(settings.url, echo=settings.echo)
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        if settings.create_tables:
            await create_tables(engine)
    except Exception as e:
        logger.error("Failed to connect to database", extra={"error": str(e)})
        await engine.dispose()
        raise

    _engine = engine
    _session_factory = build_session_factory(engine)
    logger.info("Database connection established successfully")
    return engine


async def close_database() -> None:
    """Dispose the engine. Safe to call when the database was never initialized."""
    global _engine, _session_factory
    logger.info("Closing database connection")

    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
    logger.info("Database connection closed successfully")


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the session factory.

    Raises:
        RuntimeError: If ``init_database()`` has not run.
    """
    if _session_factory is None:
        msg = "Database not initialized. Call init_database() first."
        raise RuntimeError(msg)
    return _session_factory


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Get async database session.

    Example:
        async with get_async_session() as session:
            result = await session.execute(select(CatalogItem))
    """
    async with get_session_factory()() as session:
        yield session


__all__ = [
    "build_engine",
    "build_session_factory",
    "close_database",
    "create_tables",
    "get_async_session",
    "get_session_factory",
    "init_database",
]
