"""Tests for database engine and session lifecycle."""
from __future__ import annotations

import pytest
from sqlalchemy import func, select

from catalog_service.core.dependencies.database import get_db_session
from catalog_service.core.settings.database import DatabaseSettings
from catalog_service.features.catalog.models import CatalogItem
from catalog_service.infra.database import (
    close_database,
    get_async_session,
    get_session_factory,
    init_database,
)


@pytest.fixture
async def database():
    await init_database(DatabaseSettings(url="sqlite+aiosqlite:///:memory:", create_tables=True))
    try:
        yield
    finally:
        await close_database()


def test_session_factory_requires_init():
    with pytest.raises(RuntimeError, match="init_database"):
        get_session_factory()


@pytest.mark.asyncio
async def test_init_creates_tables(database):
    async with get_async_session() as session:
        count = await session.scalar(select(func.count()).select_from(CatalogItem))

    assert count == 0


@pytest.mark.asyncio
async def test_dependency_yields_a_session(database):
    sessions = get_db_session()
    session = await anext(sessions)

    session.add(CatalogItem(id="a", shop_id="s", title="A"))
    await session.commit()
    assert await session.get(CatalogItem, "a") is not None

    await sessions.aclose()


@pytest.mark.asyncio
async def test_close_database_is_idempotent():
    await close_database()
    await close_database()

    with pytest.raises(RuntimeError):
        get_session_factory()
