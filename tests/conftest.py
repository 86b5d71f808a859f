"""Pytest configuration and shared fixtures.

Organization:
    - Database Fixtures: in-memory SQLite engine, session and seeded catalog
    - Cache Fixtures: in-memory cache double with failure injection
    - Application Fixtures: FastAPI app and HTTP client
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
import json
import os
from typing import TYPE_CHECKING, Any

import pytest
from httpx import ASGITransport, AsyncClient
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_service.core.database import Base
from catalog_service.core.settings.cache import CatalogCacheSettings
from catalog_service.features.catalog.models import CatalogItem
from catalog_service.infra.database import build_engine, build_session_factory

if TYPE_CHECKING:
    from fastapi import FastAPI
    from sqlalchemy.ext.asyncio import AsyncEngine

# Ensure tests run without external infrastructure
os.environ.setdefault("REDIS_URL", "")
os.environ.setdefault("DB_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FILE_ENABLED", "false")


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Fresh in-memory SQLite engine with all tables created."""
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Async session bound to the in-memory engine."""
    async with build_session_factory(db_engine)() as session:
        try:
            yield session
        finally:
            await session.rollback()


def make_catalog_item(index: int, **overrides: Any) -> CatalogItem:
    """Build a shop-1 catalog item.

    ``priority`` is ``index // 2`` so pairs of items share a priority, which
    exercises the ``id`` tie-breaker.
    """
    values: dict[str, Any] = {
        "id": f"item-{index:02d}",
        "shop_id": "shop-1",
        "tag_id": "tag-a" if index % 2 == 0 else "tag-b",
        "title": f"Item {index}",
        "priority": index // 2,
        "min_price": 10.0 * (10 - index),
        "featured_rank": 10 - index if index % 2 == 0 else None,
        "is_banner": index == 0,
        "is_sold_out": index in (3, 4),
    }
    values.update(overrides)
    return CatalogItem(**values)


@pytest.fixture
def catalog_item_factory():
    """Return ``make_catalog_item`` for tests that seed their own rows."""
    return make_catalog_item


@pytest.fixture
async def catalog_items(db_session: AsyncSession) -> list[CatalogItem]:
    """Ten shop-1 items (``item-00`` .. ``item-09``) and two shop-2 items."""
    items = [make_catalog_item(i) for i in range(10)]
    items[5].title = "Blue Widget"
    items += [
        make_catalog_item(i, id=f"other-{i:02d}", shop_id="shop-2", tag_id="tag-c")
        for i in range(2)
    ]
    db_session.add_all(items)
    await db_session.commit()
    return items


# ============================================================================
# Cache Fixtures
# ============================================================================


class FakeCache:
    """In-memory stand-in for ``RedisCache``.

    Values are stored as JSON text and decoded on read, like the real
    client. Failures are injected per operation (``fail_on``) or per key
    (``fail_keys``).
    """

    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}
        self.fail_on: set[str] = set()
        self.fail_keys: set[str] = set()
        self.get_calls: list[str] = []
        self.set_calls: list[str] = []

    def _check(self, operation: str, key: str) -> None:
        if operation in self.fail_on or key in self.fail_keys:
            msg = f"cache unavailable ({operation} {key})"
            raise RedisConnectionError(msg)

    async def get(self, key: str) -> Any | None:
        self.get_calls.append(key)
        self._check("get", key)
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            return raw

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        self.set_calls.append(key)
        self._check("set", key)
        self.store[key] = json.dumps(value)
        self.ttls[key] = ttl
        return True

    async def delete(self, key: str) -> bool:
        self._check("delete", key)
        self.ttls.pop(key, None)
        return self.store.pop(key, None) is not None


@pytest.fixture
def fake_cache() -> FakeCache:
    return FakeCache()


@pytest.fixture
def catalog_cache_settings() -> CatalogCacheSettings:
    return CatalogCacheSettings(enabled=True, ttl=604800)


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def app(
    db_session: AsyncSession,
    fake_cache: FakeCache,
    catalog_cache_settings: CatalogCacheSettings,
) -> FastAPI:
    """FastAPI app whose catalog service uses the test session and cache."""
    from catalog_service.app.main import create_app
    from catalog_service.features.catalog.dependencies import get_catalog_item_service
    from catalog_service.features.catalog.service import CatalogItemService

    application = create_app()
    application.dependency_overrides[get_catalog_item_service] = lambda: CatalogItemService(
        db_session,
        cache=fake_cache,
        settings=catalog_cache_settings,
    )
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client for the app (lifespan is not run)."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
