"""Async Redis client used as the shared catalog cache.

Values are stored as JSON text under ``RedisSettings.key_prefix``. Every
call is one round-trip with no retry; failures surface as one of
``CACHE_ERRORS`` and the caller decides whether that is fatal. The
read-through layer never lets them fail a request.
"""

from __future__ import annotations

from contextlib import contextmanager
import json
import logging
import time
from typing import TYPE_CHECKING, Any, cast

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import RedisError

from catalog_service.infra.metrics.prometheus import (
    cache_hits_total,
    cache_misses_total,
    cache_operation_duration_seconds,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Iterator

    from catalog_service.core.settings.redis import RedisSettings

logger = logging.getLogger(__name__)

# RuntimeError covers "not connected"
CACHE_ERRORS: tuple[type[BaseException], ...] = (RedisError, OSError, RuntimeError)


class RedisCache:
    """JSON get/set/delete over a pooled ``redis.asyncio`` client.

    Example:
        cache = RedisCache(get_redis_settings())
        await cache.connect()
        await cache.set("catalogItems:abc", page.model_dump(mode="json"), ttl=604800)
        cached = await cache.get("catalogItems:abc")
        await cache.disconnect()
    """

    def __init__(
        self,
        settings: RedisSettings | None = None,
        *,
        client: Redis | None = None,
        cache_name: str = "redis",
    ) -> None:
        """Create an unconnected cache.

        Args:
            settings: Connection settings; loaded from the environment if omitted.
            client: Ready client to use instead of ``connect()`` (tests).
            cache_name: ``cache_name`` label of the emitted metrics.
        """
        if settings is None:
            from catalog_service.core.settings import get_redis_settings

            settings = get_redis_settings()
        self._settings = settings
        self._client = client
        self._pool: ConnectionPool | None = None
        self._cache_name = cache_name

    @property
    def client(self) -> Redis:
        if self._client is None:
            msg = "Redis client not connected; call connect() first"
            raise RuntimeError(msg)
        return self._client

    async def connect(self) -> None:
        """Open the pool and PING once.

        Raises:
            RedisError: The server cannot be reached.
        """
        logger.info(
            "Connecting to Redis",
            extra={
                "host": self._settings.host,
                "port": self._settings.port,
                "db": self._settings.db,
                "pool_size": self._settings.max_connections,
            },
        )
        self._pool = ConnectionPool.from_url(
            self._settings.url, **self._settings.connection_pool_kwargs(),
        )
        self._client = Redis(connection_pool=self._pool)
        try:
            await cast("Awaitable[bool]", self._client.ping())
        except CACHE_ERRORS:
            await self.disconnect()
            raise
        logger.info("Connected to Redis")

    async def disconnect(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        if self._pool is not None:
            await self._pool.aclose()
            self._pool = None
        logger.info("Redis connection closed")

    @contextmanager
    def _timed(self, operation: str) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        finally:
            cache_operation_duration_seconds.labels(
                operation=operation, cache_name=self._cache_name,
            ).observe(time.perf_counter() - start)

    async def get(self, key: str) -> Any | None:
        """Return the decoded value at *key*, or None when absent.

        Text that is not JSON is returned as-is.
        """
        with self._timed("get"):
            raw = await self.client.get(self._settings.get_prefixed_key(key))

        if raw is None:
            cache_misses_total.labels(cache_name=self._cache_name).inc()
            return None
        cache_hits_total.labels(cache_name=self._cache_name).inc()
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            return raw

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Store *value* JSON-encoded, expiring after *ttl* seconds.

        Strings are encoded too, so ``"123"`` reads back as text, not a number.
        """
        payload = json.dumps(value)
        with self._timed("set"):
            stored = await self.client.set(self._settings.get_prefixed_key(key), payload, ex=ttl)
        return bool(stored)

    async def delete(self, key: str) -> bool:
        with self._timed("delete"):
            removed = await self.client.delete(self._settings.get_prefixed_key(key))
        return bool(removed)

    async def health_check(self) -> bool:
        try:
            await cast("Awaitable[bool]", self.client.ping())
        except CACHE_ERRORS as e:
            logger.warning("Redis health check failed", extra={"error": str(e)})
            return False
        return True


_cache: RedisCache | None = None


async def start_cache(settings: RedisSettings | None = None) -> RedisCache:
    """Connect the process-wide cache (application startup)."""
    global _cache

    cache = RedisCache(settings)
    await cache.connect()
    _cache = cache
    return cache


async def stop_cache() -> None:
    """Disconnect the process-wide cache, if any (application shutdown)."""
    global _cache

    if _cache is None:
        return
    try:
        await _cache.disconnect()
    except CACHE_ERRORS as e:
        logger.warning("Error while closing Redis", extra={"error": str(e)})
    finally:
        _cache = None


def get_cache_instance() -> RedisCache | None:
    """Return the process-wide cache, or None when it was not started."""
    return _cache
