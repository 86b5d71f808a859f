"""Read-through cache for paginated results.

The cache is keyed by a hash of the full, unnormalized query signature and
gated by one dirty flag shared by every key in the namespace:

    hit   = cache reachable AND flag says "not updated" AND value stored at key
    miss  = run the loader; if the cache is reachable, store the result with
            the TTL and reset the flag to "not updated"

Invalidation is deliberately coarse. Writers call ``DirtyFlag.mark_updated``
and every cached page of the namespace is bypassed until the next miss
rewrites its own key and clears the flag. Clearing the flag after one
rewrite makes the other keys visible again, so a page cached before the
update may be served until it is itself rewritten or expires. That staleness
window is bounded by the TTL. Concurrent readers can also race a writer
between reading the flag and reading the key; the cache is advisory, so this
is accepted.

Cache failures never fail a request: connection errors and payloads that do
not deserialize are logged and treated as a miss.

Example:
    read_through = ReadThroughCache(
        get_cache_instance(),
        ReadThroughConfig(namespace="catalogItems", dirty_flag_key="isCatalogUpdated"),
        Connection[CatalogItemRead],
    )
    page = await read_through.get_or_load(signature, load_page)
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
import hashlib
import json
import logging
from typing import Any, Generic, Protocol, TypeVar

from pydantic import BaseModel

from catalog_service.core.settings.cache import ONE_WEEK_SECONDS
from catalog_service.infra.cache.redis import CACHE_ERRORS
from catalog_service.infra.metrics.prometheus import (
    cache_errors_total,
    cache_hits_total,
    cache_misses_total,
)

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT", bound=BaseModel)


class CacheBackend(Protocol):
    """The subset of ``RedisCache`` the read-through layer needs."""

    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool: ...


@dataclass(frozen=True, slots=True)
class ReadThroughConfig:
    """Explicit configuration for one cached namespace.

    Attributes:
        namespace: Prefix of every cached key.
        dirty_flag_key: Key of the flag shared by the whole namespace.
        ttl: Lifetime in seconds of cached values and of the cleared flag.
    """

    namespace: str
    dirty_flag_key: str
    ttl: int = ONE_WEEK_SECONDS


class DirtyFlag:
    """Shared "data was updated" marker for a cache namespace.

    The flag is stored as JSON ``true``/``false``. A missing flag means
    "not updated".
    """

    def __init__(self, cache: CacheBackend, key: str, ttl: int = ONE_WEEK_SECONDS) -> None:
        self.cache = cache
        self.key = key
        self.ttl = ttl

    async def is_updated(self) -> bool:
        return await self.cache.get(self.key) is True

    async def mark_updated(self) -> None:
        """Flag every cached value of the namespace as stale."""
        await self.cache.set(self.key, True)
        logger.info("Cache namespace marked as updated", extra={"flag": self.key})

    async def clear(self) -> None:
        await self.cache.set(self.key, False, ttl=self.ttl)


class ReadThroughCache(Generic[ResultT]):
    """Signature-keyed read-through cache gated by a ``DirtyFlag``.

    Args:
        cache: Cache backend, or None to always run the loader.
        config: Namespace, flag key and TTL.
        model_type: Pydantic model used to (de)serialize cached values.
    """

    def __init__(
        self,
        cache: CacheBackend | None,
        config: ReadThroughConfig,
        model_type: type[ResultT],
    ) -> None:
        self.cache = cache
        self.config = config
        self.model_type = model_type
        self.flag = (
            DirtyFlag(cache, config.dirty_flag_key, config.ttl) if cache is not None else None
        )

    def key_for(self, signature: Mapping[str, Any]) -> str:
        """Build the cache key for a query signature.

        Equal signatures give equal keys regardless of mapping order.
        """
        payload = json.dumps(dict(signature), sort_keys=True, default=str, separators=(",", ":"))
        digest = hashlib.sha256(payload.encode()).hexdigest()
        return f"{self.config.namespace}:{digest}"

    async def get_or_load(
        self,
        signature: Mapping[str, Any],
        loader: Callable[[], Awaitable[ResultT]],
    ) -> ResultT:
        """Return the cached value for *signature*, or load and store it.

        Errors raised by *loader* propagate; cache errors do not.
        """
        if self.cache is None or self.flag is None:
            return await loader()

        key = self.key_for(signature)

        try:
            updated = await self.flag.is_updated()
        except CACHE_ERRORS as e:
            self._degraded("flag_read", key, e)
            return await loader()

        if not updated:
            cached = await self._lookup(self.cache, key)
            if cached is not None:
                cache_hits_total.labels(cache_name=self.config.namespace).inc()
                logger.debug("Read-through cache hit", extra={"key": key})
                return cached

        cache_misses_total.labels(cache_name=self.config.namespace).inc()
        logger.debug("Read-through cache miss", extra={"key": key, "flag_updated": updated})

        result = await loader()

        try:
            await self.cache.set(key, result.model_dump(mode="json"), ttl=self.config.ttl)
            await self.flag.clear()
        except CACHE_ERRORS as e:
            self._degraded("write", key, e)

        return result

    async def _lookup(self, cache: CacheBackend, key: str) -> ResultT | None:
        try:
            raw = await cache.get(key)
        except CACHE_ERRORS as e:
            self._degraded("get", key, e)
            return None
        if raw is None:
            return None

        try:
            return self.model_type.model_validate(raw)
        except (TypeError, ValueError) as e:
            self._degraded("deserialize", key, e)
            return None

    def _degraded(self, operation: str, key: str, error: BaseException) -> None:
        cache_errors_total.labels(cache_name=self.config.namespace, operation=operation).inc()
        logger.warning(
            "Read-through cache degraded, falling back to the store",
            extra={"operation": operation, "key": key, "error": str(error)},
        )


__all__ = ["CacheBackend", "DirtyFlag", "ReadThroughCache", "ReadThroughConfig"]
