"""Cache infrastructure using Redis."""
from __future__ import annotations

from catalog_service.infra.cache.read_through import (
    CacheBackend,
    DirtyFlag,
    ReadThroughCache,
    ReadThroughConfig,
)
from catalog_service.infra.cache.redis import (
    CACHE_ERRORS,
    RedisCache,
    get_cache_instance,
    start_cache,
    stop_cache,
)

__all__ = [
    "CACHE_ERRORS",
    "CacheBackend",
    "DirtyFlag",
    "ReadThroughCache",
    "ReadThroughConfig",
    "RedisCache",
    "get_cache_instance",
    "start_cache",
    "stop_cache",
]
