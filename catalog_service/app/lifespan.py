"""Startup and shutdown of the catalog service.

Logging comes up first, then the database engine, then the Redis cache
(skipped when Redis is unconfigured or the catalog cache is disabled).
Teardown runs in the opposite order.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import TYPE_CHECKING

from catalog_service.core.settings import (
    get_app_settings,
    get_catalog_cache_settings,
    get_logging_settings,
    get_redis_settings,
)
from catalog_service.infra.cache.redis import CACHE_ERRORS, start_cache, stop_cache
from catalog_service.infra.database import close_database, init_database
from catalog_service.infra.logging.config import setup_logging

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


async def _startup_core() -> None:
    app = get_app_settings()
    setup_logging(log_settings=get_logging_settings(), force=True)
    logger.info(
        "Application starting",
        extra={"service": app.title, "version": app.version, "debug": app.debug},
    )


async def _startup_cache() -> None:
    """Connect Redis, or continue without a cache unless it is required."""
    redis = get_redis_settings()
    catalog_cache = get_catalog_cache_settings()

    if not redis.is_configured or not catalog_cache.enabled:
        logger.info(
            "Catalog cache not started",
            extra={"redis_configured": redis.is_configured, "enabled": catalog_cache.enabled},
        )
        return

    try:
        await start_cache(redis)
    except CACHE_ERRORS as e:
        if redis.startup_require_cache:
            logger.exception(
                "Redis cache required but unavailable, failing startup",
                extra={"startup_require_cache": True},
            )
            raise
        logger.warning(
            "Redis cache unavailable, continuing in degraded mode",
            extra={"error": str(e), "startup_require_cache": False},
        )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """FastAPI ``lifespan`` hook; a failed required cache aborts startup."""
    _ = app

    await _startup_core()
    await init_database()
    await _startup_cache()

    logger.info("Application startup complete")

    try:
        yield
    finally:
        logger.info("Application shutting down")
        await stop_cache()
        await close_database()
        logger.info("Application shutdown complete")
