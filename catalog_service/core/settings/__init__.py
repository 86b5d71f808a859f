"""Modular Pydantic Settings v2 configuration.

Each domain has its own frozen settings model with a dedicated environment
prefix. Import settings via the cached loaders:

    from catalog_service.core.settings import get_redis_settings

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables
    3. .env file
"""

from __future__ import annotations

from .loader import (
    get_app_settings,
    get_catalog_cache_settings,
    get_db_settings,
    get_logging_settings,
    get_pagination_settings,
    get_redis_settings,
)

__all__ = [
    "get_app_settings",
    "get_catalog_cache_settings",
    "get_db_settings",
    "get_logging_settings",
    "get_pagination_settings",
    "get_redis_settings",
]
