"""Read-through cache settings for catalog listings.

Environment variables use CATALOG_CACHE_ prefix.
Example: CATALOG_CACHE_TTL=3600, CATALOG_CACHE_ENABLED=false
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ._sanitizers import sanitize_inline_numeric

ONE_WEEK_SECONDS = 604_800


class CatalogCacheSettings(BaseSettings):
    """Catalog listing cache configuration.

    Attributes:
        enabled: Use the read-through cache when Redis is available.
        ttl: Lifetime of cached pages and of the dirty flag, in seconds.
        namespace: Prefix for cached page keys.
        dirty_flag_key: Shared key marking every cached page as stale.
    """

    enabled: bool = Field(default=True, description="Enable the read-through cache")
    ttl: int = Field(
        default=ONE_WEEK_SECONDS,
        ge=1,
        description="Cache TTL in seconds (1 week)",
    )
    namespace: str = Field(
        default="catalogItems",
        min_length=1,
        max_length=100,
        description="Key namespace for cached catalog pages",
    )
    dirty_flag_key: str = Field(
        default="isCatalogUpdated",
        min_length=1,
        max_length=100,
        description="Key of the shared dirty flag",
    )

    @field_validator("ttl", mode="before")
    @classmethod
    def _normalize_ttl(cls, value: Any) -> Any:
        """Allow numeric env vars with inline comments (e.g., "3600  # 1 hour")."""
        return sanitize_inline_numeric(value)

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_CACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )
