"""Pagination settings for connection-style list responses.

Read from PAGINATION_* variables, e.g. PAGINATION_DEFAULT_LIMIT=50.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaginationSettings(BaseSettings):
    """Limits applied by ``normalize`` to every paginated list."""

    default_limit: int = Field(default=20, ge=1, le=1000, description="Page size without first/last")

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )
