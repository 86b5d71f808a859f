"""Application settings."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Core application settings.

    Environment variables use APP_ prefix.
    Example: APP_DEBUG=true, APP_API_PREFIX=/api/v1
    """

    title: str = Field(default="Catalog Service", description="OpenAPI title")
    version: str = Field(default="0.1.0", description="Service version")
    debug: bool = Field(default=False, description="Enable FastAPI debug mode")
    api_prefix: str = Field(
        default="/api/v1",
        pattern=r"^(/[a-zA-Z0-9_-]+)*$",
        description="Prefix for all API routes",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )
