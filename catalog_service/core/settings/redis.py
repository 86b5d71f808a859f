"""Redis connection settings for the shared catalog cache.

Environment variables use REDIS_ prefix. ``REDIS_URL`` wins over the
individual host/port/db/password fields when set:

    REDIS_URL=redis://:secret@cache.internal:6379/2
    REDIS_HOST=cache.internal REDIS_DB=2 REDIS_PASSWORD=secret

An empty ``REDIS_URL`` with default components means "no cache".
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote, urlparse

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_HOST = "localhost"


class RedisSettings(BaseSettings):
    """Connection, pool and startup settings for Redis."""

    redis_url: str | None = Field(
        default=None,
        alias="REDIS_URL",
        description="redis:// or rediss:// URL; overrides the component fields",
    )
    host: str = Field(default=DEFAULT_HOST)
    port: int = Field(default=6379, ge=1, le=65535)
    db: int = Field(default=0, ge=0, le=15)
    username: str | None = Field(default=None, description="ACL user (Redis 6+)")
    password: SecretStr | None = None
    ssl_enabled: bool = Field(default=False, description="Connect with rediss://")

    max_connections: int = Field(default=50, ge=1, le=1000, description="Pool size")
    socket_timeout: float = Field(default=5.0, gt=0, le=30.0, description="Per-command timeout")
    socket_connect_timeout: float = Field(default=5.0, gt=0, le=30.0)

    key_prefix: str = Field(
        default="catalog-service:",
        min_length=1,
        max_length=100,
        pattern=r"^[a-zA-Z0-9_-]+:?$",
        description="Prepended to every key this service writes",
    )
    startup_require_cache: bool = Field(
        default=False,
        description="Fail startup when Redis is unreachable instead of running uncached",
    )

    @model_validator(mode="after")
    def _components_from_url(self) -> RedisSettings:
        if not self.redis_url:
            return self

        parsed = urlparse(self.redis_url)
        updates: dict[str, Any] = {"ssl_enabled": parsed.scheme == "rediss"}
        if parsed.hostname:
            updates["host"] = parsed.hostname
        if parsed.port:
            updates["port"] = parsed.port
        if parsed.path.strip("/").isdigit():
            updates["db"] = int(parsed.path.strip("/"))
        if parsed.username:
            updates["username"] = parsed.username
        if parsed.password:
            updates["password"] = SecretStr(parsed.password)

        # Frozen model: write through object.__setattr__
        for name, value in updates.items():
            object.__setattr__(self, name, value)
        return self

    @property
    def url(self) -> str:
        """Connection URL assembled from the (possibly URL-derived) components."""
        scheme = "rediss" if self.ssl_enabled else "redis"
        user = quote(self.username) if self.username else ""
        secret = quote(self.password.get_secret_value()) if self.password else ""
        auth = f"{user}:{secret}@" if secret else (f"{user}@" if user else "")
        return f"{scheme}://{auth}{self.host}:{self.port}/{self.db}"

    @property
    def is_configured(self) -> bool:
        return bool(self.redis_url) or self.host != DEFAULT_HOST

    def connection_pool_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``redis.asyncio.ConnectionPool.from_url``."""
        return {
            "max_connections": self.max_connections,
            "socket_timeout": self.socket_timeout,
            "socket_connect_timeout": self.socket_connect_timeout,
            "decode_responses": True,
        }

    def get_prefixed_key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    model_config = SettingsConfigDict(
        env_prefix="REDIS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        env_ignore_empty=True,
    )
