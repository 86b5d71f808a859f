"""Logging settings.

Environment variables use LOG_ prefix.
Example: LOG_LEVEL=debug, LOG_JSON_LOGS=false, LOG_FILE_ENABLED=true
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingSettings(BaseSettings):
    """Where catalog-service logs go and in which format.

    Console output is always available; the rotating JSONL file is opt-in.
    """

    service_name: str = Field(default="catalog-service", description="Static 'service' field")
    level: LogLevel = Field(default="INFO", description="Root logger level")
    json_logs: bool = Field(default=True, description="Emit JSON Lines")
    include_context: bool = Field(default=True, description="Add contextvars fields to records")

    console_enabled: bool = Field(default=True, description="Log to stderr")
    file_enabled: bool = Field(default=False, description="Log to a rotating file")
    file_path: Path = Field(
        default=Path("logs/catalog-service.log.jsonl"),
        description="Log file, used when file_enabled is true",
    )
    file_max_bytes: int = Field(default=10 * 1024 * 1024, ge=1024, description="Rotate after")
    file_backup_count: int = Field(default=5, ge=0, le=100, description="Rotated files kept")

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    def to_logging_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``configure_logging``."""
        return {
            "service_name": self.service_name,
            "log_level": self.level,
            "json_logs": self.json_logs,
            "include_context": self.include_context,
            "console_enabled": self.console_enabled,
            "file_path": str(self.file_path) if self.file_enabled else None,
            "file_max_bytes": self.file_max_bytes,
            "file_backup_count": self.file_backup_count,
        }

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        env_ignore_empty=True,
    )
