"""JSON Lines formatter."""
from __future__ import annotations

from datetime import UTC, datetime
import json
import logging
from typing import Any

# Attributes every LogRecord has; anything else came from extra= or the context filter
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__,
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """One JSON object per record, one record per line.

    Output keys: ``timestamp`` (UTC, millisecond precision), ``level``,
    ``logger``, ``message``, the *static* fields, then every non-standard
    record attribute, e.g. the ``key`` passed by the read-through cache:

        {"timestamp": "2025-01-01T00:00:00.123Z", "level": "DEBUG",
         "logger": "catalog_service.infra.cache.read_through",
         "message": "Read-through cache hit", "service": "catalog-service",
         "key": "catalogItems:9f2c..."}
    """

    def __init__(self, static: dict[str, Any] | None = None) -> None:
        super().__init__()
        self.static = dict(static or {})

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=UTC)
        data: dict[str, Any] = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **self.static,
        }
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            data["stack_trace"] = record.stack_info

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and key not in data:
                data[key] = value

        # json.dumps escapes embedded newlines, so each record stays on one line
        return json.dumps(data, ensure_ascii=False, default=str)
