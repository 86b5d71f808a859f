"""Per-task log fields.

Fields set with ``set_log_context`` are copied onto every record logged from
the same asyncio task (each task works on its own copy of the context).
"""

from __future__ import annotations

from contextvars import ContextVar
import logging
from typing import Any

_fields: ContextVar[dict[str, Any] | None] = ContextVar("log_fields", default=None)


def set_log_context(**fields: Any) -> None:
    """Add *fields* to every following record of the current task.

    Example:
        set_log_context(request_id="abc-123")
        logger.info("Listing catalog items")  # record carries request_id
    """
    _fields.set({**(_fields.get() or {}), **fields})


def get_log_context() -> dict[str, Any]:
    return dict(_fields.get() or {})


def clear_log_context() -> None:
    _fields.set(None)


class ContextInjectingFilter(logging.Filter):
    """Root-logger filter that copies the task's log fields onto records.

    Attributes already on the record (e.g. from ``extra=``) take precedence.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for name, value in (_fields.get() or {}).items():
            record.__dict__.setdefault(name, value)
        return True
