"""Logging setup for catalog-service.

All records go through the root logger:

    logger -> root -> QueueHandler (ContextInjectingFilter)
           -> QueueListener thread -> console / rotating file handlers

so request handlers never block on log I/O.
"""

from __future__ import annotations

import atexit
import logging
import logging.config
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path
from queue import Queue
from typing import TYPE_CHECKING, Any

from catalog_service.infra.logging.context import ContextInjectingFilter
from catalog_service.infra.logging.formatters import JSONFormatter

if TYPE_CHECKING:
    from catalog_service.core.settings.logs import LoggingSettings

logger = logging.getLogger(__name__)

TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_listener: QueueListener | None = None
_configured = False


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **overrides: Any,
) -> None:
    """Configure logging from settings, once per process unless *force* is set."""
    global _configured

    if _configured and not force:
        return

    if log_settings is None:
        from catalog_service.core.settings import get_logging_settings

        log_settings = get_logging_settings()

    configure_logging(**{**log_settings.to_logging_kwargs(), **overrides})
    _configured = True


def configure_logging(
    log_level: str = "INFO",
    *,
    json_logs: bool = True,
    include_context: bool = True,
    console_enabled: bool = True,
    file_path: str | Path | None = None,
    file_max_bytes: int = 10 * 1024 * 1024,
    file_backup_count: int = 5,
    service_name: str = "catalog-service",
) -> None:
    """Install the root filter and queue, then start the listener.

    Args:
        log_level: Root level; handlers log everything the root lets through.
        json_logs: JSONL records instead of plain text.
        include_context: Copy ``set_log_context`` fields onto records.
        console_enabled: Attach a stderr handler.
        file_path: Attach a rotating file handler writing here.
        file_max_bytes: Size at which the log file rotates.
        file_backup_count: Number of rotated files to keep.
        service_name: Value of the static ``service`` field in JSON records.
    """
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "root": {"level": log_level.upper(), "handlers": []},
        }
    )
    logging.captureWarnings(True)

    formatter: logging.Formatter = (
        JSONFormatter(static={"service": service_name})
        if json_logs
        else logging.Formatter(TEXT_FORMAT)
    )

    handlers: list[logging.Handler] = []
    if console_enabled:
        handlers.append(logging.StreamHandler())
    if file_path:
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                path,
                maxBytes=file_max_bytes,
                backupCount=file_backup_count,
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.setFormatter(formatter)

    _restart_listener(handlers, include_context=include_context)
    logger.debug(
        "Logging configured",
        extra={"level": log_level, "json": json_logs, "file": str(file_path or "")},
    )


def _restart_listener(handlers: list[logging.Handler], *, include_context: bool) -> None:
    global _listener

    shutdown()
    queue: Queue[logging.LogRecord] = Queue()

    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, QueueHandler)]:
        root.removeHandler(existing)
    queue_handler = QueueHandler(queue)
    # Filtered in the caller's thread, before the record leaves its context
    if include_context:
        queue_handler.addFilter(ContextInjectingFilter())
    root.addHandler(queue_handler)

    if handlers:
        _listener = QueueListener(queue, *handlers, respect_handler_level=True)
        _listener.start()
        atexit.register(shutdown)


def shutdown() -> None:
    """Stop the listener and flush queued records. Safe to call repeatedly."""
    global _listener

    if _listener is not None:
        _listener.stop()
        _listener = None
