"""Logging infrastructure.

Structured logging built on the standard library:
- JSONL format for log aggregation
- Automatic context injection (request_id, cache_key, ...) via contextvars
- QueueHandler + QueueListener for non-blocking I/O

Basic usage:
    from catalog_service.infra.logging import set_log_context
    import logging

    logger = logging.getLogger(__name__)

    set_log_context(request_id="abc-123")
    logger.info("Listing catalog items")  # Includes request_id
"""

from catalog_service.infra.logging.config import configure_logging, setup_logging, shutdown
from catalog_service.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    set_log_context,
)
from catalog_service.infra.logging.formatters import JSONFormatter

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "clear_log_context",
    "configure_logging",
    "get_log_context",
    "set_log_context",
    "setup_logging",
    "shutdown",
]
