"""Database engine and session infrastructure."""

from catalog_service.infra.database.session import (
    build_engine,
    build_session_factory,
    close_database,
    create_tables,
    get_async_session,
    get_session_factory,
    init_database,
)

__all__ = [
    "build_engine",
    "build_session_factory",
    "close_database",
    "create_tables",
    "get_async_session",
    "get_session_factory",
    "init_database",
]
