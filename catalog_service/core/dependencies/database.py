"""Database dependencies for FastAPI route handlers.

Route handlers use ``Depends(get_db_session)``; the session lives for the
duration of the request. Code outside a request uses
``catalog_service.infra.database.get_async_session`` directly.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from catalog_service.infra.database import get_async_session


async def get_db_session() -> AsyncGenerator[AsyncSession]:
    """FastAPI dependency for database session.

    Example:
        @router.get("/items")
        async def list_items(session: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with get_async_session() as session:
        yield session
