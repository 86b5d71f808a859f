"""FastAPI dependencies for the catalog feature.

Example usage:
    @router.get("/catalog-items")
    async def list_catalog_items(service: CatalogItemServiceDep) -> ...:
        ...
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_service.core.dependencies.database import get_db_session
from catalog_service.core.settings import get_catalog_cache_settings
from catalog_service.features.catalog.service import CatalogItemService
from catalog_service.infra.cache import get_cache_instance

SessionDep = Annotated[AsyncSession, Depends(get_db_session)]


def get_catalog_item_service(session: SessionDep) -> CatalogItemService:
    """Build the service with the global cache, if one was started."""
    return CatalogItemService(
        session,
        cache=get_cache_instance(),
        settings=get_catalog_cache_settings(),
    )


CatalogItemServiceDep = Annotated[CatalogItemService, Depends(get_catalog_item_service)]

__all__ = ["CatalogItemServiceDep", "SessionDep", "get_catalog_item_service"]
