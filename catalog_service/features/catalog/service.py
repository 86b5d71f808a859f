"""Service layer for the catalog feature."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from catalog_service.core.pagination import paginate
from catalog_service.features.catalog.queries import (
    build_catalog_items_query,
    resolve_catalog_sort,
)
from catalog_service.features.catalog.schemas import (
    CatalogItemConnection,
    CatalogItemRead,
)
from catalog_service.infra.cache import (
    CACHE_ERRORS,
    DirtyFlag,
    ReadThroughCache,
    ReadThroughConfig,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from catalog_service.core.settings.cache import CatalogCacheSettings
    from catalog_service.features.catalog.schemas import CatalogItemsRequest
    from catalog_service.infra.cache import CacheBackend

logger = logging.getLogger(__name__)


class CatalogItemService:
    """Catalog listings behind the read-through cache.

    Handles:
    - Building the listing query from filters and the sort name
    - Paginating it with the connection arguments
    - Caching pages per request signature, invalidated by the catalog flag
    """

    def __init__(
        self,
        session: AsyncSession,
        cache: CacheBackend | None = None,
        settings: CatalogCacheSettings | None = None,
        *,
        default_limit: int | None = None,
    ) -> None:
        """Initialize the catalog service.

        Args:
            session: Database session for reads
            cache: Shared cache, or None to read through to the database
            settings: Cache settings (loaded from the environment if omitted)
            default_limit: Page size override (pagination settings if omitted)
        """
        if settings is None:
            from catalog_service.core.settings import get_catalog_cache_settings

            settings = get_catalog_cache_settings()

        self._session = session
        self._default_limit = default_limit
        self._cache = cache if settings.enabled else None
        self._config = ReadThroughConfig(
            namespace=settings.namespace,
            dirty_flag_key=settings.dirty_flag_key,
            ttl=settings.ttl,
        )
        self._read_through = ReadThroughCache(self._cache, self._config, CatalogItemConnection)

    async def list_items(
        self,
        request: CatalogItemsRequest,
        *,
        include_has_next_page: bool = True,
        include_has_previous_page: bool = True,
        include_total_count: bool = True,
    ) -> CatalogItemConnection:
        """Return one page of catalog items.

        The cache signature is the request as received plus the include
        flags, so pages computed with different flags never collide.

        Raises:
            InvalidParameterException: Invalid connection arguments, filters
                or sort.
            NotFoundException: Unknown cursor, or ``featured`` sort without
                a tag.
        """
        signature = {
            "args": request.model_dump(mode="json", by_alias=True),
            "include": {
                "hasNextPage": include_has_next_page,
                "hasPreviousPage": include_has_previous_page,
                "totalCount": include_total_count,
            },
        }

        async def load() -> CatalogItemConnection:
            plan = build_catalog_items_query(
                shop_ids=request.shop_ids,
                tag_ids=request.tag_ids,
                is_banner=request.is_banner,
                search_query=request.search_query,
                boolean_filters=request.boolean_filters,
            )
            plan, sort_field = resolve_catalog_sort(plan, request.sort_by, request.tag_ids)
            connection = await paginate(
                self._session,
                plan,
                request.connection_args(sort_field),
                include_has_next_page=include_has_next_page,
                include_has_previous_page=include_has_previous_page,
                include_total_count=include_total_count,
                default_limit=self._default_limit,
            )
            return CatalogItemConnection(
                nodes=[CatalogItemRead.model_validate(node) for node in connection.nodes],
                page_info=connection.page_info,
                total_count=connection.total_count,
            )

        return await self._read_through.get_or_load(signature, load)

    async def mark_catalog_updated(self) -> bool:
        """Flag every cached catalog page as stale.

        Returns:
            True if the flag was written, False if no cache is available.
        """
        if self._cache is None:
            logger.info("Catalog cache disabled or unavailable, nothing to invalidate")
            return False
        try:
            await DirtyFlag(self._cache, self._config.dirty_flag_key, self._config.ttl).mark_updated()
        except CACHE_ERRORS as e:
            logger.warning("Failed to mark catalog as updated", extra={"error": str(e)})
            return False
        return True


__all__ = ["CatalogItemService"]
