"""API router for the catalog feature.

Endpoints:
    GET  /catalog-items                   - Paginated catalog listing
    POST /catalog-items/cache/invalidate  - Mark cached listings as stale

Example Usage:
    # First page of a shop, 10 items, highest priority first
    GET /catalog-items?shopIds=shop-1&first=10&sortOrder=desc

    # Next page
    GET /catalog-items?shopIds=shop-1&first=10&sortOrder=desc&after=<endCursor>

    # Only in-stock items of one tag, in featured order
    GET /catalog-items?tagIds=tag-1&sortBy=featured&booleanFilters=isSoldOut:false
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Query, Response, status

from catalog_service.core.schemas import ProblemDetails
from catalog_service.features.catalog.dependencies import CatalogItemServiceDep
from catalog_service.features.catalog.schemas import (
    BooleanFilter,
    CatalogItemConnection,
    CatalogItemsRequest,
)

router = APIRouter(prefix="/catalog-items", tags=["catalog"])
logger = logging.getLogger(__name__)


@router.get(
    "",
    response_model=CatalogItemConnection,
    response_model_exclude_none=True,
    summary="List catalog items",
    description="Return one page of catalog items using cursor or offset pagination.",
    responses={
        400: {"model": ProblemDetails, "description": "Invalid parameters"},
        404: {"model": ProblemDetails, "description": "Cursor or tag not found"},
    },
)
async def list_catalog_items(
    service: CatalogItemServiceDep,
    shop_ids: Annotated[list[str] | None, Query(alias="shopIds")] = None,
    tag_ids: Annotated[list[str] | None, Query(alias="tagIds")] = None,
    search_query: Annotated[str | None, Query(alias="searchQuery")] = None,
    is_banner: Annotated[bool | None, Query(alias="isBanner")] = None,
    boolean_filters: Annotated[
        list[str] | None,
        Query(alias="booleanFilters", description="Repeated 'name:true|false' pairs"),
    ] = None,
    first: int | None = None,
    after: str | None = None,
    last: int | None = None,
    before: str | None = None,
    offset: int | None = None,
    sort_by: Annotated[str | None, Query(alias="sortBy")] = None,
    sort_order: Annotated[str | None, Query(alias="sortOrder")] = "asc",
    include_has_next_page: Annotated[bool, Query(alias="includeHasNextPage")] = True,
    include_has_previous_page: Annotated[bool, Query(alias="includeHasPreviousPage")] = True,
    include_total_count: Annotated[bool, Query(alias="includeTotalCount")] = True,
) -> CatalogItemConnection:
    """List catalog items.

    Args:
        service: Catalog service
        shop_ids: Limit to items of these shops
        tag_ids: Limit to items with these tags
        search_query: Case-insensitive title search
        is_banner: Limit to banner (or non-banner) items
        boolean_filters: Filters on boolean flags, e.g. ``isSoldOut:false``
        first: Forward page size
        after: Id of the item the page starts after
        last: Backward page size
        before: Id of the item the page ends before
        offset: Items to skip (offset pagination)
        sort_by: Sort field (defaults to priority)
        sort_order: ``asc`` or ``desc``
        include_has_next_page: Compute ``pageInfo.hasNextPage``
        include_has_previous_page: Compute ``pageInfo.hasPreviousPage``
        include_total_count: Compute ``totalCount``

    Returns:
        The catalog item connection
    """
    request = CatalogItemsRequest(
        shop_ids=shop_ids,
        tag_ids=tag_ids,
        search_query=search_query,
        is_banner=is_banner,
        boolean_filters=[BooleanFilter.parse(raw) for raw in boolean_filters]
        if boolean_filters
        else None,
        first=first,
        after=after,
        last=last,
        before=before,
        offset=offset,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return await service.list_items(
        request,
        include_has_next_page=include_has_next_page,
        include_has_previous_page=include_has_previous_page,
        include_total_count=include_total_count,
    )


@router.post(
    "/cache/invalidate",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Invalidate cached catalog listings",
    description="Mark every cached catalog page as stale.",
)
async def invalidate_catalog_cache(service: CatalogItemServiceDep) -> Response:
    """Set the catalog dirty flag."""
    marked = await service.mark_catalog_updated()
    logger.info("Catalog cache invalidation requested", extra={"marked": marked})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
