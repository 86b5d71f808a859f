"""Connection pagination over SQLAlchemy query plans.

Three modes are supported, selected from the connection arguments:

- forward cursor (``first``/``after``)
- backward cursor (``last``/``before``)
- offset (``offset``/``first``)

Cursor pages use range (keyset) filters relative to a boundary record, with
``id`` as tie-breaker, so results stay stable while paging.

Example:
    plan = QueryPlan(CatalogItem).where(CatalogItem.shop_id == shop_id)
    connection = await paginate(
        session,
        plan,
        {"first": 10, "after": "item-42", "sortBy": "priority"},
        include_total_count=False,
    )
"""

from catalog_service.core.pagination.args import (
    DEFAULT_LIMIT,
    ConnectionArgs,
    PaginationMode,
    SortSpec,
    normalize_connection_args,
)
from catalog_service.core.pagination.boundary import Boundary, resolve_boundary
from catalog_service.core.pagination.engine import assemble_page_info, paginate
from catalog_service.core.pagination.filters import compose_range_filter
from catalog_service.core.pagination.plan import QueryPlan
from catalog_service.core.pagination.schemas import Connection, PageInfo
from catalog_service.core.pagination.store import QueryStore
from catalog_service.core.pagination.strategies import (
    BackwardPaginator,
    ForwardPaginator,
    OffsetPaginator,
    PageWindow,
    Paginator,
    select_paginator,
)

__all__ = [
    "DEFAULT_LIMIT",
    "BackwardPaginator",
    "Boundary",
    "Connection",
    "ConnectionArgs",
    "ForwardPaginator",
    "OffsetPaginator",
    "PageInfo",
    "PageWindow",
    "PaginationMode",
    "Paginator",
    "QueryPlan",
    "QueryStore",
    "SortSpec",
    "assemble_page_info",
    "compose_range_filter",
    "normalize_connection_args",
    "paginate",
    "resolve_boundary",
    "select_paginator",
]
