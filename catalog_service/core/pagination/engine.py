"""Pagination pipeline.

``paginate`` runs one request through the full pipeline:

1. normalize the connection arguments (no store access)
2. resolve the sort column and count the base-filtered collection
3. resolve the ``before``/``after`` boundary record
4. compose the range filter and sort the plan
5. let the selected paginator derive the window and probe for flags
6. read the page and assemble ``PageInfo``

Store errors propagate unchanged. Nothing here is cached; see
``catalog_service.infra.cache.read_through`` for that layer.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import logging
from typing import TYPE_CHECKING, Any

from catalog_service.core.pagination.args import ConnectionArgs, normalize_connection_args
from catalog_service.core.pagination.boundary import resolve_boundary
from catalog_service.core.pagination.filters import compose_range_filter
from catalog_service.core.pagination.schemas import Connection, PageInfo
from catalog_service.core.pagination.store import QueryStore
from catalog_service.core.pagination.strategies import PageWindow, select_paginator
from catalog_service.infra.metrics.prometheus import pagination_pages_total

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from catalog_service.core.pagination.plan import QueryPlan

logger = logging.getLogger(__name__)


def assemble_page_info(
    nodes: Sequence[Any],
    window: PageWindow,
    *,
    has_more: bool,
    include_has_next_page: bool = True,
    include_has_previous_page: bool = True,
) -> PageInfo:
    """Merge computed flags, the boundary fallback and the page cursors.

    A flag computed by the paginator always wins; ``has_more`` only fills
    in a flag the paginator could not determine. Flags the caller did not
    ask for are left out.
    """
    has_next_page = None
    if include_has_next_page:
        has_next_page = window.has_next_page if window.has_next_page is not None else has_more

    has_previous_page = None
    if include_has_previous_page:
        has_previous_page = (
            window.has_previous_page if window.has_previous_page is not None else has_more
        )

    start_cursor = end_cursor = None
    if nodes:
        start_cursor = str(nodes[0].id)
        end_cursor = str(nodes[-1].id)

    return PageInfo(
        has_next_page=has_next_page,
        has_previous_page=has_previous_page,
        start_cursor=start_cursor,
        end_cursor=end_cursor,
    )


async def paginate(
    session: AsyncSession,
    plan: QueryPlan[Any],
    args: ConnectionArgs | Mapping[str, Any] | None = None,
    *,
    include_has_next_page: bool = True,
    include_has_previous_page: bool = True,
    include_total_count: bool = True,
    default_limit: int | None = None,
) -> Connection[Any]:
    """Read one page of *plan* according to the connection arguments.

    Args:
        session: Database session.
        plan: Base plan carrying the filter; its sort and window are replaced.
        args: Connection arguments (``first``, ``after``, ``last``, ``before``,
            ``offset``, ``sortBy``, ``sortOrder``).
        include_has_next_page: Compute ``page_info.has_next_page``.
        include_has_previous_page: Compute ``page_info.has_previous_page``.
        include_total_count: Compute ``total_count`` over the base filter.
        default_limit: Page size when neither ``first`` nor ``last`` is given.
            Defaults to the pagination settings.

    Returns:
        The connection with ORM nodes in sort order.

    Raises:
        InvalidParameterException: For invalid argument combinations or an
            unknown sort field.
        NotFoundException: If ``before``/``after`` does not match a record.
    """
    if default_limit is None:
        from catalog_service.core.settings import get_pagination_settings

        default_limit = get_pagination_settings().default_limit

    args = normalize_connection_args(args, default_limit=default_limit)
    base = plan.unwindowed()
    sort = args.sort
    sort_column = base.column(sort.field)
    store = QueryStore(session)

    total_count = None
    if include_total_count:
        total_count = await store.count(base)

    boundary = await resolve_boundary(store, base, args)
    has_more = boundary is not None

    criteria = compose_range_filter(
        base.criteria,
        sort_column=sort_column,
        id_column=base.id_column,
        sort_order=sort.order,
        after=boundary if boundary is not None and boundary.direction == "after" else None,
        before=boundary if boundary is not None and boundary.direction == "before" else None,
    )
    ranged = base.with_criteria(criteria).sorted_by(sort)

    paginator = select_paginator(args)
    window = await paginator.apply(
        store,
        ranged,
        include_has_next_page=include_has_next_page,
        include_has_previous_page=include_has_previous_page,
    )
    nodes = await store.fetch(window.plan)
    pagination_pages_total.labels(strategy=paginator.mode.value).inc()

    logger.debug(
        "Page read",
        extra={
            "model": plan.model.__name__,
            "mode": paginator.mode.value,
            "sort_by": sort.field,
            "sort_order": sort.order,
            "nodes": len(nodes),
        },
    )

    page_info = assemble_page_info(
        nodes,
        window,
        has_more=has_more,
        include_has_next_page=include_has_next_page,
        include_has_previous_page=include_has_previous_page,
    )
    return Connection(nodes=nodes, page_info=page_info, total_count=total_count)


__all__ = ["assemble_page_info", "paginate"]
