"""Paginator strategies.

Each strategy takes the sorted, range-filtered plan, derives the window
for the page and computes whichever page flags it can determine with a
cheap probe read:

- ``ForwardPaginator`` (``first``/``after``): knows ``has_next_page``
- ``BackwardPaginator`` (``last``/``before``): knows ``has_previous_page``
- ``OffsetPaginator`` (``offset``/``first``): knows both

A flag a strategy cannot determine stays None and is filled in later from
the boundary fallback.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Any

from catalog_service.core.pagination.args import DEFAULT_LIMIT, PaginationMode
from catalog_service.infra.metrics.prometheus import pagination_probe_queries_total

if TYPE_CHECKING:
    from catalog_service.core.pagination.args import ConnectionArgs
    from catalog_service.core.pagination.plan import QueryPlan
    from catalog_service.core.pagination.store import QueryStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PageWindow:
    """Plan for the page read plus the flags computed on the way."""

    plan: QueryPlan[Any]
    has_next_page: bool | None = None
    has_previous_page: bool | None = None


class Paginator(ABC):
    """Base class for pagination strategies."""

    mode: PaginationMode

    def __init__(self, args: ConnectionArgs) -> None:
        self.args = args

    @abstractmethod
    async def apply(
        self,
        store: QueryStore,
        plan: QueryPlan[Any],
        *,
        include_has_next_page: bool = True,
        include_has_previous_page: bool = True,
    ) -> PageWindow:
        """Derive the page window from *plan*."""

    def _probe(self, probe: str) -> None:
        pagination_probe_queries_total.labels(strategy=self.mode.value, probe=probe).inc()


class ForwardPaginator(Paginator):
    mode = PaginationMode.FORWARD

    async def apply(
        self,
        store: QueryStore,
        plan: QueryPlan[Any],
        *,
        include_has_next_page: bool = True,
        include_has_previous_page: bool = True,
    ) -> PageWindow:
        limit = self.args.first or DEFAULT_LIMIT
        has_next_page = None
        if include_has_next_page:
            # One row past the page is enough to know whether there is more
            self._probe("limit_plus_one")
            has_next_page = await store.count(plan.window(0, limit + 1)) > limit
        return PageWindow(plan=plan.window(0, limit), has_next_page=has_next_page)


class BackwardPaginator(Paginator):
    mode = PaginationMode.BACKWARD

    async def apply(
        self,
        store: QueryStore,
        plan: QueryPlan[Any],
        *,
        include_has_next_page: bool = True,
        include_has_previous_page: bool = True,
    ) -> PageWindow:
        limit = self.args.last or DEFAULT_LIMIT
        self._probe("count")
        total = await store.count(plan)
        skip = max(0, total - limit)

        has_previous_page = None
        if include_has_previous_page:
            if skip == 0:
                has_previous_page = False
            else:
                self._probe("limit_plus_one")
                has_previous_page = await store.count(plan.window(skip - 1, limit + 1)) > limit

        logger.debug(
            "Backward page window",
            extra={"total": total, "skip": skip, "limit": limit},
        )
        return PageWindow(plan=plan.window(skip, limit), has_previous_page=has_previous_page)


class OffsetPaginator(Paginator):
    mode = PaginationMode.OFFSET

    async def apply(
        self,
        store: QueryStore,
        plan: QueryPlan[Any],
        *,
        include_has_next_page: bool = True,
        include_has_previous_page: bool = True,
    ) -> PageWindow:
        limit = self.args.first or DEFAULT_LIMIT
        skip = self.args.offset or 0

        has_next_page = None
        if include_has_next_page:
            self._probe("exists")
            has_next_page = await store.exists(plan.window(skip + limit, 1))
        return PageWindow(
            plan=plan.window(skip, limit),
            has_next_page=has_next_page,
            has_previous_page=skip > 0,
        )


_PAGINATORS: dict[PaginationMode, type[Paginator]] = {
    PaginationMode.FORWARD: ForwardPaginator,
    PaginationMode.BACKWARD: BackwardPaginator,
    PaginationMode.OFFSET: OffsetPaginator,
}


def select_paginator(args: ConnectionArgs) -> Paginator:
    """Return the strategy for the (normalized) argument set."""
    return _PAGINATORS[args.mode](args)


__all__ = [
    "BackwardPaginator",
    "ForwardPaginator",
    "OffsetPaginator",
    "PageWindow",
    "Paginator",
    "select_paginator",
]
