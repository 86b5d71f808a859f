"""Query construction for catalog listings.

``build_catalog_items_query`` turns the listing filters into a
``QueryPlan``; ``resolve_catalog_sort`` maps the client-facing sort name to
a column and any extra restriction that sort implies.
"""

from __future__ import annotations

from collections.abc import Sequence
import logging
from typing import TYPE_CHECKING

from catalog_service.core.exceptions import InvalidParameterException, NotFoundException
from catalog_service.core.pagination import QueryPlan
from catalog_service.features.catalog.models import CatalogItem

if TYPE_CHECKING:
    from sqlalchemy.orm import InstrumentedAttribute

    from catalog_service.features.catalog.schemas import BooleanFilter

logger = logging.getLogger(__name__)

DEFAULT_SORT_FIELD = "priority"
FEATURED_SORT = "featured"

# Flags clients may filter on, by their API name
BOOLEAN_FILTER_COLUMNS: dict[str, InstrumentedAttribute[bool]] = {
    "isBanner": CatalogItem.is_banner,
    "isSoldOut": CatalogItem.is_sold_out,
    "isBackOrder": CatalogItem.is_back_order,
    "isLowQuantity": CatalogItem.is_low_quantity,
}

# API sort names that differ from the column name
SORT_ALIASES: dict[str, str] = {
    "minPrice": "min_price",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "featuredRank": "featured_rank",
}


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_catalog_items_query(
    *,
    shop_ids: Sequence[str] | None = None,
    tag_ids: Sequence[str] | None = None,
    is_banner: bool | None = None,
    search_query: str | None = None,
    boolean_filters: Sequence[BooleanFilter] | None = None,
) -> QueryPlan[CatalogItem]:
    """Build the base plan for a catalog listing.

    Raises:
        InvalidParameterException: If a boolean filter names an unknown flag.
    """
    plan: QueryPlan[CatalogItem] = QueryPlan(CatalogItem)

    if shop_ids:
        plan = plan.where(CatalogItem.shop_id.in_(list(shop_ids)))
    if tag_ids:
        plan = plan.where(CatalogItem.tag_id.in_(list(tag_ids)))
    if is_banner is not None:
        plan = plan.where(CatalogItem.is_banner.is_(is_banner))

    search = (search_query or "").strip()
    if search:
        plan = plan.where(CatalogItem.title.ilike(f"%{_escape_like(search)}%", escape="\\"))

    for flag in boolean_filters or ():
        column = BOOLEAN_FILTER_COLUMNS.get(flag.name)
        if column is None:
            raise InvalidParameterException(
                detail=f"Unknown boolean filter '{flag.name}'",
                extra={"allowed": sorted(BOOLEAN_FILTER_COLUMNS)},
            )
        plan = plan.where(column.is_(flag.value))

    return plan


def resolve_catalog_sort(
    plan: QueryPlan[CatalogItem],
    sort_by: str | None,
    tag_ids: Sequence[str] | None = None,
) -> tuple[QueryPlan[CatalogItem], str]:
    """Resolve the client sort name into a column name.

    ``featured`` ranks items within a single tag: the plan is narrowed to
    ranked items of that tag. Any other ``sort_by`` is honoured as given
    (after alias lookup) instead of being forced to ``priority``; only an
    omitted sort falls back to ``priority``. Nullable columns such as
    ``featured_rank`` sort their NULLs above every value.

    Returns:
        The (possibly narrowed) plan and the column name to sort by.

    Raises:
        NotFoundException: ``featured`` without a tag id.
        InvalidParameterException: ``featured`` with several tag ids, or a
            sort alias with no backing column.
    """
    if not sort_by:
        return plan, DEFAULT_SORT_FIELD

    if sort_by == FEATURED_SORT:
        if not tag_ids:
            raise NotFoundException(detail="A tag ID is required for featured sort")
        if len(tag_ids) > 1:
            raise InvalidParameterException(
                detail="Multiple tags cannot be sorted by featured",
                extra={"tag_ids": list(tag_ids)},
            )
        narrowed = plan.where(
            CatalogItem.tag_id == tag_ids[0],
            CatalogItem.featured_rank.is_not(None),
        )
        return narrowed, "featured_rank"

    field = SORT_ALIASES.get(sort_by, sort_by)
    if field != sort_by and field not in CatalogItem.__mapper__.column_attrs.keys():
        logger.warning("Rejected sort alias without a backing column", extra={"sort_by": sort_by})
        raise InvalidParameterException(detail=f"Sorting by {sort_by} is not supported")
    return plan, field


__all__ = [
    "BOOLEAN_FILTER_COLUMNS",
    "DEFAULT_SORT_FIELD",
    "SORT_ALIASES",
    "build_catalog_items_query",
    "resolve_catalog_sort",
]
