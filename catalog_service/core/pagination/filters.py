"""Range filters for cursor pagination.

The range filter implements the seek (keyset) method: instead of skipping
rows, it restricts the result to rows strictly beyond a boundary record in
the requested sort order.

How it works:
    For ORDER BY priority ASC, id ASC and a page after the record (p1, id1):
    WHERE (priority > p1) OR (priority = p1 AND id > id1)

    The ``id`` term breaks ties on the sort field, giving a total order.
    When sorting by ``id`` itself a single comparison is enough:
    WHERE id > id1

    On a nullable sort column NULL ranks above every value (NULLS LAST
    ascending, NULLS FIRST descending), so the NULL rows form one more
    tie group at the high end:
    WHERE (rank > r1) OR (rank = r1 AND id > id1) OR rank IS NULL
    WHERE rank IS NULL AND id > id1                  -- boundary rank is NULL

The operator depends on both the cursor direction and the sort order:

    ========  =====  ========
    cursor    order  operator
    ========  =====  ========
    after     asc    >
    after     desc   <
    before    asc    <
    before    desc   >
    ========  =====  ========
"""

from __future__ import annotations

from collections.abc import Callable
import operator
from typing import TYPE_CHECKING, Any, Literal

from sqlalchemy import and_, or_

from catalog_service.core.exceptions import InvalidParameterException

if TYPE_CHECKING:
    from sqlalchemy.orm import InstrumentedAttribute
    from sqlalchemy.sql.elements import ColumnElement

    from catalog_service.core.pagination.args import SortOrder
    from catalog_service.core.pagination.boundary import Boundary

Comparator = Callable[[Any, Any], Any]


def is_nullable(column: InstrumentedAttribute[Any]) -> bool:
    return any(col.nullable for col in column.property.columns)


def seek_operator(direction: Literal["before", "after"], sort_order: SortOrder) -> Comparator:
    """Pick the strict comparison that moves past a boundary."""
    if direction == "before":
        return operator.gt if sort_order == "desc" else operator.lt
    return operator.lt if sort_order == "desc" else operator.gt


def compose_range_filter(
    base_filter: ColumnElement[bool] | None,
    *,
    sort_column: InstrumentedAttribute[Any],
    id_column: InstrumentedAttribute[Any],
    sort_order: SortOrder,
    after: Boundary | None = None,
    before: Boundary | None = None,
) -> ColumnElement[bool] | None:
    """Combine a base filter with the range condition of a boundary.

    Args:
        base_filter: Existing filter, or None when the collection is unfiltered.
        sort_column: Column of the active sort field.
        id_column: Identifier column used as tie-breaker.
        sort_order: ``asc`` or ``desc``.
        after: Boundary the page starts after.
        before: Boundary the page ends before.

    Returns:
        A new filter expression. ``base_filter`` is returned unchanged when
        no boundary is given.

    Raises:
        InvalidParameterException: If both ``after`` and ``before`` are given.
    """
    if after is not None and before is not None:
        raise InvalidParameterException(
            detail="Including both 'after' and 'before' params is not allowed",
        )

    boundary = after or before
    if boundary is None:
        return base_filter

    op = seek_operator("before" if before is not None else "after", sort_order)

    if sort_column.key == id_column.key:
        condition = op(id_column, boundary.id)
    elif is_nullable(sort_column):
        condition = _nullable_range(sort_column, id_column, op, boundary)
    else:
        condition = or_(
            op(sort_column, boundary.value),
            and_(sort_column == boundary.value, op(id_column, boundary.id)),
        )

    if base_filter is None:
        return condition
    return and_(base_filter, condition)


def _nullable_range(
    sort_column: InstrumentedAttribute[Any],
    id_column: InstrumentedAttribute[Any],
    op: Comparator,
    boundary: Boundary,
) -> ColumnElement[bool]:
    toward_nulls = op is operator.gt
    null_ties = and_(sort_column.is_(None), op(id_column, boundary.id))
    if boundary.value is None:
        return null_ties if toward_nulls else or_(sort_column.is_not(None), null_ties)

    beyond = or_(
        op(sort_column, boundary.value),
        and_(sort_column == boundary.value, op(id_column, boundary.id)),
    )
    return or_(beyond, sort_column.is_(None)) if toward_nulls else beyond


__all__ = ["compose_range_filter", "is_nullable", "seek_operator"]
