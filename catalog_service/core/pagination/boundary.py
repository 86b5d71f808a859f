"""Resolve ``before``/``after`` cursors into boundary records."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Any, Literal

from catalog_service.core.exceptions import NotFoundException

if TYPE_CHECKING:
    from catalog_service.core.pagination.args import ConnectionArgs
    from catalog_service.core.pagination.plan import QueryPlan
    from catalog_service.core.pagination.store import QueryStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Boundary:
    """Position of the record a cursor points at.

    Attributes:
        id: Identifier of the referenced record.
        value: The record's value for the active sort field.
        direction: Whether the page lies ``before`` or ``after`` the record.
    """

    id: Any
    value: Any
    direction: Literal["before", "after"]


async def resolve_boundary(
    store: QueryStore,
    plan: QueryPlan[Any],
    args: ConnectionArgs,
) -> Boundary | None:
    """Look up the record referenced by ``args.before`` or ``args.after``.

    Reads only the ``id`` and the sort field of that record.

    Returns:
        The boundary, or None when neither cursor is set.

    Raises:
        NotFoundException: If the cursor does not match any record.
    """
    token = args.cursor
    if token is None:
        return None

    direction: Literal["before", "after"] = "before" if args.before is not None else "after"
    sort_field = args.sort.field

    row = await store.find_one(plan, token, sort_field)
    if row is None:
        logger.info(
            "Pagination cursor does not resolve to a record",
            extra={"cursor": token, "direction": direction, "model": plan.model.__name__},
        )
        raise NotFoundException(
            detail=f"No {plan.model.__name__} found for cursor '{token}'",
            extra={"cursor": token},
        )

    return Boundary(id=row.id, value=getattr(row, sort_field), direction=direction)


__all__ = ["Boundary", "resolve_boundary"]
