"""Immutable query plans.

A ``QueryPlan`` describes what to read from the store: the mapped model, a
filter, a sort order and a skip/limit window. Every modifier returns a new
plan, so probe queries and the main page read are derived from the same
value without sharing mutable cursor state.

Example:
    plan = QueryPlan(CatalogItem, criteria=CatalogItem.shop_id == "shop-1")
    page = plan.sorted_by(SortSpec("priority", "desc")).window(skip=0, limit=20)
    stmt = page.statement()
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import Select, and_, func, select
from sqlalchemy.orm import InstrumentedAttribute

from catalog_service.core.exceptions import InvalidParameterException
from catalog_service.core.pagination.args import ID_FIELD, SortSpec
from catalog_service.core.pagination.filters import is_nullable

if TYPE_CHECKING:
    from sqlalchemy.sql.elements import ColumnElement

ModelT = TypeVar("ModelT")


@dataclass(frozen=True, slots=True, eq=False)
class QueryPlan(Generic[ModelT]):
    """Store query description: filter, sort, skip and limit.

    Attributes:
        model: Mapped class to select from. Must have an ``id`` column.
        criteria: Filter expression, or None for "everything".
        sort: Sort field and order; ``id`` in the same direction is appended as tie-breaker.
        skip: Number of rows to skip.
        limit: Maximum rows to return, or None for no limit.
    """

    model: type[ModelT]
    criteria: ColumnElement[bool] | None = None
    sort: SortSpec | None = None
    skip: int = 0
    limit: int | None = None

    # ── Derivation ───────────────────────────────────────────────────────

    def where(self, *conditions: ColumnElement[bool]) -> QueryPlan[ModelT]:
        """Return a plan with *conditions* ANDed onto the current criteria."""
        parts = [c for c in (self.criteria, *conditions) if c is not None]
        if not parts:
            return self
        combined = parts[0] if len(parts) == 1 else and_(*parts)
        return replace(self, criteria=combined)

    def with_criteria(self, criteria: ColumnElement[bool] | None) -> QueryPlan[ModelT]:
        """Return a plan whose criteria are replaced by *criteria*."""
        return replace(self, criteria=criteria)

    def sorted_by(self, sort: SortSpec) -> QueryPlan[ModelT]:
        self.column(sort.field)
        return replace(self, sort=sort)

    def window(self, skip: int = 0, limit: int | None = None) -> QueryPlan[ModelT]:
        if skip < 0:
            msg = f"skip must be >= 0, got {skip}"
            raise ValueError(msg)
        return replace(self, skip=skip, limit=limit)

    def unwindowed(self) -> QueryPlan[ModelT]:
        return replace(self, skip=0, limit=None)

    # ── Introspection ────────────────────────────────────────────────────

    def column(self, name: str) -> InstrumentedAttribute[Any]:
        """Resolve a mapped column by attribute name.

        Raises:
            InvalidParameterException: If the model has no such column.
        """
        attr = getattr(self.model, name, None)
        if not isinstance(attr, InstrumentedAttribute) or name not in self._column_keys():
            raise InvalidParameterException(
                detail=f"Cannot sort or filter {self.model.__name__} by '{name}'",
                extra={"field": name},
            )
        return attr

    @property
    def id_column(self) -> InstrumentedAttribute[Any]:
        return self.column(ID_FIELD)

    def _column_keys(self) -> set[str]:
        return set(self.model.__mapper__.column_attrs.keys())  # type: ignore[attr-defined]

    # ── Compilation ──────────────────────────────────────────────────────

    def order_by(self) -> list[ColumnElement[Any]]:
        """Sort clauses: the sort field, then ``id`` in the same direction.

        A nullable sort field puts NULLs after the highest value, matching
        the range filter whatever the dialect's default NULL placement is.
        """
        if self.sort is None:
            return []
        fields = [self.sort.field] if self.sort.is_id else [self.sort.field, ID_FIELD]
        clauses: list[ColumnElement[Any]] = []
        for col in (self.column(name) for name in fields):
            clause = col.desc() if self.sort.descending else col.asc()
            if is_nullable(col):
                clause = clause.nulls_first() if self.sort.descending else clause.nulls_last()
            clauses.append(clause)
        return clauses

    def statement(self) -> Select[tuple[ModelT]]:
        """Compile the plan into a SELECT of full rows."""
        stmt = select(self.model)
        if self.criteria is not None:
            stmt = stmt.where(self.criteria)
        order = self.order_by()
        if order:
            stmt = stmt.order_by(*order)
        if self.skip:
            stmt = stmt.offset(self.skip)
        if self.limit is not None:
            stmt = stmt.limit(self.limit)
        return stmt

    def count_statement(self) -> Select[tuple[int]]:
        """Compile a COUNT over the plan, honouring skip and limit."""
        if self.skip or self.limit is not None:
            inner = self.statement().with_only_columns(self.id_column).subquery()
            return select(func.count()).select_from(inner)
        stmt = select(func.count()).select_from(self.model)
        if self.criteria is not None:
            stmt = stmt.where(self.criteria)
        return stmt


__all__ = ["QueryPlan"]
