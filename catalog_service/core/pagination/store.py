"""Ordered store operations used by the pagination engine.

``QueryStore`` executes ``QueryPlan`` values against an ``AsyncSession``.
Each method is a single round-trip; errors from the database driver are
propagated unchanged.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from sqlalchemy import select

from catalog_service.core.pagination.args import ID_FIELD

if TYPE_CHECKING:
    from sqlalchemy import Row
    from sqlalchemy.ext.asyncio import AsyncSession

    from catalog_service.core.pagination.plan import QueryPlan

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class QueryStore:
    """Thin executor for query plans.

    Example:
        store = QueryStore(session)
        total = await store.count(plan)
        rows = await store.fetch(plan.window(0, 20))
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def count(self, plan: QueryPlan[Any]) -> int:
        """Count rows matched by *plan*, honouring its skip/limit window."""
        result = await self.session.execute(plan.count_statement())
        return int(result.scalar_one())

    async def fetch(self, plan: QueryPlan[ModelT]) -> list[ModelT]:
        """Materialize the rows of *plan* in order."""
        result = await self.session.execute(plan.statement())
        return list(result.scalars().all())

    async def exists(self, plan: QueryPlan[Any]) -> bool:
        """Return True if *plan* matches at least one row."""
        probe = plan.statement().with_only_columns(plan.id_column)
        if plan.limit is None or plan.limit > 1:
            probe = probe.limit(1)
        result = await self.session.execute(probe)
        return result.first() is not None

    async def find_one(
        self,
        plan: QueryPlan[Any],
        ident: Any,
        *fields: str,
    ) -> Row[Any] | None:
        """Point-read one record by id, projecting only ``id`` and *fields*.

        The plan's criteria are not applied: the lookup is by identity alone.
        """
        names = [ID_FIELD, *(f for f in fields if f != ID_FIELD)]
        columns = [plan.column(name) for name in names]
        stmt = select(*columns).where(plan.id_column == ident).limit(1)
        result = await self.session.execute(stmt)
        return result.first()


__all__ = ["QueryStore"]
