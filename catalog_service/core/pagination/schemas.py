"""Connection response schemas.

A connection is a page of ``nodes`` plus navigation metadata in
``page_info`` and an optional ``total_count``. Serialized field names use
the GraphQL connection spelling (``pageInfo``, ``hasNextPage``, ...).
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class PageInfo(BaseModel):
    """Pagination metadata.

    Flags are None when the caller did not ask for them. Cursors are None
    when the page is empty.

    Attributes:
        has_next_page: Whether items exist after this page
        has_previous_page: Whether items exist before this page
        start_cursor: Id of the first node in this page
        end_cursor: Id of the last node in this page
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    has_next_page: bool | None = Field(
        default=None,
        description="Whether more items exist",
    )
    has_previous_page: bool | None = Field(
        default=None,
        description="Whether previous items exist",
    )
    start_cursor: str | None = Field(
        default=None,
        description="Id of the first node",
    )
    end_cursor: str | None = Field(
        default=None,
        description="Id of the last node",
    )


class Connection(BaseModel, Generic[T]):
    """A page of nodes with its metadata.

    Usage:
        @router.get("/items", response_model=Connection[ItemRead],
                    response_model_exclude_none=True)
        async def list_items(...):
            return await paginate(session, plan, args)

    Attributes:
        nodes: Records of the page, in sort order
        page_info: Navigation metadata
        total_count: Size of the base-filtered collection (optional)
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    nodes: list[T] = Field(
        default_factory=list,
        description="Records of the page",
    )
    page_info: PageInfo = Field(
        default_factory=PageInfo,
        description="Pagination metadata",
    )
    total_count: int | None = Field(
        default=None,
        description="Total count of the filtered collection (optional)",
    )


__all__ = ["Connection", "PageInfo"]
