"""Pydantic schemas for the catalog feature."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from catalog_service.core.exceptions import InvalidParameterException
from catalog_service.core.pagination import Connection


class CatalogItemRead(BaseModel):
    """Representation of a catalog item returned from the API."""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    shop_id: str
    tag_id: str | None = None
    title: str
    priority: int
    min_price: float
    featured_rank: int | None = None
    is_banner: bool = False
    is_sold_out: bool = False
    is_back_order: bool = False
    is_low_quantity: bool = False


class BooleanFilter(BaseModel):
    """A ``{name, value}`` filter on one of the boolean catalog flags."""

    name: str = Field(..., min_length=1, description="Flag name, e.g. 'isSoldOut'")
    value: bool

    @classmethod
    def parse(cls, raw: str) -> BooleanFilter:
        """Parse the ``name:value`` query-string form, e.g. ``isSoldOut:false``."""
        name, sep, value = raw.partition(":")
        normalized = value.strip().lower()
        if not sep or not name.strip() or normalized not in ("true", "false"):
            raise InvalidParameterException(
                detail=f"Boolean filter must look like 'name:true' or 'name:false', got '{raw}'",
            )
        return cls(name=name.strip(), value=normalized == "true")


class CatalogItemsRequest(BaseModel):
    """Full argument set of a catalog listing request.

    Connection fields are kept as received; they are validated when the
    page is read. The dumped model is the cache signature of the request.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    shop_ids: list[str] | None = None
    tag_ids: list[str] | None = None
    search_query: str | None = None
    is_banner: bool | None = None
    boolean_filters: list[BooleanFilter] | None = None

    first: int | None = None
    after: str | None = None
    last: int | None = None
    before: str | None = None
    offset: int | None = None
    sort_by: str | None = None
    sort_order: str | None = "asc"

    def connection_args(self, sort_by: str) -> dict[str, Any]:
        """Connection arguments with *sort_by* substituted for the client value."""
        return {
            "first": self.first,
            "after": self.after,
            "last": self.last,
            "before": self.before,
            "offset": self.offset,
            "sortBy": sort_by,
            "sortOrder": self.sort_order,
        }


CatalogItemConnection = Connection[CatalogItemRead]


__all__ = [
    "BooleanFilter",
    "CatalogItemConnection",
    "CatalogItemRead",
    "CatalogItemsRequest",
]
