"""Connection arguments and their normalization.

A connection argument set selects exactly one pagination mode:

- forward: ``first`` / ``after`` (the default when nothing is given)
- backward: ``last`` / ``before``
- offset: ``offset`` with an optional ``first``

``normalize_connection_args`` validates the mutually exclusive combinations
and fills in the default page size. It never touches the store, so parameter
errors surface before any query runs.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from catalog_service.core.exceptions import InvalidParameterException

DEFAULT_LIMIT = 20
ID_FIELD = "id"

SortOrder = Literal["asc", "desc"]
SORT_ORDERS: tuple[str, ...] = ("asc", "desc")


class PaginationMode(StrEnum):
    """Which paginator strategy handles a request."""

    FORWARD = "forward"
    BACKWARD = "backward"
    OFFSET = "offset"


@dataclass(frozen=True, slots=True)
class SortSpec:
    """Sort field and direction. ``id`` is always the tie-breaker."""

    field: str
    order: SortOrder = "asc"

    @property
    def descending(self) -> bool:
        return self.order == "desc"

    @property
    def is_id(self) -> bool:
        return self.field == ID_FIELD


class ConnectionArgs(BaseModel):
    """Client-supplied connection arguments.

    Field aliases follow the GraphQL connection spelling (``sortBy``,
    ``sortOrder``); snake_case names are accepted as well.

    Attributes:
        first: Page size for forward or offset pagination; 0 means the default.
        after: Id of the record the page starts after.
        last: Page size for backward pagination; 0 is the same as omitting it.
        before: Id of the record the page ends before.
        offset: Number of records to skip (offset pagination).
        sort_by: Field to sort by; ``id`` breaks ties.
        sort_order: ``asc`` or ``desc``.
    """

    first: int | None = Field(default=None, ge=1, description="Forward page size")
    after: str | None = Field(default=None, description="Cursor to page after")
    last: int | None = Field(default=None, ge=1, description="Backward page size")
    before: str | None = Field(default=None, description="Cursor to page before")
    offset: int | None = Field(default=None, ge=0, description="Records to skip")
    sort_by: str | None = Field(default=ID_FIELD, alias="sortBy")
    sort_order: str | None = Field(default="asc", alias="sortOrder")

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    @field_validator("after", "before", mode="before")
    @classmethod
    def _blank_cursor_is_absent(cls, value: Any) -> Any:
        if value == "":
            return None
        return value

    @field_validator("first", "last", mode="before")
    @classmethod
    def _zero_size_is_absent(cls, value: Any) -> Any:
        # A page size of 0 asks for the default, like an omitted one
        if value in (0, "0"):
            return None
        return value

    @property
    def mode(self) -> PaginationMode:
        if self.offset is not None:
            return PaginationMode.OFFSET
        if self.last is not None:
            return PaginationMode.BACKWARD
        return PaginationMode.FORWARD

    @property
    def sort(self) -> SortSpec:
        return SortSpec(field=self.sort_by or ID_FIELD, order=self.sort_order or "asc")  # type: ignore[arg-type]

    @property
    def cursor(self) -> str | None:
        """The ``before`` or ``after`` token, whichever is set."""
        return self.before or self.after


def _format_validation_error(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )


def normalize_connection_args(
    args: ConnectionArgs | Mapping[str, Any] | None,
    *,
    default_limit: int = DEFAULT_LIMIT,
) -> ConnectionArgs:
    """Validate a connection argument set and return a defaulted copy.

    Args:
        args: Raw arguments, either a mapping (camelCase or snake_case keys)
            or an existing ``ConnectionArgs``.
        default_limit: Page size applied when neither ``first`` nor ``last``
            is given.

    Returns:
        A new ``ConnectionArgs`` with ``first`` defaulted when needed.

    Raises:
        InvalidParameterException: For mutually exclusive arguments, a
            missing ``sortBy`` or an unknown ``sortOrder``.
    """
    if args is None:
        args = {}
    if not isinstance(args, ConnectionArgs):
        try:
            args = ConnectionArgs.model_validate(dict(args))
        except ValidationError as e:
            raise InvalidParameterException(
                detail=f"Invalid connection arguments: {_format_validation_error(e)}",
            ) from e

    if args.first is not None and args.last is not None:
        raise InvalidParameterException(
            detail="Request either first or last but not both",
            extra={"first": args.first, "last": args.last},
        )
    if args.offset is not None and args.last is not None:
        raise InvalidParameterException(
            detail="Request either last or offset but not both",
            extra={"offset": args.offset, "last": args.last},
        )
    if args.after is not None and args.before is not None:
        raise InvalidParameterException(
            detail="Including both 'after' and 'before' params is not allowed",
        )
    if not args.sort_by:
        raise InvalidParameterException(detail="sortBy is required")
    if args.sort_order not in SORT_ORDERS:
        raise InvalidParameterException(
            detail="sortOrder is required and must be 'asc' or 'desc'",
            extra={"sortOrder": args.sort_order},
        )

    if args.first is None and args.last is None:
        return args.model_copy(update={"first": default_limit})
    return args.model_copy()


__all__ = [
    "DEFAULT_LIMIT",
    "ID_FIELD",
    "ConnectionArgs",
    "PaginationMode",
    "SortOrder",
    "SortSpec",
    "normalize_connection_args",
]
