"""Exceptions rendered as RFC 7807 problem documents.

Anything raised as an ``AppException`` reaches the client as
``{"type", "title", "status", "detail", "instance", **extra}``; see
``catalog_service.app.exception_handlers``.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any


class AppException(Exception):
    """Base class for errors that map to a problem response.

    Attributes:
        status_code: HTTP status of the response.
        detail: Explanation of this occurrence, shown to the client.
        type: Problem type identifier, e.g. ``"invalid-parameter"``.
        title: Summary of the problem type; defaults to the status phrase.
        instance: Where it happened; the handler fills in the request path.
        extra: Members merged into the problem body (cursor, field names...).

    Example:
        raise AppException(
            status_code=503,
            detail="Catalog store is in maintenance",
            type="maintenance",
            extra={"retry_after": 60},
        )
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or self._default_title(status_code)
        self.instance = instance
        self.extra = extra or {}
        super().__init__(detail)

    @staticmethod
    def _default_title(status_code: int) -> str:
        try:
            return HTTPStatus(status_code).phrase
        except ValueError:
            return "Error"


class NotFoundException(AppException):
    """A referenced record does not exist.

    The pagination engine raises it for a ``before``/``after`` cursor that
    matches no record; catalog listings raise it for a featured sort
    without a tag.
    """

    def __init__(
        self,
        detail: str,
        type: str = "not-found",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(404, detail, type, "Not Found", instance, extra)


class InvalidParameterException(AppException):
    """Request arguments are contradictory or name something unsupported.

    Example:
        raise InvalidParameterException(
            detail="Request either first or last but not both",
            extra={"first": 10, "last": 5},
        )
    """

    def __init__(
        self,
        detail: str,
        type: str = "invalid-parameter",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(400, detail, type, "Invalid Parameter", instance, extra)


__all__ = [
    "AppException",
    "InvalidParameterException",
    "NotFoundException",
]
