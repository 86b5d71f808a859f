"""Error body schema (RFC 7807)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ProblemDetails(BaseModel):
    """Body of every 4xx/5xx response.

    Handlers may add members next to these (``cursor``, ``errors``...).
    See https://datatracker.ietf.org/doc/html/rfc7807
    """

    type: str = Field(default="about:blank", min_length=1, max_length=200)
    title: str = Field(min_length=1, max_length=200, description="Summary of the problem type")
    status: int = Field(ge=100, le=599)
    detail: str | None = Field(default=None, max_length=2000, description="What went wrong here")
    instance: str | None = Field(default=None, max_length=500, description="Request path")

    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "type": "not-found",
                "title": "Not Found",
                "status": 404,
                "detail": "No CatalogItem found for cursor 'item-42'",
                "instance": "/api/v1/catalog-items",
                "cursor": "item-42",
            }
        },
    )
