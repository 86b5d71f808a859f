"""Problem Details (RFC 7807) rendering for every error the API returns."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from catalog_service.core.exceptions import AppException
from catalog_service.core.schemas import ProblemDetails
from catalog_service.infra.metrics.prometheus import app_errors_total

logger = logging.getLogger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"


def _problem_response(
    request: Request,
    *,
    status_code: int,
    type_: str,
    detail: str,
    title: str | None = None,
    instance: str | None = None,
    extra: dict[str, Any] | None = None,
) -> JSONResponse:
    """Count the error and build its problem document.

    ``extra`` members are merged into the top level of the body;
    ``instance`` defaults to the request path.
    """
    app_errors_total.labels(error_type=type_, status_code=str(status_code)).inc()

    body = ProblemDetails(
        type=type_,
        title=title or AppException._default_title(status_code),
        status=status_code,
        detail=detail,
        instance=instance or request.url.path,
    ).model_dump(exclude_none=True)
    body.update(extra or {})
    return JSONResponse(status_code=status_code, content=body, media_type=PROBLEM_MEDIA_TYPE)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    logger.warning(
        "Request rejected",
        extra={
            "path": request.url.path,
            "problem_type": exc.type,
            "status_code": exc.status_code,
            "detail": exc.detail,
        },
    )
    return _problem_response(
        request,
        status_code=exc.status_code,
        type_=exc.type,
        detail=exc.detail,
        title=exc.title,
        instance=exc.instance,
        extra=exc.extra,
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """422 with one ``{field, message, type}`` entry per failed parameter."""
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    logger.info(
        "Request parameters failed validation",
        extra={"path": request.url.path, "fields": [e["field"] for e in errors]},
    )
    return _problem_response(
        request,
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        type_="validation-error",
        title="Validation Error",
        detail=f"{len(errors)} request parameter(s) are invalid",
        extra={"errors": errors},
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """500 for anything unexpected; the traceback only goes to the logs."""
    logger.exception(
        "Unhandled error",
        extra={"path": request.url.path, "error_class": type(exc).__name__},
    )
    return _problem_response(
        request,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        type_="internal-error",
        detail="The request could not be completed",
    )


def configure_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
