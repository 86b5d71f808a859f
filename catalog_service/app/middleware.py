"""Request ID middleware.

Takes ``X-Request-ID`` from the request (or generates a UUID4), exposes it
as ``request.state.request_id``, puts it in the log context for every record
logged while the request is handled, and echoes it on the response.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
import uuid

from starlette.datastructures import MutableHeaders

from catalog_service.infra.logging.context import clear_log_context, set_log_context

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "x-request-id"
MAX_REQUEST_ID_LENGTH = 128


class RequestIDMiddleware:
    """Pure ASGI middleware; the log context is cleared once the request ends.

    Usage:
        app.add_middleware(RequestIDMiddleware)
    """

    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER) -> None:
        self.app = app
        self.header_name = header_name.lower()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = self._incoming(scope) or str(uuid.uuid4())
        scope.setdefault("state", {})["request_id"] = request_id
        set_log_context(request_id=request_id)

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message).append(self.header_name, request_id)
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            clear_log_context()

    def _incoming(self, scope: Scope) -> str | None:
        wanted = self.header_name.encode("latin-1")
        for name, value in scope.get("headers", []):
            if name == wanted:
                request_id = value.decode("latin-1").strip()
                if request_id and len(request_id) <= MAX_REQUEST_ID_LENGTH:
                    return request_id
                logger.debug("Ignoring unusable request id header", extra={"length": len(value)})
                return None
        return None


__all__ = ["REQUEST_ID_HEADER", "RequestIDMiddleware"]
