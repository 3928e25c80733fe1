"""Request ID middleware, attaching a unique ID to every request/response.

Pure ASGI so streamed chat responses pass through untouched.
"""

import logging
import uuid
from typing import Any

from starlette.types import ASGIApp, Receive, Scope, Send

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = b"x-request-id"


def _incoming_request_id(scope: Scope) -> str:
    for header_name, header_value in scope.get("headers", []):
        if header_name == REQUEST_ID_HEADER:
            return header_value.decode("latin-1")
    return ""


class RequestIDMiddleware:
    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = _incoming_request_id(scope) or uuid.uuid4().hex
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_wrapper(message: Any) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.append((REQUEST_ID_HEADER, request_id.encode("latin-1")))
                message["headers"] = headers
                logger.debug(
                    "%s %s -> %s [%s]",
                    scope.get("method"), scope.get("path"), message.get("status"), request_id,
                )
            await send(message)

        await self.app(scope, receive, send_wrapper)
