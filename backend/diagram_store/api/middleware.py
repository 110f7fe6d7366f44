"""Request Body Limit — 413 for bodies above settings.max_body_bytes.

Invariants:
    - A declared Content-Length above the limit is rejected before any body is read
    - Bodies without Content-Length (chunked) are counted as they stream in and
      rejected as soon as the running total passes the limit
    - Accepted bodies are replayed to the app unchanged, message by message
    - At most max_body_bytes of a request body is ever buffered

Design Decisions:
    - Pure ASGI middleware instead of @app.middleware("http"): the limit must see
      every receive() message, which BaseHTTPMiddleware does not expose
    - The limit is read from settings on every request, so a changed setting
      takes effect without rebuilding the middleware stack
"""

import logging

from fastapi.responses import JSONResponse
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from diagram_store.config import Settings
from diagram_store.core.errors import PayloadTooLargeError

logger = logging.getLogger(__name__)


class BodySizeLimitMiddleware:
    def __init__(self, app: ASGIApp, settings: Settings):
        self.app = app
        self.settings = settings

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit = self.settings.max_body_bytes
        length = Headers(scope=scope).get("content-length")
        if length and length.isdigit() and int(length) > limit:
            await self._reject(scope, receive, send, limit)
            return

        buffered: list[Message] = []
        received = 0
        while True:
            message = await receive()
            buffered.append(message)
            if message["type"] != "http.request":
                break
            received += len(message.get("body", b""))
            if received > limit:
                await self._reject(scope, receive, send, limit)
                return
            if not message.get("more_body", False):
                break

        async def replay() -> Message:
            if buffered:
                return buffered.pop(0)
            return await receive()

        await self.app(scope, replay, send)

    @staticmethod
    async def _reject(scope: Scope, receive: Receive, send: Send, limit: int) -> None:
        error = PayloadTooLargeError(limit)
        logger.warning(
            f"{error.code} on {scope['method']} {scope['path']}",
            extra={"error_code": error.code, "path": scope["path"]},
        )
        response = JSONResponse(status_code=error.http_status, content=error.to_response())
        await response(scope, receive, send)
