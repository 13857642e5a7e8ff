"""
Error handling middleware for the analyzer API.

Anything that escapes a route is reported in the same shape as a failed
analysis (Error code 0, Process) so clients only parse one error layout.

Implemented as pure ASGI middleware (not BaseHTTPMiddleware) to avoid
the known Starlette issue with stacked BaseHTTPMiddleware corrupting
response bodies.
"""

import logging
import traceback

from starlette.types import ASGIApp, Receive, Scope, Send

from ..core.config import settings
from ..core.errors import ProcessError
from ..models.responses import ErrorResponse

logger = logging.getLogger("csvanalyzer.middleware.error_handler")


class ErrorHandlerMiddleware:
    """Turns unhandled exceptions into Process error responses."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        try:
            await self.app(scope, receive, send)
        except Exception as exc:
            path = scope.get("path", "unknown")
            method = scope.get("method", "unknown")
            logger.error("Unhandled exception on %s %s: %s", method, path, exc)
            logger.debug(traceback.format_exc())

            response = ErrorResponse.from_error(
                ProcessError.from_exception(exc),
                locale=settings.DEFAULT_LOCALE,
                charset="",
            )
            body = response.to_json().encode("utf-8")

            await send({
                "type": "http.response.start",
                "status": 500,
                "headers": [
                    [b"content-type", b"application/json"],
                    [b"content-length", str(len(body)).encode()],
                ],
            })
            await send({
                "type": "http.response.body",
                "body": body,
            })
