"""
Request logging middleware for the analyzer API.

One line per request: method, path, uploaded size, status, the outcome
read from the analysis document (error code or column count) and the
time spent. The elapsed time is also returned in x-analysis-time-ms.

Pure ASGI middleware, so the response body passes through untouched.
"""

import json
import logging
import time
from typing import List, Optional

from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger("csvanalyzer.middleware.request_logger")

# Analysis documents are small; larger bodies are not inspected
MAX_INSPECTED_BODY = 1024 * 1024


def _header(scope: Scope, name: bytes) -> Optional[str]:
    for key, value in scope.get("headers", []):
        if key.lower() == name:
            return value.decode("latin-1")
    return None


def analysis_outcome(body: bytes) -> str:
    """Summarize an analysis document as "error N", "N columns" or "-"."""
    try:
        document = json.loads(body)
    except ValueError:
        return "-"
    if not isinstance(document, dict):
        return "-"
    if "Error" in document:
        return f"error {document['Error']}"
    if "DataTypes" in document:
        return f"{len(document['DataTypes'])} columns"
    return "-"


class RequestLoggerMiddleware:
    """Logs each request with its upload size and analysis outcome."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start_time = time.perf_counter()
        upload_size = _header(scope, b"content-length") or "-"
        status_code = 0
        is_json = False
        body_parts: List[bytes] = []
        body_size = 0

        async def send_wrapper(message: Message):
            nonlocal status_code, is_json, body_size
            if message["type"] == "http.response.start":
                status_code = message.get("status", 0)
                headers = list(message.get("headers", []))
                is_json = any(
                    k.lower() == b"content-type" and v.startswith(b"application/json")
                    for k, v in headers
                )
                duration_ms = (time.perf_counter() - start_time) * 1000
                headers.append([b"x-analysis-time-ms", f"{duration_ms:.2f}".encode()])
                message = {**message, "headers": headers}
            elif message["type"] == "http.response.body":
                chunk = message.get("body", b"")
                body_size += len(chunk)
                if is_json and body_size <= MAX_INSPECTED_BODY:
                    body_parts.append(chunk)
                if not message.get("more_body", False):
                    outcome = analysis_outcome(b"".join(body_parts)) if is_json else "-"
                    logger.info(
                        "%s %s upload=%s -> %s %s (%.2fms)",
                        scope.get("method", "?"),
                        scope.get("path", "?"),
                        upload_size,
                        status_code,
                        outcome,
                        (time.perf_counter() - start_time) * 1000,
                    )
            await send(message)

        await self.app(scope, receive, send_wrapper)
