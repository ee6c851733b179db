from __future__ import annotations

import logging
import re
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from docextract.core.request_context import set_context, clear_context


logger = logging.getLogger("docextract.http")

REQUEST_ID_HEADER = "x-request-id"

# Upstream ids end up in every log line of the request.
_SAFE_REQUEST_ID = re.compile(r"[A-Za-z0-9._:-]{1,64}")

# Liveness probes hit these constantly; they log at DEBUG.
QUIET_PATHS = ("/api/health",)


def resolve_request_id(header_value: str | None) -> str:
    if header_value and _SAFE_REQUEST_ID.fullmatch(header_value):
        return header_value
    return str(uuid.uuid4())


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One request/response log pair per call, correlated by request id.

    Upload bodies are never read here; only the media type (without the
    multipart boundary) and the declared size are logged.
    """

    async def dispatch(self, request: Request, call_next):
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        set_context(request_id=rid)

        path = request.url.path
        level = logging.DEBUG if path.startswith(QUIET_PATHS) else logging.INFO
        content_type = request.headers.get("content-type")

        t0 = time.perf_counter()
        try:
            logger.log(
                level,
                "http.request",
                extra={
                    "method": request.method,
                    "path": path,
                    "content_type": content_type.split(";", 1)[0].strip() if content_type else None,
                    "content_length": request.headers.get("content-length"),
                },
            )
            try:
                response: Response = await call_next(request)
            except Exception:
                logger.exception(
                    "http.error",
                    extra={
                        "method": request.method,
                        "path": path,
                        "duration_ms": int((time.perf_counter() - t0) * 1000),
                    },
                )
                raise

            logger.log(
                logging.WARNING if response.status_code >= 500 else level,
                "http.response",
                extra={
                    "method": request.method,
                    "path": path,
                    "status_code": response.status_code,
                    "duration_ms": int((time.perf_counter() - t0) * 1000),
                },
            )

            response.headers[REQUEST_ID_HEADER] = rid
            return response
        finally:
            clear_context()
