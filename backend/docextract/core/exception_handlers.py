"""
exception_handlers.py
- Purpose: Convert AppError, request validation errors and anything unexpected
  into the same {"error": {...}} envelope.

Also logs errors with request context so failures are diagnosable.
"""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from docextract.core import AppError, ErrorCode, ErrorReason

logger = logging.getLogger("docextract.exceptions")


def _where(request: Request) -> dict[str, str]:
    return {"path": str(getattr(request.url, "path", "")), "method": request.method}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.warning(
        "app_error",
        extra={
            **_where(request),
            "status_code": exc.status_code,
            "code": exc.code.value,
            "reason": exc.reason,
        },
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # a request without the multipart file part is the common case here
    missing_file = any(
        err.get("type") == "missing" and tuple(err.get("loc", ()))[-1:] in (("file",), ("files",))
        for err in exc.errors()
    )
    err = AppError(
        code=ErrorCode.FILE_MISSING if missing_file else ErrorCode.VALIDATION_ERROR,
        reason=ErrorReason.FILE_MISSING.value if missing_file else ErrorReason.INVALID_INPUT.value,
        status_code=422,
        details={"errors": [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in exc.errors()]},
    )
    return await app_error_handler(request, err)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception", extra=_where(request))
    return JSONResponse(
        status_code=500,
        content={"error": {"code": ErrorCode.INTERNAL_ERROR, "reason": ErrorReason.INTERNAL_ERROR.value}},
    )
