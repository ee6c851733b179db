"""
errors.py
- Purpose: AppError used across services/validators for consistent errors.
- Pattern: raise AppError(...) where the problem is found, the handler turns
  it into the JSON error envelope.
"""

from dataclasses import dataclass
from typing import Any

from fastapi import status as http_status
from docextract.core.error_codes import ErrorCode
from docextract.core.error_reasons import ErrorReason


@dataclass
class AppError(Exception):
    code: ErrorCode
    reason: str
    status_code: int = http_status.HTTP_400_BAD_REQUEST
    details: dict[str, Any] | None = None
    message: str | None = None  # Optional human-readable message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message or self.reason}"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "error": {
                "code": self.code,
                "reason": self.reason,
                "message": self.message if self.message else self.reason,
            }
        }
        if self.details:
            payload["error"]["details"] = self.details
        return payload


def file_too_large(file_name: str | None, max_bytes: int) -> AppError:
    return AppError(
        code=ErrorCode.FILE_TOO_LARGE,
        reason=ErrorReason.FILE_TOO_LARGE.value,
        status_code=413,
        details={"file_name": file_name, "max_bytes": max_bytes},
    )


def extraction_timeout(file_name: str, budget_seconds: float | None) -> AppError:
    return AppError(
        code=ErrorCode.EXTRACTION_TIMEOUT,
        reason=ErrorReason.TIME_BUDGET_EXCEEDED.value,
        status_code=http_status.HTTP_504_GATEWAY_TIMEOUT,
        details={"file_name": file_name, "budget_seconds": budget_seconds},
    )


def extraction_crashed(file_name: str, exc: BaseException) -> AppError:
    return AppError(
        code=ErrorCode.EXTRACTION_CRASHED,
        reason=ErrorReason.WORKER_FAILED.value,
        status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR,
        details={"file_name": file_name, "error": type(exc).__name__},
    )


def extraction_failed(details: dict[str, Any]) -> AppError:
    """No strategy produced acceptable text; details carry the attempt trail."""
    return AppError(
        code=ErrorCode.EXTRACTION_FAILED,
        reason=ErrorReason.NO_USABLE_TEXT.value,
        status_code=422,
        details=details,
    )
