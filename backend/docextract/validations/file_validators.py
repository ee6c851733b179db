"""
file_validators.py
- Purpose: Centralized validation for document uploads.
- Design: Raise AppError with stable error codes for UI + logs.
"""

from fastapi import UploadFile

from docextract.core import AppError, ErrorCode, ErrorReason
from docextract.core.errors import file_too_large
from docextract.core.config import settings


def validate_upload(upload: UploadFile | None) -> None:
    # Basic presence check; any media type is accepted, routing happens later
    if upload is None or not upload.filename:
        raise AppError(
            code=ErrorCode.FILE_MISSING,
            reason=ErrorReason.FILE_MISSING.value,
            status_code=422,
        )


async def read_upload_bytes(upload: UploadFile, *, max_bytes: int | None = None) -> bytes:
    """Read the whole upload, refusing anything over the size limit.

    Size is enforced while reading because UploadFile doesn't reliably
    expose it up front.
    """
    limit = settings.MAX_UPLOAD_BYTES if max_bytes is None else max_bytes
    data = await upload.read(limit + 1)
    if len(data) > limit:
        raise file_too_large(upload.filename, limit)
    return data
