"""
generation_validators.py
- Purpose: Preconditions for handing extracted text to content generation.
"""

from docextract.core import AppError, ErrorCode, ErrorReason
from docextract.core.config import settings


def validate_generation_input(text: str | None, *, min_length: int | None = None) -> str:
    limit = settings.GENERATION_MIN_LENGTH if min_length is None else min_length
    cleaned = (text or "").strip()
    if len(cleaned) < limit:
        raise AppError(
            code=ErrorCode.VALIDATION_ERROR,
            reason=ErrorReason.CONTENT_TOO_SHORT.value,
            status_code=422,
            details={"length": len(cleaned), "min_length": limit},
        )
    return cleaned
