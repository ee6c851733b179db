"""
error_reasons.py
- Purpose: Human-friendly "reason" strings.
- Keep these stable; they may be surfaced in UI.
"""

from enum import Enum


class ErrorReason(str, Enum):
    INVALID_INPUT = "Invalid input"
    FILE_MISSING = "No file uploaded"
    FILE_TOO_LARGE = "File too large"

    NO_USABLE_TEXT = "No usable text could be extracted"
    CONTENT_TOO_SHORT = "Content too short for generation"
    TIME_BUDGET_EXCEEDED = "Extraction exceeded its time budget"
    WORKER_FAILED = "Extraction stopped on an unexpected error"
    INTERNAL_ERROR = "Internal server error"
