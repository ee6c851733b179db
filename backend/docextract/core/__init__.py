# docextract/core/__init__.py
from docextract.core.errors import AppError
from docextract.core.error_codes import ErrorCode
from docextract.core.error_reasons import ErrorReason

__all__ = ["AppError", "ErrorCode", "ErrorReason"]
