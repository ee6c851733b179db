# docextract/extraction/__init__.py
from docextract.extraction.pipeline import ExtractionPipeline, extract_document
from docextract.extraction.quality import validate
from docextract.extraction.thresholds import QualityThresholds, ValidationContext
from docextract.extraction.types import (
    Attempt,
    ExtractionFailure,
    ExtractionResult,
    ExtractionSuccess,
    FailureReason,
    QualityReport,
    RawDocument,
    StrategyId,
    Verdict,
)

__all__ = [
    "Attempt",
    "ExtractionFailure",
    "ExtractionPipeline",
    "ExtractionResult",
    "ExtractionSuccess",
    "FailureReason",
    "QualityReport",
    "QualityThresholds",
    "RawDocument",
    "StrategyId",
    "ValidationContext",
    "Verdict",
    "extract_document",
    "validate",
]
