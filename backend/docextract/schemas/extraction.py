"""
extraction.py (schemas)
- Purpose: Response DTOs for extraction results.
- Design: Keep API DTOs stable; helper constructors map pipeline values.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from docextract.extraction.types import (
    Attempt,
    ExtractionFailure,
    ExtractionResult,
    ExtractionSuccess,
    FailureReason,
    QualityReport,
    StrategyId,
    Verdict,
)
from docextract.extraction.pool import BatchItem


class QualityReportOut(BaseModel):
    length: int
    word_count: int
    readable_char_ratio: float
    has_control_chars: bool
    digit_density: float
    has_repeating_run: bool
    garbage_marker_count: int
    domain_term_count: int
    verdict: Verdict
    reject_reasons: list[FailureReason]
    thresholds_version: str

    @classmethod
    def from_report(cls, report: QualityReport) -> "QualityReportOut":
        return cls(
            length=report.length,
            word_count=report.word_count,
            readable_char_ratio=round(report.readable_char_ratio, 4),
            has_control_chars=report.has_control_chars,
            digit_density=round(report.digit_density, 4),
            has_repeating_run=report.has_repeating_run,
            garbage_marker_count=report.garbage_marker_count,
            domain_term_count=report.domain_term_count,
            verdict=report.verdict,
            # sorted so identical inputs serialize identically
            reject_reasons=sorted(report.reject_reasons, key=lambda r: r.value),
            thresholds_version=report.thresholds_version,
        )


class AttemptOut(BaseModel):
    strategy: StrategyId
    report: QualityReportOut

    @classmethod
    def from_attempt(cls, attempt: Attempt) -> "AttemptOut":
        return cls(strategy=attempt.strategy, report=QualityReportOut.from_report(attempt.report))


class ExtractionResponse(BaseModel):
    """
    API response for one document. `outcome` tells which half is filled in.
    """
    outcome: Literal["success", "failure"]
    file_name: str
    byte_size: int
    text: Optional[str] = None
    strategy_used: Optional[StrategyId] = None
    report: Optional[QualityReportOut] = None
    attempts: list[AttemptOut] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: ExtractionResult, *, file_name: str, byte_size: int) -> "ExtractionResponse":
        if isinstance(result, ExtractionSuccess):
            return cls(
                outcome="success",
                file_name=file_name,
                byte_size=byte_size,
                text=result.text,
                strategy_used=result.strategy_used,
                report=QualityReportOut.from_report(result.report),
            )
        return cls(
            outcome="failure",
            file_name=result.file_name,
            byte_size=result.byte_size,
            attempts=[AttemptOut.from_attempt(a) for a in result.attempts],
        )


def failure_details(result: ExtractionFailure) -> dict[str, Any]:
    """Attempt trail in a JSON-safe shape, for AppError.details."""
    return {
        "file_name": result.file_name,
        "byte_size": result.byte_size,
        "attempts": [AttemptOut.from_attempt(a).model_dump(mode="json") for a in result.attempts],
    }


class BatchItemOut(BaseModel):
    file_name: str
    result: Optional[ExtractionResponse] = None
    error: Optional[dict[str, Any]] = None

    @classmethod
    def from_item(cls, item: BatchItem, *, byte_size: int) -> "BatchItemOut":
        if item.error is not None:
            return cls(file_name=item.file_name, error=item.error.to_dict()["error"])
        return cls(
            file_name=item.file_name,
            result=ExtractionResponse.from_result(item.result, file_name=item.file_name, byte_size=byte_size),
        )


class BatchExtractionResponse(BaseModel):
    items: list[BatchItemOut]


class GroundingResponse(BaseModel):
    file_name: str
    text: str
    strategy_used: StrategyId
    length: int


class JobAcceptedResponse(BaseModel):
    job_id: str
    status_url: str


class JobStatusResponse(BaseModel):
    job_id: str
    state: str
    result: Optional[ExtractionResponse] = None
    error: Optional[str] = None

