"""docextract/extraction/types.py

Dataclasses and enums for the extraction pipeline.
Design goals:
- deterministic extraction (no LLM, no format parser)
- every outcome and every failure kind enumerated up front
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class DocumentKind(str, Enum):
    CONTAINER = "CONTAINER"  # PDF-like byte soup
    PLAIN_TEXT = "PLAIN_TEXT"


class StrategyId(str, Enum):
    PLAIN_TEXT = "PLAIN_TEXT"
    OPERATOR_EXTRACTION = "OPERATOR_EXTRACTION"
    BLOCK_EXTRACTION = "BLOCK_EXTRACTION"
    SENTENCE_FALLBACK = "SENTENCE_FALLBACK"
    WORD_FALLBACK = "WORD_FALLBACK"


class FailureReason(str, Enum):
    INSUFFICIENT_LENGTH = "INSUFFICIENT_LENGTH"
    INSUFFICIENT_WORD_COUNT = "INSUFFICIENT_WORD_COUNT"
    LOW_READABILITY = "LOW_READABILITY"
    CONTROL_CHARACTERS_PRESENT = "CONTROL_CHARACTERS_PRESENT"
    EXCESSIVE_DIGIT_DENSITY = "EXCESSIVE_DIGIT_DENSITY"
    REPEATING_PATTERN_DETECTED = "REPEATING_PATTERN_DETECTED"
    GARBAGE_MARKER_THRESHOLD_EXCEEDED = "GARBAGE_MARKER_THRESHOLD_EXCEEDED"
    LOW_DOMAIN_TERM_DENSITY = "LOW_DOMAIN_TERM_DENSITY"
    NO_EXTRACTABLE_TEXT = "NO_EXTRACTABLE_TEXT"


class Verdict(str, Enum):
    ACCEPT = "ACCEPT"
    REJECT = "REJECT"


@dataclass(frozen=True)
class RawDocument:
    data: bytes
    file_name: str
    declared_media_type: str

    @property
    def byte_size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class ExtractionCandidate:
    strategy: StrategyId
    fragments: tuple[str, ...]
    text: str

    @property
    def is_empty(self) -> bool:
        return not self.text


@dataclass(frozen=True)
class QualityReport:
    length: int
    word_count: int
    readable_char_ratio: float  # 0.0 - 1.0
    has_control_chars: bool
    digit_density: float
    has_repeating_run: bool
    garbage_marker_count: int
    domain_term_count: int
    verdict: Verdict
    reject_reasons: frozenset[FailureReason]
    thresholds_version: str

    @property
    def accepted(self) -> bool:
        return self.verdict is Verdict.ACCEPT

    @classmethod
    def no_candidate(
        cls,
        thresholds_version: str,
        also_failed: frozenset[FailureReason] = frozenset(),
    ) -> "QualityReport":
        """Report for a strategy that recovered nothing at all.

        `also_failed` carries the count gates an empty string fails as well.
        """
        return cls(
            length=0,
            word_count=0,
            readable_char_ratio=0.0,
            has_control_chars=False,
            digit_density=0.0,
            has_repeating_run=False,
            garbage_marker_count=0,
            domain_term_count=0,
            verdict=Verdict.REJECT,
            reject_reasons=frozenset({FailureReason.NO_EXTRACTABLE_TEXT}) | also_failed,
            thresholds_version=thresholds_version,
        )


@dataclass(frozen=True)
class Attempt:
    strategy: StrategyId
    report: QualityReport


@dataclass(frozen=True)
class ExtractionSuccess:
    text: str
    strategy_used: StrategyId
    report: QualityReport

    def __post_init__(self) -> None:
        # Text only leaves the pipeline after the quality gate accepted it.
        if not self.report.accepted:
            raise ValueError("ExtractionSuccess requires an accepted QualityReport")


@dataclass(frozen=True)
class ExtractionFailure:
    attempts: tuple[Attempt, ...]
    file_name: str
    byte_size: int

    @property
    def reasons(self) -> frozenset[FailureReason]:
        out: set[FailureReason] = set()
        for attempt in self.attempts:
            out |= attempt.report.reject_reasons
        return frozenset(out)


ExtractionResult = Union[ExtractionSuccess, ExtractionFailure]
