"""docextract/extraction/thresholds.py

The one threshold table every quality check reads from.
Bump THRESHOLDS_VERSION whenever a default changes so stored reports stay
comparable.
"""

from dataclasses import dataclass
from enum import Enum

from docextract.core.config import Settings, settings as default_settings

THRESHOLDS_VERSION = "v1"


class ValidationContext(str, Enum):
    EXTRACTION = "extraction"
    GENERATION = "generation"  # adds the domain-term gate


@dataclass(frozen=True)
class QualityThresholds:
    min_length: int = 200
    min_word_count: int = 20
    min_readable_ratio: float = 0.75
    max_digit_density: float = 0.3
    max_repeat_run: int = 15
    max_garbage_markers: int = 4
    min_domain_terms: int = 3
    max_sentences: int = 400
    max_word_runs: int = 200
    version: str = THRESHOLDS_VERSION

    @classmethod
    def from_settings(cls, s: Settings | None = None) -> "QualityThresholds":
        s = s or default_settings
        return cls(
            min_length=s.QUALITY_MIN_LENGTH,
            min_word_count=s.QUALITY_MIN_WORD_COUNT,
            min_readable_ratio=s.QUALITY_MIN_READABLE_RATIO,
            max_digit_density=s.QUALITY_MAX_DIGIT_DENSITY,
            max_repeat_run=s.QUALITY_MAX_REPEAT_RUN,
            max_garbage_markers=s.QUALITY_MAX_GARBAGE_MARKERS,
            min_domain_terms=s.QUALITY_MIN_DOMAIN_TERMS,
            max_sentences=s.FALLBACK_MAX_SENTENCES,
            max_word_runs=s.FALLBACK_MAX_WORD_RUNS,
        )
