"""docextract/extraction/integrity.py

Guards text that came back from an enhancement/rewrite step: it must stay
roughly the same size as the extracted original and keep most of its key
terms. Catches truncation and invented content without an LLM.
"""

import re
from dataclasses import dataclass

from docextract.core.config import settings

KEY_TERM_LIMIT = 20
_KEY_TERM = re.compile(r"^[a-zA-Z]{5,}$")


@dataclass(frozen=True)
class IntegrityReport:
    length_ratio: float
    key_terms: int
    preserved_terms: int
    term_preservation: float
    ok: bool
    notes: list[str]


def _key_terms(text: str) -> list[str]:
    words = [w for w in text.lower().split() if _KEY_TERM.match(w)]
    return words[:KEY_TERM_LIMIT]


def check_integrity(
    original: str,
    enhanced: str,
    *,
    min_length_ratio: float | None = None,
    max_length_ratio: float | None = None,
    min_term_preservation: float | None = None,
) -> IntegrityReport:
    lo = settings.INTEGRITY_MIN_LENGTH_RATIO if min_length_ratio is None else min_length_ratio
    hi = settings.INTEGRITY_MAX_LENGTH_RATIO if max_length_ratio is None else max_length_ratio
    min_pres = settings.INTEGRITY_MIN_TERM_PRESERVATION if min_term_preservation is None else min_term_preservation

    notes: list[str] = []
    if not original or not enhanced:
        notes.append("Missing original or enhanced content")
        return IntegrityReport(0.0, 0, 0, 0.0, False, notes)

    length_ratio = len(enhanced) / len(original)
    terms = _key_terms(original)
    lowered = enhanced.lower()
    preserved = sum(1 for w in terms if w in lowered)
    preservation = preserved / len(terms) if terms else 1.0

    ok = True
    if length_ratio < lo:
        ok = False
        notes.append("Enhanced content too short (possible truncation)")
    if length_ratio > hi:
        ok = False
        notes.append("Enhanced content too long (possible invented content)")
    if preservation < min_pres:
        ok = False
        notes.append("Too few key terms preserved")

    return IntegrityReport(
        length_ratio=length_ratio,
        key_terms=len(terms),
        preserved_terms=preserved,
        term_preservation=preservation,
        ok=ok,
        notes=notes,
    )
