"""docextract/extraction/quality.py

Cheap, explainable heuristics that decide whether extracted text is
trustworthy enough to hand to content generation.

Every signal is computed on every call and every failing gate is reported,
so a rejected attempt always explains itself. The validator never edits the
text it is given.
"""

import re
from functools import lru_cache

from docextract.extraction.thresholds import QualityThresholds, ValidationContext
from docextract.extraction.types import FailureReason, QualityReport, Verdict

_COMMON_PUNCTUATION = frozenset(".,!?;:()-'\"")

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

# Residual container syntax that should never survive stripping.
_GARBAGE_PATTERNS = [
    re.compile(r"%PDF-\d"),
    re.compile(r"%%EOF"),
    re.compile(r"\b\d+\s+\d+\s+obj\b"),
    re.compile(r"\bendobj\b"),
    re.compile(r"\bendstream\b"),
    re.compile(r"\bstartxref\b"),
    re.compile(r"\bxref\b"),
    re.compile(r"\btrailer\b"),
    re.compile(r"/Type\s*/\w+"),
    re.compile(r"/Length\s+\d+"),
    re.compile(r"/Filter\s*/\w+"),
    re.compile(r"\b\d+\s+\d+\s+R\b"),
    re.compile(r"(?<![A-Za-z])(?:BT|ET|Tj|TJ|Tf|Td|TD|Tm|T\*)(?![A-Za-z])"),
]

_DOMAIN_TERMS = (
    "chapter", "section", "introduction", "conclusion", "analysis", "method",
    "result", "discussion", "summary", "overview", "concept", "principle",
    "theory", "practice", "application", "implementation", "strategy",
    "approach", "technique", "process", "system", "framework", "model",
    "design", "development", "research", "study", "data", "information",
    "knowledge", "understanding", "learning", "education", "training",
    "course", "lesson", "topic", "subject", "content", "material", "resource",
    "guide", "manual", "handbook", "document", "report", "paper", "article",
    "book", "text", "definition", "explanation", "example", "illustration",
    "demonstration", "case", "scenario", "problem", "solution", "question",
    "answer", "issue", "challenge", "opportunity", "benefit", "advantage",
    "requirement", "standard", "criteria", "guideline", "recommendation",
    "best", "practices", "methodology", "procedure", "step", "stage", "phase",
    "level", "degree", "scope", "range", "scale", "measure", "metric",
    "indicator", "factor", "element", "component", "aspect", "feature",
    "characteristic", "property", "quality", "performance", "effectiveness",
    "efficiency", "improvement", "optimization", "enhancement", "innovation",
    "technology", "digital", "platform", "service", "business", "management",
    "organization", "operation", "function", "capability", "capacity", "tool",
    "equipment", "facility", "environment", "condition", "situation",
    "context", "background", "history", "evolution", "progress",
    "advancement", "achievement", "success", "accomplishment", "goal",
    "objective", "purpose", "aim", "target", "mission", "vision", "value",
    "impact", "effect", "influence", "change", "transformation", "growth",
    "expansion", "increase",
)
_DOMAIN_PATTERN = re.compile(r"\b(?:" + "|".join(_DOMAIN_TERMS) + r")\b", re.IGNORECASE)


@lru_cache(maxsize=8)
def _repeat_pattern(max_run: int) -> re.Pattern:
    # a run longer than max_run means one char + max_run repeats
    return re.compile(r"(.)\1{%d,}" % max_run, re.DOTALL)


def _readable_ratio(text: str) -> float:
    if not text:
        return 0.0
    good = sum(1 for ch in text if ch.isalnum() or ch.isspace() or ch in _COMMON_PUNCTUATION)
    return good / len(text)


def _word_count(text: str) -> int:
    return sum(1 for tok in text.split() if len(tok) > 2 and tok[0].isalpha())


def _digit_density(text: str) -> float:
    if not text:
        return 0.0
    return sum(1 for ch in text if ch.isdigit()) / len(text)


def count_garbage_markers(text: str) -> int:
    return sum(len(p.findall(text)) for p in _GARBAGE_PATTERNS)


def count_domain_terms(text: str) -> int:
    return len(_DOMAIN_PATTERN.findall(text))


def _empty_gate_failures(t: QualityThresholds, context: ValidationContext) -> frozenset[FailureReason]:
    # nothing recovered still fails every count gate with a positive minimum
    failed: set[FailureReason] = set()
    if t.min_length > 0:
        failed.add(FailureReason.INSUFFICIENT_LENGTH)
    if t.min_word_count > 0:
        failed.add(FailureReason.INSUFFICIENT_WORD_COUNT)
    if context is ValidationContext.GENERATION and t.min_domain_terms > 0:
        failed.add(FailureReason.LOW_DOMAIN_TERM_DENSITY)
    return frozenset(failed)


def validate(
    text: str,
    *,
    context: ValidationContext = ValidationContext.EXTRACTION,
    thresholds: QualityThresholds | None = None,
) -> QualityReport:
    t = thresholds or QualityThresholds.from_settings()
    raw = text or ""
    if not raw.strip():
        return QualityReport.no_candidate(t.version, _empty_gate_failures(t, context))

    length = len(raw)
    word_count = _word_count(raw)
    readable_ratio = _readable_ratio(raw)
    has_control_chars = bool(_CONTROL_CHARS.search(raw))
    digit_density = _digit_density(raw)
    has_repeating_run = bool(_repeat_pattern(t.max_repeat_run).search(raw))
    garbage_markers = count_garbage_markers(raw)
    domain_terms = count_domain_terms(raw)

    reasons: set[FailureReason] = set()

    if length < t.min_length:
        reasons.add(FailureReason.INSUFFICIENT_LENGTH)
    if word_count < t.min_word_count:
        reasons.add(FailureReason.INSUFFICIENT_WORD_COUNT)
    if readable_ratio < t.min_readable_ratio:
        reasons.add(FailureReason.LOW_READABILITY)
    if has_control_chars:
        reasons.add(FailureReason.CONTROL_CHARACTERS_PRESENT)
    if digit_density > t.max_digit_density:
        reasons.add(FailureReason.EXCESSIVE_DIGIT_DENSITY)
    if has_repeating_run:
        reasons.add(FailureReason.REPEATING_PATTERN_DETECTED)
    if garbage_markers > t.max_garbage_markers:
        reasons.add(FailureReason.GARBAGE_MARKER_THRESHOLD_EXCEEDED)
    if context is ValidationContext.GENERATION and domain_terms < t.min_domain_terms:
        reasons.add(FailureReason.LOW_DOMAIN_TERM_DENSITY)

    return QualityReport(
        length=length,
        word_count=word_count,
        readable_char_ratio=readable_ratio,
        has_control_chars=has_control_chars,
        digit_density=digit_density,
        has_repeating_run=has_repeating_run,
        garbage_marker_count=garbage_markers,
        domain_term_count=domain_terms,
        verdict=Verdict.REJECT if reasons else Verdict.ACCEPT,
        reject_reasons=frozenset(reasons),
        thresholds_version=t.version,
    )
