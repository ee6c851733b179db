"""docextract/extraction/pipeline.py

Document -> validated plaintext.

Container documents (PDF-like):
1) show-text operators, anywhere
2) show-text operators, inside BT ... ET blocks only
3) capitalized sentences
4) alphabetic word runs

Plain-text documents:
1) the decoded text itself
2) capitalized sentences
3) alphabetic word runs

Each candidate goes through the quality gate; the first accepted one wins.
If nothing is accepted the caller gets every attempt back, never
sub-threshold text.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Callable, Sequence

from docextract.constants.media_types import (
    CONTAINER_MEDIA_TYPES,
    CONTAINER_SIGNATURE,
    TEXT_EXTENSIONS,
    TEXT_MEDIA_TYPES,
)
from docextract.extraction.decode import decode_bytes, detect_encoding
from docextract.extraction.fallbacks import extract_sentences, extract_word_runs
from docextract.extraction.operators import extract_block_text, extract_operator_text
from docextract.extraction.quality import validate
from docextract.extraction.strip import strip_structure
from docextract.extraction.thresholds import QualityThresholds, ValidationContext
from docextract.extraction.types import (
    Attempt,
    DocumentKind,
    ExtractionCandidate,
    ExtractionFailure,
    ExtractionResult,
    ExtractionSuccess,
    RawDocument,
    StrategyId,
)

logger = logging.getLogger("docextract.extraction")

_WS = re.compile(r"\s+")
_SNIFF_BYTES = 1024


@dataclass(frozen=True)
class Strategy:
    id: StrategyId
    run: Callable[[str, QualityThresholds], list[str]]


def _plain_text(source: str, _t: QualityThresholds) -> list[str]:
    return [source] if source.strip() else []


def _operators(source: str, _t: QualityThresholds) -> list[str]:
    return extract_operator_text(source)


def _blocks(source: str, _t: QualityThresholds) -> list[str]:
    return extract_block_text(source)


def _sentences(source: str, t: QualityThresholds) -> list[str]:
    return extract_sentences(source, limit=t.max_sentences)


def _word_runs(source: str, t: QualityThresholds) -> list[str]:
    return extract_word_runs(source, limit=t.max_word_runs)


CONTAINER_STRATEGIES: tuple[Strategy, ...] = (
    Strategy(StrategyId.OPERATOR_EXTRACTION, _operators),
    Strategy(StrategyId.BLOCK_EXTRACTION, _blocks),
    Strategy(StrategyId.SENTENCE_FALLBACK, _sentences),
    Strategy(StrategyId.WORD_FALLBACK, _word_runs),
)

PLAIN_TEXT_STRATEGIES: tuple[Strategy, ...] = (
    Strategy(StrategyId.PLAIN_TEXT, _plain_text),
    Strategy(StrategyId.SENTENCE_FALLBACK, _sentences),
    Strategy(StrategyId.WORD_FALLBACK, _word_runs),
)


def resolve_document_kind(document: RawDocument) -> DocumentKind:
    if document.data[:_SNIFF_BYTES].lstrip().startswith(CONTAINER_SIGNATURE):
        return DocumentKind.CONTAINER

    media_type = (document.declared_media_type or "").split(";", 1)[0].strip().lower()
    if media_type in CONTAINER_MEDIA_TYPES:
        return DocumentKind.CONTAINER
    if media_type.startswith("text/") or media_type in TEXT_MEDIA_TYPES:
        return DocumentKind.PLAIN_TEXT

    if PurePosixPath(document.file_name or "").suffix.lower() in TEXT_EXTENSIONS:
        return DocumentKind.PLAIN_TEXT
    return DocumentKind.CONTAINER


def build_candidate(strategy: StrategyId, fragments: Sequence[str]) -> ExtractionCandidate:
    text = _WS.sub(" ", " ".join(fragments)).strip()
    return ExtractionCandidate(strategy=strategy, fragments=tuple(fragments), text=text)


class ExtractionPipeline:
    def __init__(
        self,
        *,
        thresholds: QualityThresholds | None = None,
        context: ValidationContext = ValidationContext.EXTRACTION,
        container_strategies: Sequence[Strategy] = CONTAINER_STRATEGIES,
        plain_text_strategies: Sequence[Strategy] = PLAIN_TEXT_STRATEGIES,
    ):
        self.thresholds = thresholds or QualityThresholds.from_settings()
        self.context = ValidationContext(context)
        self._strategies = {
            DocumentKind.CONTAINER: tuple(container_strategies),
            DocumentKind.PLAIN_TEXT: tuple(plain_text_strategies),
        }

    def strategies_for(self, kind: DocumentKind) -> tuple[Strategy, ...]:
        return self._strategies[kind]

    def prepare(self, document: RawDocument) -> tuple[DocumentKind, str]:
        """Decode, and strip container scaffolding when there is any."""
        kind = resolve_document_kind(document)
        encoding = detect_encoding(document.data)
        logger.debug("extraction.decode", extra={"kind": kind.value, "encoding": encoding})
        decoded = decode_bytes(document.data, encoding)
        if kind is DocumentKind.PLAIN_TEXT:
            return kind, decoded
        return kind, strip_structure(decoded)

    def run(self, document: RawDocument) -> ExtractionResult:
        kind, source = self.prepare(document)
        attempts: list[Attempt] = []

        for strategy in self.strategies_for(kind):
            candidate = build_candidate(strategy.id, strategy.run(source, self.thresholds))
            report = validate(candidate.text, context=self.context, thresholds=self.thresholds)

            logger.info(
                "extraction.attempt",
                extra={
                    "strategy": strategy.id.value,
                    "kind": kind.value,
                    "fragments": len(candidate.fragments),
                    "length": report.length,
                    "verdict": report.verdict.value,
                    "reasons": sorted(r.value for r in report.reject_reasons),
                },
            )

            if report.accepted:
                logger.info(
                    "extraction.accepted",
                    extra={"strategy": strategy.id.value, "attempts": len(attempts) + 1},
                )
                return ExtractionSuccess(text=candidate.text, strategy_used=strategy.id, report=report)

            attempts.append(Attempt(strategy=strategy.id, report=report))

        logger.warning(
            "extraction.failed",
            extra={
                "file_name": document.file_name,
                "byte_size": document.byte_size,
                "attempts": [a.strategy.value for a in attempts],
            },
        )
        return ExtractionFailure(
            attempts=tuple(attempts),
            file_name=document.file_name,
            byte_size=document.byte_size,
        )


def extract_document(
    data: bytes,
    file_name: str,
    declared_media_type: str,
    *,
    context: ValidationContext = ValidationContext.EXTRACTION,
    thresholds: QualityThresholds | None = None,
) -> ExtractionResult:
    document = RawDocument(data=data, file_name=file_name, declared_media_type=declared_media_type)
    return ExtractionPipeline(thresholds=thresholds, context=context).run(document)
