import time

import pytest

from docextract.extraction.pipeline import (
    CONTAINER_STRATEGIES,
    ExtractionPipeline,
    Strategy,
    build_candidate,
    extract_document,
    resolve_document_kind,
)
from docextract.extraction.quality import validate
from docextract.extraction.thresholds import QualityThresholds, ValidationContext
from docextract.extraction.types import (
    DocumentKind,
    ExtractionFailure,
    ExtractionSuccess,
    FailureReason,
    RawDocument,
    StrategyId,
    Verdict,
)

from samples import BINARY_BLOB, PROSE, PROSE_SENTENCES, SCAFFOLDING, build_container, show_text

STRAY = "(/Type /Page /Length 10 /Filter /FlateDecode) Tj\n(/Type /Font /Length 20 /Filter /LZWDecode) Tj\n"
LONG_PROSE = " ".join([PROSE] * 5)
NOTHING_RECOVERED = {
    FailureReason.NO_EXTRACTABLE_TEXT,
    FailureReason.INSUFFICIENT_LENGTH,
    FailureReason.INSUFFICIENT_WORD_COUNT,
}


def doc(data, file_name="doc.pdf", media_type="application/pdf"):
    return RawDocument(data=data, file_name=file_name, declared_media_type=media_type)


@pytest.fixture
def pipeline(thresholds):
    return ExtractionPipeline(thresholds=thresholds)


def test_show_text_operator_wins(pipeline):
    result = pipeline.run(doc(build_container(show_text("Hello World", *PROSE_SENTENCES))))

    assert isinstance(result, ExtractionSuccess)
    assert result.strategy_used is StrategyId.OPERATOR_EXTRACTION
    assert result.text.startswith("Hello World This chapter")
    assert result.report.accepted


def test_block_extraction_when_stray_operators_carry_garbage(pipeline):
    result = pipeline.run(doc(build_container(STRAY + show_text(*PROSE_SENTENCES))))

    assert isinstance(result, ExtractionSuccess)
    assert result.strategy_used is StrategyId.BLOCK_EXTRACTION
    assert "/Type" not in result.text


def test_binary_streams_never_leak(pipeline):
    result = pipeline.run(doc(build_container(show_text(*PROSE_SENTENCES), binary_streams=(BINARY_BLOB,))))

    assert isinstance(result, ExtractionSuccess)
    assert "Decoy" not in result.text
    assert result.text == PROSE


def test_scaffolding_only_fails_with_reasons(pipeline):
    result = pipeline.run(doc(build_container(SCAFFOLDING)))

    assert isinstance(result, ExtractionFailure)
    assert [a.strategy for a in result.attempts] == [s.id for s in CONTAINER_STRATEGIES]
    assert all(a.report.verdict is Verdict.REJECT for a in result.attempts)
    assert FailureReason.GARBAGE_MARKER_THRESHOLD_EXCEEDED in result.attempts[0].report.reject_reasons
    assert FailureReason.GARBAGE_MARKER_THRESHOLD_EXCEEDED in result.attempts[1].report.reject_reasons
    assert result.attempts[-1].report.reject_reasons == NOTHING_RECOVERED
    assert result.byte_size > 0


def test_bare_container_has_nothing_to_extract(pipeline):
    result = pipeline.run(doc(build_container()))

    assert isinstance(result, ExtractionFailure)
    assert result.reasons == NOTHING_RECOVERED


def test_unbalanced_parentheses_fail_fast(pipeline):
    data = build_container("BT " + "(" * 100_000 + " ET")
    started = time.perf_counter()
    result = pipeline.run(doc(data))
    assert time.perf_counter() - started < 5.0
    assert isinstance(result, ExtractionFailure)


def test_repeated_character_document_is_rejected(pipeline):
    result = pipeline.run(doc(b"x" * 500, "x.txt", "text/plain"))

    assert isinstance(result, ExtractionFailure)
    assert result.attempts[0].strategy is StrategyId.PLAIN_TEXT
    assert FailureReason.REPEATING_PATTERN_DETECTED in result.attempts[0].report.reject_reasons


def test_prose_without_container_syntax_uses_sentence_fallback(pipeline):
    result = pipeline.run(doc(LONG_PROSE.encode("utf-8")))

    assert isinstance(result, ExtractionSuccess)
    assert result.strategy_used is StrategyId.SENTENCE_FALLBACK
    assert result.text == LONG_PROSE


def test_same_prose_as_show_text_uses_operators(pipeline):
    result = pipeline.run(doc(show_text(*PROSE_SENTENCES).encode("latin-1")))

    assert isinstance(result, ExtractionSuccess)
    assert result.strategy_used is StrategyId.OPERATOR_EXTRACTION


def test_plain_text_is_taken_as_is(pipeline):
    result = pipeline.run(doc(PROSE.encode("utf-8"), "notes.txt", "text/plain"))

    assert isinstance(result, ExtractionSuccess)
    assert result.strategy_used is StrategyId.PLAIN_TEXT
    assert result.text == PROSE


def test_utf16_text_file_is_decoded(pipeline):
    for data in (PROSE.encode("utf-16"), PROSE.encode("utf-16-le")):
        result = pipeline.run(doc(data, "notes.txt", "text/plain"))

        assert isinstance(result, ExtractionSuccess)
        assert result.strategy_used is StrategyId.PLAIN_TEXT
        assert result.text == PROSE


def test_single_byte_literals_read_as_latin1(pipeline):
    result = pipeline.run(doc(build_container(show_text("Le caf\u00e9 est ouvert.", *PROSE_SENTENCES))))

    assert isinstance(result, ExtractionSuccess)
    assert result.strategy_used is StrategyId.OPERATOR_EXTRACTION
    assert result.text.startswith("Le caf\u00e9 est ouvert.")


def test_empty_document(pipeline):
    result = pipeline.run(doc(b""))

    assert isinstance(result, ExtractionFailure)
    assert result.byte_size == 0
    assert result.reasons == NOTHING_RECOVERED


def test_generation_context_adds_domain_gate(thresholds):
    text = ("The quick brown fox jumps over the lazy dog near the river bank. " * 4).encode()
    document = doc(text, "fox.txt", "text/plain")

    assert isinstance(ExtractionPipeline(thresholds=thresholds).run(document), ExtractionSuccess)

    result = ExtractionPipeline(thresholds=thresholds, context=ValidationContext.GENERATION).run(document)
    assert isinstance(result, ExtractionFailure)
    assert FailureReason.LOW_DOMAIN_TERM_DENSITY in result.reasons


def test_extraction_is_idempotent(pipeline):
    document = doc(build_container(STRAY + show_text(*PROSE_SENTENCES)))
    assert pipeline.run(document) == pipeline.run(document)

    failing = doc(build_container(SCAFFOLDING))
    assert pipeline.run(failing) == pipeline.run(failing)


def _spy(strategy, calls):
    def run(source, t):
        calls.append(strategy.id)
        return strategy.run(source, t)

    return Strategy(strategy.id, run)


def test_strategies_stop_at_first_accept(thresholds):
    calls = []
    pipeline = ExtractionPipeline(
        thresholds=thresholds,
        container_strategies=[_spy(s, calls) for s in CONTAINER_STRATEGIES],
    )
    pipeline.run(doc(build_container(show_text(*PROSE_SENTENCES))))
    assert calls == [StrategyId.OPERATOR_EXTRACTION]


def test_strategies_run_in_fixed_order(thresholds):
    calls = []
    pipeline = ExtractionPipeline(
        thresholds=thresholds,
        container_strategies=[_spy(s, calls) for s in CONTAINER_STRATEGIES],
    )
    pipeline.run(doc(build_container(SCAFFOLDING)))
    assert calls == [
        StrategyId.OPERATOR_EXTRACTION,
        StrategyId.BLOCK_EXTRACTION,
        StrategyId.SENTENCE_FALLBACK,
        StrategyId.WORD_FALLBACK,
    ]


def test_accepted_text_always_meets_thresholds(pipeline, thresholds):
    documents = [
        doc(build_container(show_text(*PROSE_SENTENCES))),
        doc(build_container(STRAY + show_text(*PROSE_SENTENCES))),
        doc(LONG_PROSE.encode()),
        doc(PROSE.encode(), "a.md", ""),
    ]
    for document in documents:
        result = pipeline.run(document)
        assert isinstance(result, ExtractionSuccess)
        assert result.text
        assert len(result.text) >= thresholds.min_length
        assert result.report.readable_char_ratio >= thresholds.min_readable_ratio
        assert result.report.garbage_marker_count <= thresholds.max_garbage_markers


def test_success_requires_accepted_report(thresholds):
    rejected = validate("too short", thresholds=thresholds)
    with pytest.raises(ValueError):
        ExtractionSuccess(text="too short", strategy_used=StrategyId.PLAIN_TEXT, report=rejected)


def test_build_candidate_collapses_whitespace():
    candidate = build_candidate(StrategyId.BLOCK_EXTRACTION, ["  one\n", "two\t three "])
    assert candidate.text == "one two three"
    assert candidate.fragments == ("  one\n", "two\t three ")
    assert build_candidate(StrategyId.WORD_FALLBACK, []).is_empty


@pytest.mark.parametrize(
    "data, file_name, media_type, expected",
    [
        (b"%PDF-1.7 ...", "notes.txt", "text/plain", DocumentKind.CONTAINER),
        (b"hello", "x.bin", "application/pdf", DocumentKind.CONTAINER),
        (b"hello", "x.bin", "text/markdown; charset=utf-8", DocumentKind.PLAIN_TEXT),
        (b"hello", "x.bin", "application/json", DocumentKind.PLAIN_TEXT),
        (b"hello", "README.md", "application/octet-stream", DocumentKind.PLAIN_TEXT),
        (b"hello", "blob", "application/octet-stream", DocumentKind.CONTAINER),
    ],
)
def test_resolve_document_kind(data, file_name, media_type, expected):
    assert resolve_document_kind(RawDocument(data, file_name, media_type)) is expected


def test_extract_document_helper(prose_container):
    result = extract_document(prose_container, "doc.pdf", "application/pdf", thresholds=QualityThresholds())
    assert isinstance(result, ExtractionSuccess)
