"""docextract/extraction/fallbacks.py

Last-resort recovery for malformed or non-standard layouts. Both functions
scan the stripped document with plain patterns, trade precision for recall,
and leave the verdict to the quality gate like any other strategy.
"""

import re

_SENTENCE = re.compile(r"""(?<![A-Za-z])[A-Z][A-Za-z0-9\s,;:'"()\-]{8,400}[.!?]""")
_WORD_RUN = re.compile(r"(?<!\S)[A-Za-z]{3,}(?:\s+[A-Za-z]{3,}){2,}(?!\S)")
_WS = re.compile(r"\s+")

MIN_SENTENCE_WORDS = 3


def extract_sentences(source: str, *, limit: int = 400) -> list[str]:
    """Capitalized runs ending in terminal punctuation."""
    out: list[str] = []
    for m in _SENTENCE.finditer(source):
        sentence = _WS.sub(" ", m.group(0)).strip()
        if len(sentence.split()) < MIN_SENTENCE_WORDS:
            continue
        out.append(sentence)
        if len(out) >= limit:
            break
    return out


def extract_word_runs(source: str, *, limit: int = 200) -> list[str]:
    """Runs of 3+ alphabetic words (3+ letters each), deduplicated in order."""
    seen: set[str] = set()
    out: list[str] = []
    for m in _WORD_RUN.finditer(source):
        run = _WS.sub(" ", m.group(0))
        if run in seen:
            continue
        seen.add(run)
        out.append(run)
        if len(out) >= limit:
            break
    return out
