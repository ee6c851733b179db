"""docextract/extraction/operators.py

Show-text operator recovery over the token stream.

Two surface forms are recognized:
  (string) Tj      also ' and "
  [(a) -20 (b)] TJ
The literal (or the closed array) must be the token directly before the
operator; anything in between resets the state.
"""

from typing import Iterable, Iterator

from docextract.extraction.decode import decode_hex_literal
from docextract.extraction.escapes import unescape_literal
from docextract.extraction.tokens import Token, TokenKind, tokenize

SHOW_STRING_OPERATORS = frozenset({"Tj", "'", '"'})
SHOW_ARRAY_OPERATOR = "TJ"
BEGIN_TEXT = "BT"
END_TEXT = "ET"

_STRING_KINDS = (TokenKind.LITERAL, TokenKind.HEX)


def _payload(tok: Token) -> str:
    if tok.kind is TokenKind.HEX:
        return decode_hex_literal(tok.value)
    return unescape_literal(tok.value)


def _show_text_payloads(tokens: Iterable[Token]) -> Iterator[str]:
    pending: str | None = None
    open_array: list[str] | None = None
    closed_array: list[str] | None = None

    for tok in tokens:
        if open_array is not None:
            if tok.kind in _STRING_KINDS:
                open_array.append(_payload(tok))
            elif tok.kind is TokenKind.ARRAY_CLOSE:
                closed_array, open_array = open_array, None
            elif tok.kind is not TokenKind.NUMBER:
                # numbers are kerning offsets; anything else is malformed
                open_array = None
            continue

        if tok.kind is TokenKind.OPERATOR:
            if tok.value in SHOW_STRING_OPERATORS and pending is not None:
                yield pending
            elif tok.value == SHOW_ARRAY_OPERATOR and closed_array is not None:
                yield from closed_array
            pending = None
            closed_array = None
        elif tok.kind in _STRING_KINDS:
            pending = _payload(tok)
            closed_array = None
        elif tok.kind is TokenKind.ARRAY_OPEN:
            open_array = []
            pending = None
            closed_array = None
        else:
            pending = None
            closed_array = None


def _clean(payloads: Iterable[str]) -> list[str]:
    out: list[str] = []
    for p in payloads:
        p = p.strip()
        if p:
            out.append(p)
    return out


def extract_operator_text(source: str) -> list[str]:
    """Every show-text payload in document order, regardless of text blocks."""
    return _clean(_show_text_payloads(tokenize(source)))


def _text_blocks(tokens: Iterable[Token]) -> Iterator[list[Token]]:
    block: list[Token] | None = None
    for tok in tokens:
        if tok.kind is TokenKind.OPERATOR and tok.value == BEGIN_TEXT:
            if block is None:
                block = []
            continue
        if tok.kind is TokenKind.OPERATOR and tok.value == END_TEXT:
            if block is not None:
                yield block
            block = None
            continue
        if block is not None:
            block.append(tok)
    # unterminated final block still counts
    if block:
        yield block


def extract_block_text(source: str) -> list[str]:
    """One fragment per BT ... ET block, show-text payloads joined inside it."""
    fragments: list[str] = []
    for block in _text_blocks(tokenize(source)):
        joined = " ".join(_clean(_show_text_payloads(block)))
        if joined:
            fragments.append(joined)
    return fragments
