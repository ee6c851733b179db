"""docextract/extraction/tokens.py

A small content-stream tokenizer. It is deliberately forgiving: anything it
does not understand becomes an OTHER token instead of an error, so the
consumers can keep scanning past garbage.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator


class TokenKind(str, Enum):
    LITERAL = "LITERAL"        # (...) raw body, escapes untouched
    HEX = "HEX"                # <...> raw hex digits
    ARRAY_OPEN = "ARRAY_OPEN"
    ARRAY_CLOSE = "ARRAY_CLOSE"
    OPERATOR = "OPERATOR"      # any bare keyword: Tj, TJ, BT, ET, ', ", ...
    NUMBER = "NUMBER"
    NAME = "NAME"              # /Name
    OTHER = "OTHER"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str


_WHITESPACE = re.compile(r"\s+")
_BAREWORD = re.compile(r"[^\s()<>\[\]{}/%]+")
_NAME = re.compile(r"/[^\s()<>\[\]{}/%]*")
_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)")
_HEX_STRING = re.compile(r"<([0-9A-Fa-f\s]*)>")
_COMMENT = re.compile(r"%[^\r\n]*")

# Longest literal we are willing to accept, parentheses included.
MAX_LITERAL_CHARS = 16384

_PAREN_EVENT = re.compile(r"\\.|[()]", re.DOTALL)


def _pair_parentheses(text: str) -> dict[int, int]:
    """Map each balanced '(' offset to the offset of its closing ')'.

    One pass with a stack, so a run of unbalanced '(' costs linear time.
    Escaped characters are skipped; a stray ')' with nothing open is ignored.
    """
    pairs: dict[int, int] = {}
    open_at: list[int] = []
    for m in _PAREN_EVENT.finditer(text):
        ch = m.group(0)
        if ch == "(":
            open_at.append(m.start())
        elif ch == ")" and open_at:
            pairs[open_at.pop()] = m.start()
    return pairs


def tokenize(text: str) -> Iterator[Token]:
    pairs = _pair_parentheses(text) if "(" in text else {}
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]

        if ch.isspace():
            i = _WHITESPACE.match(text, i).end()
            continue

        if ch == "%":
            i = _COMMENT.match(text, i).end()
            continue

        if ch == "(":
            close = pairs.get(i)
            if close is None or close - i >= MAX_LITERAL_CHARS:
                yield Token(TokenKind.OTHER, ch)
                i += 1
            else:
                yield Token(TokenKind.LITERAL, text[i + 1:close])
                i = close + 1
            continue

        if ch == "<":
            m = _HEX_STRING.match(text, i)
            if m:
                yield Token(TokenKind.HEX, m.group(1))
                i = m.end()
            else:
                yield Token(TokenKind.OTHER, ch)
                i += 1
            continue

        if ch == "[":
            yield Token(TokenKind.ARRAY_OPEN, ch)
            i += 1
            continue

        if ch == "]":
            yield Token(TokenKind.ARRAY_CLOSE, ch)
            i += 1
            continue

        if ch == "/":
            m = _NAME.match(text, i)
            yield Token(TokenKind.NAME, m.group(0))
            i = m.end()
            continue

        m = _BAREWORD.match(text, i)
        if m:
            word = m.group(0)
            if _NUMBER.fullmatch(word):
                yield Token(TokenKind.NUMBER, word)
            else:
                yield Token(TokenKind.OPERATOR, word)
            i = m.end()
            continue

        # ) > { } and anything else unmatched
        yield Token(TokenKind.OTHER, ch)
        i += 1
