"""docextract/extraction/escapes.py

Literal-string escape decoding.

The order is fixed: control escapes, then escaped parentheses, then one
left-to-right pass for line continuations, octal codes and the escaped
backslash. Collapsing `\\\\` any earlier turns `\\\\(` into an escaped
parenthesis that was never there, and `\\\\101` into a character code.
"""

import re

_CONTROL_ESCAPES = (
    ("\\n", "\n"),
    ("\\r", "\r"),
    ("\\t", "\t"),
    ("\\b", "\b"),
    ("\\f", "\f"),
)

_TAIL_ESCAPE = re.compile(r"\\(\\|[0-7]{1,3}|\r\n|\r|\n)")


def _tail_escape(m: re.Match) -> str:
    seq = m.group(1)
    if seq == "\\":
        return "\\"
    if seq[0] in "\r\n":
        return ""
    # high-order overflow is ignored: \777 is 0xFF
    return chr(int(seq, 8) & 0xFF)


def unescape_literal(raw: str) -> str:
    out = raw
    for seq, ch in _CONTROL_ESCAPES:
        out = out.replace(seq, ch)
    out = out.replace("\\(", "(").replace("\\)", ")")
    return _TAIL_ESCAPE.sub(_tail_escape, out)
