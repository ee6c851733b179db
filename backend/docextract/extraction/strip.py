"""docextract/extraction/strip.py

Removes container scaffolding from a decoded document before any text
operator is looked for.

Order:
1) header / footer signatures
2) indirect-object wrappers (obj headers, endobj, references, dictionaries)
3) stream payloads: binary ones go entirely, text content streams only lose
   their boundary keywords
4) cross-reference tables and trailers
"""

import re

_HEADER = re.compile(r"%PDF-\d+(?:\.\d+)?[^\r\n]*(?:\r?\n%[^\r\n]*)?")
_FOOTER = re.compile(r"%%EOF")

_OBJ_HEADER = re.compile(r"\b\d+\s+\d+\s+obj\b")
_ENDOBJ = re.compile(r"\bendobj\b")
_INDIRECT_REF = re.compile(r"\b\d+\s+\d+\s+R\b")
# Innermost dictionary first; hex strings may sit inside.
_DICTIONARY = re.compile(r"<<(?:[^<>]|<[0-9A-Fa-f\s]*>)*>>")
_MAX_DICT_DEPTH = 32

_STREAM = re.compile(r"\bstream\r?\n?(.*?)\bendstream\b", re.DOTALL)
_BINARY_RATIO = 0.1

_XREF_TABLE = re.compile(r"\bxref\b.*?\btrailer\b", re.DOTALL)
_STARTXREF = re.compile(r"\bstartxref\s+\d+")
_TRAILER = re.compile(r"\btrailer\b")


def _is_binary(body: str) -> bool:
    if not body:
        return False
    bad = 0
    for ch in body:
        code = ord(ch)
        if ch == "\ufffd" or (code < 32 and ch not in "\t\n\r\f") or 127 <= code < 160:
            bad += 1
    return bad / len(body) > _BINARY_RATIO


def _replace_stream(match: re.Match) -> str:
    body = match.group(1)
    if _is_binary(body):
        return " "
    return f" {body} "


def strip_headers(text: str) -> str:
    text = _HEADER.sub(" ", text)
    return _FOOTER.sub(" ", text)


def strip_object_wrappers(text: str) -> str:
    text = _OBJ_HEADER.sub(" ", text)
    text = _ENDOBJ.sub(" ", text)
    text = _INDIRECT_REF.sub(" ", text)
    for _ in range(_MAX_DICT_DEPTH):
        text, n = _DICTIONARY.subn(" ", text)
        if not n:
            break
    return text


def strip_streams(text: str) -> str:
    return _STREAM.sub(_replace_stream, text)


def strip_xref(text: str) -> str:
    text = _XREF_TABLE.sub(" ", text)
    text = _STARTXREF.sub(" ", text)
    return _TRAILER.sub(" ", text)


def strip_structure(text: str) -> str:
    if not text:
        return ""
    text = strip_headers(text)
    text = strip_object_wrappers(text)
    text = strip_streams(text)
    return strip_xref(text)
