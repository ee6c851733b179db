"""docextract/extraction/decode.py

Bytes -> str. Never fatal: the encoding is chosen deterministically from the
bytes themselves and the quality gate deals with whatever survives.

Order: byte order mark (UTF-8, UTF-16), BOM-less UTF-16 by NUL layout,
strict UTF-8, then Latin-1, which accepts any byte. Containers are usually
not valid UTF-8 (binary streams, a high-byte comment after the header), so
their single-byte literals like `caf\\xe9` come out as Latin-1.
"""

import codecs
import re

from docextract.constants.media_types import CONTAINER_SIGNATURE

_HEX_WS = re.compile(r"\s+")

_UTF16_SNIFF_BYTES = 4096
_NUL_HEAVY = 0.4
_NUL_LIGHT = 0.1


def _utf16_without_bom(data: bytes) -> str | None:
    # ASCII-range UTF-16 puts a NUL in every other byte
    sample = data[:_UTF16_SNIFF_BYTES]
    if len(sample) < 4 or sample.startswith(CONTAINER_SIGNATURE):
        return None
    even, odd = sample[0::2], sample[1::2]
    even_nul = even.count(0) / len(even)
    odd_nul = odd.count(0) / len(odd)
    if odd_nul > _NUL_HEAVY and even_nul < _NUL_LIGHT:
        return "utf-16-le"
    if even_nul > _NUL_HEAVY and odd_nul < _NUL_LIGHT:
        return "utf-16-be"
    return None


def detect_encoding(data: bytes) -> str:
    if data.startswith(codecs.BOM_UTF8):
        return "utf-8-sig"
    if data.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        return "utf-16"
    guess = _utf16_without_bom(data)
    if guess:
        return guess
    try:
        data.decode("utf-8")
    except UnicodeDecodeError:
        return "latin-1"
    return "utf-8"


def decode_bytes(data: bytes, encoding: str | None = None) -> str:
    if not data:
        return ""
    return data.decode(encoding or detect_encoding(data), errors="replace")


def decode_hex_literal(hex_digits: str) -> str:
    """Decode the body of a `<...>` hex string.

    A trailing odd digit is padded with 0. A leading FE FF byte order mark
    means UTF-16BE, anything else is read as Latin-1.
    """
    digits = _HEX_WS.sub("", hex_digits)
    if len(digits) % 2:
        digits += "0"
    try:
        raw = bytes.fromhex(digits)
    except ValueError:
        return ""
    if raw.startswith(b"\xfe\xff"):
        return raw[2:].decode("utf-16-be", errors="replace")
    return raw.decode("latin-1")
