from docextract.extraction.decode import decode_bytes
from docextract.extraction.quality import count_garbage_markers
from docextract.extraction.strip import (
    strip_headers,
    strip_object_wrappers,
    strip_streams,
    strip_structure,
    strip_xref,
)

from samples import BINARY_BLOB, build_container, show_text


def test_strip_headers():
    out = strip_headers("%PDF-1.7\n%\ufffd\ufffd\nbody\n%%EOF")
    assert "PDF" not in out
    assert "EOF" not in out
    assert "body" in out


def test_strip_object_wrappers_handles_nested_dictionaries():
    src = "5 0 obj << /Type /Font /Widths << /A 1 /B <0A0B> >> /Parent 2 0 R >> endobj kept"
    out = strip_object_wrappers(src)
    assert out.split() == ["kept"]


def test_strip_streams_keeps_text_and_drops_binary():
    text_stream = "stream\nBT (visible) Tj ET\nendstream"
    binary_stream = "stream\n" + "\ufffd" * 50 + "(hidden) Tj\nendstream"
    out = strip_streams(text_stream + " " + binary_stream)
    assert "visible" in out
    assert "hidden" not in out
    assert "stream" not in out


def test_strip_xref():
    src = "xref\n0 2\n0000000000 65535 f \n0000000010 00000 n \ntrailer\nstartxref\n99\ntail"
    assert strip_xref(src).split() == ["tail"]


def test_strip_structure_on_container():
    decoded = decode_bytes(build_container(show_text("Readable words here."), binary_streams=(BINARY_BLOB,)))
    out = strip_structure(decoded)

    assert "Readable words here." in out
    assert "Decoy" not in out
    assert not any(ord(ch) > 127 for ch in out)
    for token in ("obj", "endobj", "xref", "trailer", "startxref", "%%EOF", "/Type"):
        assert token not in out


def test_strip_structure_leaves_no_garbage_outside_content():
    decoded = decode_bytes(build_container())
    assert count_garbage_markers(strip_structure(decoded)) == 0
    assert strip_structure("") == ""
