"""Document builders shared by the test modules."""

PROSE_SENTENCES = [
    "This chapter gives an overview of the learning process and its key concepts.",
    "Students study each principle through a worked example and a short practice exercise.",
    "The method explains how knowledge is organized into topics, lessons and sections.",
    "Every lesson ends with a summary that connects the theory to a practical application.",
    "Teachers use the guide to plan training sessions and to measure student progress.",
    "A clear structure helps learners understand the material and remember the main ideas.",
]

PROSE = " ".join(PROSE_SENTENCES)


def _literal(text: str) -> str:
    return "(" + text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)") + ")"


def show_text(*lines: str) -> str:
    """One BT ... ET block showing each line with Tj."""
    body = "\n".join(f"{_literal(line)} Tj\n0 -14 Td" for line in lines)
    return f"BT\n/F1 12 Tf\n72 712 Td\n{body}\nET"


def build_container(*content_streams: str, binary_streams: tuple[bytes, ...] = ()) -> bytes:
    """A small PDF-like byte buffer: header, catalog/page objects, the given
    content streams, optional binary streams, xref table and trailer."""
    parts: list[bytes] = [
        b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n",
        b"1 0 obj\n<< /Type /Catalog /Pages 2 0 R >>\nendobj\n",
        b"2 0 obj\n<< /Type /Pages /Kids [3 0 R] /Count 1 >>\nendobj\n",
        b"3 0 obj\n<< /Type /Page /Parent 2 0 R /Contents 4 0 R >>\nendobj\n",
    ]
    num = 4
    for content in content_streams:
        body = content.encode("latin-1")
        parts.append(
            f"{num} 0 obj\n<< /Length {len(body)} >>\nstream\n".encode("latin-1")
            + body
            + b"\nendstream\nendobj\n"
        )
        num += 1
    for blob in binary_streams:
        parts.append(
            f"{num} 0 obj\n<< /Length {len(blob)} /Filter /FlateDecode >>\nstream\n".encode("latin-1")
            + blob
            + b"\nendstream\nendobj\n"
        )
        num += 1
    xref = f"xref\n0 {num}\n0000000000 65535 f \n" + "".join(
        f"{i * 100:010d} 00000 n \n" for i in range(1, num)
    )
    parts.append(xref.encode("latin-1"))
    parts.append(f"trailer\n<< /Size {num} /Root 1 0 R >>\nstartxref\n1234\n%%EOF\n".encode("latin-1"))
    return b"".join(parts)


# Compressed-looking bytes with a show-text decoy inside.
BINARY_BLOB = bytes(range(128, 256)) * 4 + b"(Decoy text hidden in binary) Tj"

SCAFFOLDING = show_text(
    "/Type /Page /Length 10 /Filter /FlateDecode",
    "/Type /Font /Length 20 /Filter /LZWDecode",
)

SCAFFOLDING_CONTAINER = build_container(SCAFFOLDING)
