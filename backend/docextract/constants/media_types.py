"""
media_types.py
- Purpose: Central source of truth for how uploads are routed.
- Design: The %PDF- signature wins over anything the client declares.
"""

CONTAINER_SIGNATURE = b"%PDF-"

CONTAINER_MEDIA_TYPES = frozenset({
    "application/pdf",
    "application/x-pdf",
})

# text/* is always plain text; these are the non-text/* extras.
TEXT_MEDIA_TYPES = frozenset({
    "application/json",
    "application/xml",
    "application/x-markdown",
})

TEXT_EXTENSIONS = frozenset({".txt", ".md", ".markdown", ".csv", ".text", ".rst"})
