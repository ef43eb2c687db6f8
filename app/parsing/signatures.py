from __future__ import annotations

from io import BytesIO
from zipfile import BadZipFile, ZipFile

PDF_MAGIC = b"%PDF-"
ZIP_MAGICS = (b"PK\x03\x04", b"PK\x05\x06", b"PK\x07\x08")
UTF16_BOMS = (b"\xff\xfe", b"\xfe\xff")


def _is_zip_payload(content: bytes) -> bool:
    return any(content.startswith(prefix) for prefix in ZIP_MAGICS)


def _zip_has_paths(content: bytes, prefixes: tuple[str, ...]) -> bool:
    try:
        with ZipFile(BytesIO(content)) as archive:
            names = archive.namelist()
    except (BadZipFile, OSError):
        return False
    return any(any(name.startswith(prefix) for prefix in prefixes) for name in names)


def _is_probably_text_payload(content: bytes) -> bool:
    if not content:
        return False
    if content.startswith(UTF16_BOMS):
        return True
    sample = content[:4096]
    if b"\x00" in sample:
        return False
    try:
        # A multi-byte sequence may be cut at the sample boundary.
        sample.decode("utf-8")
        return True
    except UnicodeDecodeError as exc:
        if exc.start >= len(sample) - 3:
            return True
    printable = 0
    for byte in sample:
        if byte in (9, 10, 13) or 32 <= byte <= 126 or byte >= 160:
            printable += 1
    return (printable / len(sample)) >= 0.75


def detect_document_kind(content: bytes) -> str | None:
    """Classify a payload by its leading bytes: ``pdf``, ``docx``, ``txt`` or None."""
    if content.startswith(PDF_MAGIC):
        return "pdf"
    if _is_zip_payload(content):
        return "docx" if _zip_has_paths(content, ("word/",)) else None
    if _is_probably_text_payload(content):
        return "txt"
    return None
