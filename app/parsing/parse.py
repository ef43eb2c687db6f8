from __future__ import annotations

from io import BytesIO

from docx import Document
from pypdf import PdfReader

from app.core.errors import ExtractionError
from app.storage.temp_files import UploadedDocument

from .signatures import UTF16_BOMS, detect_document_kind


def _parse_txt(content: bytes) -> str:
    encodings = ("utf-16", "latin-1") if content.startswith(UTF16_BOMS) else ("utf-8-sig", "latin-1")
    for encoding in encodings:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise ExtractionError("Text payload could not be decoded.")


def _parse_pdf(content: bytes) -> str:
    try:
        reader = PdfReader(BytesIO(content))
        text_parts: list[str] = []
        for page in reader.pages:
            page_text = (page.extract_text() or "").strip()
            if page_text:
                text_parts.append(page_text)
    except Exception as exc:
        raise ExtractionError(f"PDF parsing failed: {exc}") from exc
    return "\n".join(text_parts)


def _parse_docx(content: bytes) -> str:
    try:
        document = Document(BytesIO(content))
        paragraphs = [p.text.strip() for p in document.paragraphs if p.text and p.text.strip()]
    except Exception as exc:
        raise ExtractionError(f"DOCX parsing failed: {exc}") from exc
    return "\n".join(paragraphs)


_PARSERS = {
    "txt": _parse_txt,
    "pdf": _parse_pdf,
    "docx": _parse_docx,
}


def extract_text(content: bytes) -> str:
    """Return the text of a PDF, DOCX or plain-text payload.

    The format is taken from the payload itself, never from the declared
    media type. Raises ExtractionError for unsupported or unreadable input
    and when the document holds no text at all.
    """
    kind = detect_document_kind(content)
    if kind is None:
        raise ExtractionError("Unsupported document format.")

    text = _PARSERS[kind](content)
    if not text or not text.strip():
        raise ExtractionError(f"No extractable text found in {kind.upper()} document.")
    return text


def extract_document_text(document: UploadedDocument) -> str:
    try:
        content = document.path.read_bytes()
    except OSError as exc:
        raise ExtractionError(f"Stored upload could not be read: {exc}") from exc
    return extract_text(content)
