# text_extractor.py
"""Plain-text extraction for uploaded resumes (PDF, Word, text)."""
from __future__ import annotations

import io
import logging
from pathlib import Path

import pdfplumber
from docx import Document


logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = (".pdf", ".doc", ".docx", ".txt")
ALLOWED_CONTENT_TYPES = (
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
)


class TextExtractionError(ValueError):
    pass


def _extract_pdf(data: bytes) -> str:
    pages: list[str] = []
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        for page in pdf.pages:
            page_text = page.extract_text()
            if page_text:
                pages.append(page_text)
    return "\n".join(pages)


def _extract_docx(data: bytes) -> str:
    document = Document(io.BytesIO(data))
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def extract_text(data: bytes, file_name: str) -> str:
    ext = Path(file_name).suffix.lower()
    try:
        if ext == ".pdf":
            return _extract_pdf(data)
        if ext in (".docx", ".doc"):
            # python-docx only understands the OOXML container; legacy .doc files fail here.
            return _extract_docx(data)
        return data.decode("utf-8", errors="replace")
    except Exception as exc:  # noqa: BLE001
        logger.warning("text_extractor.failed file=%s error=%s: %s", file_name, type(exc).__name__, exc)
        raise TextExtractionError(f"Could not read {ext or 'uploaded'} file") from exc
