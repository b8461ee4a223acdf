"""PDF text extraction via pypdf."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pypdf import PdfReader

from paperlens.exceptions import ExtractionError


@dataclass(frozen=True)
class ExtractedText:
    text: str
    page_count: int


def extract_pdf(path: Path | str) -> ExtractedText:
    """Extract all page text from the PDF at *path*.

    Page text is stripped and joined with blank lines. Pages that yield no
    text (scanned images, etc.) still count towards ``page_count``.

    Raises:
        ExtractionError: If the file cannot be opened or parsed as a PDF,
            whatever exception pypdf raised.
    """
    try:
        reader = PdfReader(str(path))
        parts: list[str] = []
        for page in reader.pages:
            stripped = (page.extract_text() or "").strip()
            if stripped:
                parts.append(stripped)
        page_count = len(reader.pages)
    except Exception as exc:  # pypdf raises many types on malformed files
        raise ExtractionError(str(exc) or type(exc).__name__) from exc
    return ExtractedText(text="\n\n".join(parts), page_count=page_count)
