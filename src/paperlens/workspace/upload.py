"""Upload: validate a picked file, extract its text, register the document.

Type and size checks run before any extraction work. If extraction fails,
no document is created, so the store never holds a partial document.
"""

from __future__ import annotations

import logging
import mimetypes
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from paperlens.exceptions import ExtractionError, UploadRejectedError
from paperlens.extract.pdf import ExtractedText, extract_pdf
from paperlens.store.document_store import DocumentStore
from paperlens.store.models import ResearchDocument

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024

Extractor = Callable[[Path], ExtractedText]


@dataclass(frozen=True)
class UploadFile:
    """A file picked for upload, as reported by the picker."""

    name: str
    content_type: str
    size: int
    path: Path

    @classmethod
    def from_path(cls, path: Path) -> UploadFile:
        """Describe a local file; the MIME type is guessed from its extension."""
        content_type, _ = mimetypes.guess_type(path.name)
        return cls(
            name=path.name,
            content_type=content_type or "application/octet-stream",
            size=path.stat().st_size,
            path=path,
        )


def validate_upload(file: UploadFile, max_bytes: int = DEFAULT_MAX_BYTES) -> None:
    """Reject anything that is not a PDF or is larger than *max_bytes*.

    Raises:
        UploadRejectedError: With the message to show next to the picker.
    """
    if file.content_type != PDF_MIME:
        raise UploadRejectedError("Please upload a valid PDF file.")
    if file.size > max_bytes:
        limit_mb = max_bytes / (1024 * 1024)
        raise UploadRejectedError(f"File is too large. Maximum size is {limit_mb:g}MB.")


def upload_document(
    store: DocumentStore,
    file: UploadFile,
    *,
    max_bytes: int = DEFAULT_MAX_BYTES,
    extractor: Extractor = extract_pdf,
) -> ResearchDocument:
    """Validate, extract, and add *file* to *store*. Returns the new document.

    Raises:
        UploadRejectedError: Wrong type or too large (extraction never runs).
        ExtractionError: The PDF could not be parsed; nothing is stored.
    """
    validate_upload(file, max_bytes)

    try:
        extracted = extractor(file.path)
    except ExtractionError as exc:
        raise ExtractionError(f"Failed to parse PDF: {exc}") from exc

    doc = ResearchDocument.create(
        name=file.name,
        size=file.size,
        content=extracted.text,
        page_count=extracted.page_count,
    )
    store.add(doc)
    logger.info("Uploaded %s as %s (%d pages)", file.name, doc.id, doc.page_count)
    return doc
