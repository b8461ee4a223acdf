"""Exception hierarchy shared by the store, backend, and workspace layers."""

from __future__ import annotations


class PaperLensError(Exception):
    """Base class for all PaperLens errors that carry a user-facing message."""


class DuplicateDocumentError(PaperLensError):
    """Raised when a document id is already present in the store."""


class UploadRejectedError(PaperLensError):
    """Raised when an upload fails the type or size check (before extraction)."""


class ExtractionError(PaperLensError):
    """Raised when text extraction from an uploaded PDF fails."""


class BackendError(PaperLensError):
    """Raised when an AI backend call fails: transport, HTTP status, or body."""


class ResponseFormatError(BackendError):
    """Raised when a backend response body does not match the expected schema."""


class SpeechUnsupportedError(PaperLensError):
    """Raised when a speech capability is requested but none is available."""


class DocumentNotFoundError(PaperLensError):
    """Raised when an operation names a document id that is not in the store."""
