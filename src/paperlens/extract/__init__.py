"""Text extraction for uploaded papers."""

from paperlens.extract.pdf import ExtractedText, extract_pdf

__all__ = ["ExtractedText", "extract_pdf"]
