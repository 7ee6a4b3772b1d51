"""PDF text extraction port, its PyMuPDF adapter, and the PDF scanner."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Protocol

import fitz  # PyMuPDF

from filefinder.scan.models import (
    FileOutcome,
    ScanKind,
    SearchConfig,
    Unreadable,
)
from filefinder.scan.text import evaluate_match

logger = logging.getLogger(__name__)

# MuPDF keeps a process-wide context that is not safe for concurrent use.
_FITZ_LOCK = threading.Lock()


class PdfExtractionError(RuntimeError):
    """Raised when a PDF is encrypted, malformed, or otherwise unreadable."""


class PdfTextExtractor(Protocol):
    """Port interface for turning a PDF file into plain text."""

    def extract_text(self, path: Path) -> str:
        """Return the document text or raise ``PdfExtractionError``."""
        ...


class PyMuPDFExtractor:
    """Extract PDF text page by page with PyMuPDF."""

    def __init__(self, *, quiet: bool = True) -> None:
        if quiet:
            # Keep MuPDF from printing repair chatter for broken files.
            fitz.TOOLS.mupdf_display_errors(False)

    def extract_text(self, path: Path) -> str:
        with _FITZ_LOCK:
            try:
                doc = fitz.open(str(path))
            except (RuntimeError, ValueError, OSError) as exc:
                raise PdfExtractionError(f"cannot open PDF: {exc}") from exc

            with doc:
                if doc.needs_pass:
                    raise PdfExtractionError("PDF is encrypted")
                try:
                    return "\n\n".join(page.get_text() for page in doc)
                except (RuntimeError, ValueError) as exc:
                    raise PdfExtractionError(f"cannot extract text: {exc}") from exc


class PdfScanner:
    """Apply the name/content filters to text extracted from PDFs."""

    def __init__(self, extractor: PdfTextExtractor | None = None) -> None:
        self.extractor = extractor or PyMuPDFExtractor()

    def scan(self, path: Path, config: SearchConfig) -> FileOutcome:
        """Scan one PDF.

        Extraction is skipped when no content pattern is configured. An
        extraction failure yields ``Unreadable``; other exceptions propagate
        to the caller's fault boundary.
        """
        if config.content is None:
            return evaluate_match(path, ScanKind.PDF, None, config)

        try:
            text = self.extractor.extract_text(path)
        except PdfExtractionError as exc:
            logger.debug("[pdf] unreadable: %s (%s)", path, exc)
            return Unreadable(path=path, kind=ScanKind.PDF, reason=str(exc))

        return evaluate_match(path, ScanKind.PDF, text, config)
