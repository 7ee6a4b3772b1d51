"""Tests for PDF extraction and scanning."""

import re
from pathlib import Path

import pytest

from filefinder.scan.models import Matched, NotMatched, ScanKind, SearchConfig, Unreadable
from filefinder.scan.pdf import PdfExtractionError, PdfScanner, PyMuPDFExtractor


class StubExtractor:
    """Extractor returning canned text and recording calls."""

    def __init__(self, text: str = "", error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.calls: list[Path] = []

    def extract_text(self, path: Path) -> str:
        self.calls.append(path)
        if self.error is not None:
            raise self.error
        return self.text


def _config(root: Path, **kwargs) -> SearchConfig:
    return SearchConfig(root=root, include_pdf=True, **kwargs)


def test_pymupdf_extracts_page_text(pdf_corpus: Path):
    text = PyMuPDFExtractor().extract_text(pdf_corpus / "lecture.pdf")

    assert "compilatore" in text


def test_pymupdf_rejects_encrypted_pdf(pdf_corpus: Path):
    with pytest.raises(PdfExtractionError, match="encrypted"):
        PyMuPDFExtractor().extract_text(pdf_corpus / "locked.pdf")


def test_pymupdf_rejects_empty_file(pdf_corpus: Path):
    with pytest.raises(PdfExtractionError):
        PyMuPDFExtractor().extract_text(pdf_corpus / "broken.pdf")


def test_scan_matches_extracted_text(pdf_corpus: Path):
    scanner = PdfScanner()
    config = _config(pdf_corpus, content=re.compile("(?i)COMPILATORE"))

    outcome = scanner.scan(pdf_corpus / "lecture.pdf", config)

    assert isinstance(outcome, Matched)
    assert outcome.kind is ScanKind.PDF
    assert outcome.matched_content is True
    assert "compilatore" in outcome.snippet.lower()


def test_scan_encrypted_pdf_is_unreadable(pdf_corpus: Path):
    config = _config(pdf_corpus, content=re.compile("compilatore"))

    outcome = PdfScanner().scan(pdf_corpus / "locked.pdf", config)

    assert isinstance(outcome, Unreadable)
    assert outcome.kind is ScanKind.PDF
    assert "encrypted" in outcome.reason


def test_scan_applies_name_and_content_with_and(temp_dir: Path):
    extractor = StubExtractor(text="interprete e compilatore")
    scanner = PdfScanner(extractor)
    config = _config(temp_dir, name="slides", content=re.compile("interprete"))

    assert isinstance(scanner.scan(temp_dir / "slides.pdf", config), Matched)
    assert isinstance(scanner.scan(temp_dir / "notes.pdf", config), NotMatched)


def test_scan_skips_extraction_without_content_pattern(temp_dir: Path):
    extractor = StubExtractor(text="ignored")
    scanner = PdfScanner(extractor)

    outcome = scanner.scan(temp_dir / "slides.pdf", _config(temp_dir, name="slides"))

    assert isinstance(outcome, Matched)
    assert extractor.calls == []


def test_unexpected_extractor_failure_propagates(temp_dir: Path):
    scanner = PdfScanner(StubExtractor(error=MemoryError("boom")))
    config = _config(temp_dir, content=re.compile("x"))

    with pytest.raises(MemoryError):
        scanner.scan(temp_dir / "bad.pdf", config)
