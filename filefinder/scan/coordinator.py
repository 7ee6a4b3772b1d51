"""Walk a tree, scan files concurrently, and reduce outcomes into a report."""

from __future__ import annotations

import logging
import threading
import time
from collections import Counter
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from functools import partial
from pathlib import Path
from typing import Literal

from filefinder.config import default_max_workers
from filefinder.scan.classify import classify, file_extension
from filefinder.scan.isolate import isolate
from filefinder.scan.limit import limit_results
from filefinder.scan.models import (
    EnumerationError,
    Errored,
    FileOutcome,
    IssueKind,
    Matched,
    MatchResult,
    NotMatched,
    ScanIssue,
    ScanKind,
    ScanReport,
    SearchConfig,
    Skipped,
    SkipReason,
    Unreadable,
)
from filefinder.scan.pdf import PdfScanner
from filefinder.scan.text import scan_text
from filefinder.scan.walk import iter_files

logger = logging.getLogger(__name__)

ScanPhase = Literal["init", "scanning", "draining", "sealed"]

_SKIP_COUNTERS: dict[SkipReason, str] = {
    SkipReason.NON_TEXT: "files_skipped_non_text",
    SkipReason.TOO_LARGE: "files_skipped_too_large",
    SkipReason.NON_UTF8: "files_skipped_non_utf8",
    SkipReason.NOT_PDF: "files_skipped_not_pdf",
    SkipReason.EXTENSION_EXCLUDED: "files_skipped_extension",
}

_SCANNED_COUNTERS: dict[ScanKind, str] = {
    ScanKind.TEXT: "files_scanned_text",
    ScanKind.PDF: "files_scanned_pdf",
}

_UNREADABLE_COUNTERS: dict[ScanKind, str] = {
    ScanKind.TEXT: "files_skipped_unreadable_text",
    ScanKind.PDF: "files_skipped_unreadable_pdf",
}

_UNREADABLE_ISSUES: dict[ScanKind, IssueKind] = {
    ScanKind.TEXT: "unreadable_text",
    ScanKind.PDF: "unreadable_pdf",
}


class ReportAccumulator:
    """Counters, matches, and issues merged from per-file outcomes.

    Every mutation takes the accumulator lock. Once sealed, further merges
    raise ``RuntimeError``.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: Counter[str] = Counter()
        self._matches: list[MatchResult] = []
        self._issues: list[ScanIssue] = []
        self._sealed = False

    def _check_open(self) -> None:
        if self._sealed:
            raise RuntimeError("Report already sealed")

    def add_discovered(self) -> None:
        with self._lock:
            self._check_open()
            self._counters["files_discovered"] += 1

    def record_enumeration_error(self, error: EnumerationError) -> None:
        with self._lock:
            self._check_open()
            self._counters["enumeration_errors"] += 1
            self._issues.append(
                ScanIssue(path=str(error.path), kind="enumeration", message=error.message)
            )

    def merge(self, outcome: FileOutcome) -> None:
        """Fold one file's outcome into the counters."""
        with self._lock:
            self._check_open()
            match outcome:
                case Matched():
                    self._counters[_SCANNED_COUNTERS[outcome.kind]] += 1
                    self._matches.append(
                        MatchResult(
                            path=str(outcome.path),
                            matched_name=outcome.matched_name,
                            matched_content=outcome.matched_content,
                            snippet=outcome.snippet,
                        )
                    )
                case NotMatched():
                    self._counters[_SCANNED_COUNTERS[outcome.kind]] += 1
                case Skipped():
                    self._counters[_SKIP_COUNTERS[outcome.reason]] += 1
                case Unreadable():
                    self._counters[_UNREADABLE_COUNTERS[outcome.kind]] += 1
                    self._issues.append(
                        ScanIssue(
                            path=str(outcome.path),
                            kind=_UNREADABLE_ISSUES[outcome.kind],
                            message=outcome.reason,
                        )
                    )
                case Errored():
                    self._counters["errors_total"] += 1
                    self._issues.append(
                        ScanIssue(path=str(outcome.path), kind="error", message=outcome.message)
                    )
                case _:
                    raise TypeError(f"Unsupported outcome: {outcome!r}")

    def seal(self, *, elapsed_ms: int, limit: int | None) -> ScanReport:
        """Freeze the accumulator and build the final report.

        Matches are ordered by path so output is reproducible regardless of
        completion order, then truncated to ``limit``.
        """
        with self._lock:
            self._check_open()
            self._sealed = True
            ordered = sorted(self._matches, key=lambda result: result.path)
            printed = limit_results(ordered, limit)
            issues = sorted(self._issues, key=lambda issue: (issue.path, issue.kind))
            return ScanReport(
                **self._counters,
                matches_total=len(ordered),
                matches_printed=len(printed),
                elapsed_ms=elapsed_ms,
                results=printed,
                issues=issues,
            )


class ScanCoordinator:
    """Drive one search run from enumeration to a sealed ``ScanReport``.

    ``phase`` is ``"scanning"`` while the tree is walked and files are
    dispatched, ``"draining"`` once the walk is done and only in-flight
    tasks remain, then ``"sealed"``.
    """

    def __init__(
        self,
        *,
        pdf_scanner: PdfScanner | None = None,
        max_workers: int | None = None,
    ) -> None:
        self._pdf_scanner = pdf_scanner
        self.max_workers = max_workers or default_max_workers()
        self.phase: ScanPhase = "init"

    @property
    def pdf_scanner(self) -> PdfScanner:
        # Created on first use; text-only runs never configure MuPDF.
        if self._pdf_scanner is None:
            self._pdf_scanner = PdfScanner()
        return self._pdf_scanner

    def scan_file(self, path: Path, config: SearchConfig) -> FileOutcome:
        """Classify one file and hand it to the matching scanner."""
        classification = classify(path, file_extension(path), config)
        if classification.reason is not None:
            return Skipped(path=path, reason=classification.reason)
        if classification.kind is ScanKind.PDF:
            return self.pdf_scanner.scan(path, config)
        return scan_text(path, config)

    def run(self, config: SearchConfig) -> ScanReport:
        """Scan every file under ``config.root`` and return the sealed report.

        Files are scanned on a thread pool; outcomes are reduced on the calling
        thread as they complete. At most ``max_workers * 4`` file tasks are in
        flight at any time.
        """
        if self.phase != "init":
            raise RuntimeError("ScanCoordinator instances run once")

        started = time.monotonic()
        accumulator = ReportAccumulator()
        pending: dict[Future[FileOutcome], Path] = {}
        max_pending = self.max_workers * 4

        if config.include_pdf:
            # Build the PDF adapter before workers race to create it.
            _ = self.pdf_scanner

        def reduce_done(done: set[Future[FileOutcome]]) -> None:
            for future in done:
                path = pending.pop(future)
                try:
                    outcome = future.result()
                except Exception as exc:  # noqa: BLE001 - executor-level failure
                    outcome = Errored(path=path, message=f"{type(exc).__name__}: {exc}")
                accumulator.merge(outcome)

        self.phase = "scanning"
        with ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="filefinder-scan"
        ) as executor:
            for path in iter_files(
                config.root,
                ignore_dirs=config.ignore_dirs,
                on_error=accumulator.record_enumeration_error,
            ):
                accumulator.add_discovered()
                task = partial(self.scan_file, path, config)
                pending[executor.submit(isolate, path, task)] = path

                if len(pending) >= max_pending:
                    done, _ = wait(list(pending), return_when=FIRST_COMPLETED)
                    reduce_done(done)

            self.phase = "draining"
            while pending:
                done, _ = wait(list(pending), return_when=FIRST_COMPLETED)
                reduce_done(done)

        elapsed_ms = int((time.monotonic() - started) * 1000)
        report = accumulator.seal(elapsed_ms=elapsed_ms, limit=config.limit)
        self.phase = "sealed"

        logger.debug(
            "Scanned %d files under %s: %d matches, %d errors",
            report.files_discovered,
            config.root,
            report.matches_total,
            report.errors_total,
        )
        return report


def run_search(
    config: SearchConfig,
    *,
    max_workers: int | None = None,
    pdf_scanner: PdfScanner | None = None,
) -> ScanReport:
    """Run a search with a fresh coordinator."""
    coordinator = ScanCoordinator(pdf_scanner=pdf_scanner, max_workers=max_workers)
    return coordinator.run(config)
