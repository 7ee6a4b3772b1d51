"""Plain-text scanning and the match policy shared with the PDF scanner."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from filefinder.scan.models import (
    FileOutcome,
    Matched,
    NotMatched,
    ScanKind,
    SearchConfig,
    Skipped,
    SkipReason,
    Unreadable,
)

logger = logging.getLogger(__name__)

SNIPPET_CONTEXT = 40
SNIPPET_MAX_CHARS = 120

_LINE_BREAKS = re.compile(r"\r\n|[\r\n]")


def build_snippet(
    text: str,
    start: int,
    end: int,
    context: int = SNIPPET_CONTEXT,
    max_chars: int = SNIPPET_MAX_CHARS,
) -> str:
    """Return a single-line window of ``text`` around ``text[start:end]``.

    Args:
        text: Full text the match was found in
        start: Match start offset
        end: Match end offset
        context: Characters of context kept on each side of the match
        max_chars: Hard cap on the snippet length

    Returns:
        Excerpt with line breaks replaced by spaces
    """
    window = text[max(0, start - context) : min(len(text), end + context)]
    return _LINE_BREAKS.sub(" ", window)[:max_chars]


def name_matches(path: Path, query: str) -> bool:
    """Case-insensitive substring test against the file's base name."""
    return query.casefold() in path.name.casefold()


def evaluate_match(
    path: Path,
    kind: ScanKind,
    text: str | None,
    config: SearchConfig,
) -> Matched | NotMatched:
    """Apply the name and content filters to one file.

    Configured filters are combined with AND; with no filters every file
    matches. ``text`` may be None only when no content pattern is configured.
    """
    matched_name = False
    if config.name is not None:
        matched_name = name_matches(path, config.name)
        if not matched_name:
            return NotMatched(path=path, kind=kind)

    matched_content = False
    snippet: str | None = None
    if config.content is not None:
        found = config.content.search(text or "")
        if found is None:
            return NotMatched(path=path, kind=kind)
        matched_content = True
        snippet = build_snippet(found.string, found.start(), found.end())
    elif matched_name:
        snippet = path.name

    return Matched(
        path=path,
        kind=kind,
        matched_name=matched_name,
        matched_content=matched_content,
        snippet=snippet,
    )


def scan_text(path: Path, config: SearchConfig) -> FileOutcome:
    """Scan a text candidate, reading at most ``config.max_bytes`` bytes.

    Files over the cap are skipped without being read. Every candidate is
    read and must decode as UTF-8 before the filters run, so name-only and
    listing searches never report binary files.

    Args:
        path: File to scan
        config: Search configuration

    Returns:
        Outcome for the file
    """
    try:
        size = path.stat().st_size
    except OSError as exc:
        logger.debug("Cannot stat %s: %s", path, exc)
        return Unreadable(path=path, kind=ScanKind.TEXT, reason=str(exc))

    if size > config.max_bytes:
        return Skipped(path=path, reason=SkipReason.TOO_LARGE)

    try:
        with path.open("rb") as f:
            data = f.read(config.max_bytes)
            # A file that grew since stat() is over the cap.
            grown = os.fstat(f.fileno()).st_size > config.max_bytes
    except OSError as exc:
        logger.debug("Cannot read %s: %s", path, exc)
        return Unreadable(path=path, kind=ScanKind.TEXT, reason=str(exc))

    if grown:
        return Skipped(path=path, reason=SkipReason.TOO_LARGE)

    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return Skipped(path=path, reason=SkipReason.NON_UTF8)

    return evaluate_match(path, ScanKind.TEXT, text, config)
