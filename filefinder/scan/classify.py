"""Decide which scanner, if any, handles a discovered file."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from filefinder.scan.models import ScanKind, SearchConfig, SkipReason


@dataclass(frozen=True, slots=True)
class Classification:
    """Either an eligible scan kind or the reason the file is excluded."""

    kind: ScanKind | None = None
    reason: SkipReason | None = None

    @property
    def eligible(self) -> bool:
        return self.kind is not None


def file_extension(path: Path) -> str:
    """Return the lowercase extension of ``path`` without the leading dot."""
    return path.suffix.lower().lstrip(".")


def classify(path: Path, extension: str, config: SearchConfig) -> Classification:
    """Classify a file from its extension and the search configuration.

    Rules apply in order: extension filter, PDF handling, then the non-text
    heuristic for unfiltered content searches. Anything left is a text
    candidate.

    Args:
        path: Discovered file path
        extension: Lowercase extension without the leading dot
        config: Search configuration

    Returns:
        Classification for the file
    """
    extension = extension.lower()

    if config.extensions and extension not in config.extensions:
        return Classification(reason=SkipReason.EXTENSION_EXCLUDED)

    if extension == "pdf":
        if not config.include_pdf:
            return Classification(reason=SkipReason.NOT_PDF)
        return Classification(kind=ScanKind.PDF)

    if (
        config.content is not None
        and not config.extensions
        and extension not in config.text_extensions
    ):
        return Classification(reason=SkipReason.NON_TEXT)

    return Classification(kind=ScanKind.TEXT)
