"""Search configuration, per-file outcomes, and the aggregated scan report."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MAX_BYTES = 2_000_000

DEFAULT_IGNORE_DIRS = frozenset({".git", "target", "node_modules"})

# Extensions treated as text when content search runs without an extension filter.
DEFAULT_TEXT_EXTENSIONS = frozenset(
    {
        "txt",
        "md",
        "rs",
        "js",
        "css",
        "html",
        "htm",
        "json",
        "toml",
        "yaml",
        "yml",
        "py",
        "java",
        "c",
        "cpp",
        "h",
        "hpp",
        "ts",
        "tsx",
    }
)


class SearchConfigError(ValueError):
    """Raised when a search cannot start because its configuration is invalid."""


class ScanKind(str, Enum):
    """Which scanner handles an eligible file."""

    TEXT = "text"
    PDF = "pdf"


class SkipReason(str, Enum):
    """Why a discovered file was not scanned."""

    NON_TEXT = "non_text"
    TOO_LARGE = "too_large"
    NON_UTF8 = "non_utf8"
    NOT_PDF = "not_pdf"
    EXTENSION_EXCLUDED = "extension_excluded"


@dataclass(frozen=True, slots=True)
class SearchConfig:
    """Immutable parameters for a single search run."""

    root: Path
    name: str | None = None
    content: re.Pattern[str] | None = None
    extensions: frozenset[str] = frozenset()
    include_pdf: bool = False
    max_bytes: int = DEFAULT_MAX_BYTES
    limit: int | None = None
    verbose: bool = False
    ignore_dirs: frozenset[str] = DEFAULT_IGNORE_DIRS
    text_extensions: frozenset[str] = DEFAULT_TEXT_EXTENSIONS


@dataclass(frozen=True, slots=True)
class Matched:
    path: Path
    kind: ScanKind
    matched_name: bool
    matched_content: bool
    snippet: str | None = None


@dataclass(frozen=True, slots=True)
class NotMatched:
    path: Path
    kind: ScanKind


@dataclass(frozen=True, slots=True)
class Skipped:
    path: Path
    reason: SkipReason


@dataclass(frozen=True, slots=True)
class Unreadable:
    """File could not be read or its text could not be extracted."""

    path: Path
    kind: ScanKind
    reason: str


@dataclass(frozen=True, slots=True)
class Errored:
    """Unexpected failure while processing a single file."""

    path: Path
    message: str


FileOutcome = Matched | NotMatched | Skipped | Unreadable | Errored


@dataclass(frozen=True, slots=True)
class EnumerationError:
    """Entry that could not be listed or inspected during the walk."""

    path: Path
    message: str


class MatchResult(BaseModel):
    """A matching file as reported to the user."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Path of the matching file")
    matched_name: bool = Field(..., description="File name contained the name query")
    matched_content: bool = Field(..., description="Content matched the content pattern")
    snippet: str | None = Field(None, description="Single-line excerpt around the match")


IssueKind = Literal["unreadable_text", "unreadable_pdf", "error", "enumeration"]


class ScanIssue(BaseModel):
    """Per-path diagnostic recorded during a run."""

    model_config = ConfigDict(frozen=True)

    path: str
    kind: IssueKind
    message: str


class ScanReport(BaseModel):
    """Sealed result of a search run."""

    model_config = ConfigDict(frozen=True)

    files_discovered: int = 0
    files_scanned_text: int = 0
    files_scanned_pdf: int = 0
    files_skipped_non_text: int = 0
    files_skipped_too_large: int = 0
    files_skipped_non_utf8: int = 0
    files_skipped_not_pdf: int = 0
    files_skipped_extension: int = 0
    files_skipped_unreadable_text: int = 0
    files_skipped_unreadable_pdf: int = 0
    errors_total: int = 0
    enumeration_errors: int = 0
    matches_total: int = 0
    matches_printed: int = 0
    elapsed_ms: int = 0
    results: list[MatchResult] = Field(default_factory=list)
    issues: list[ScanIssue] = Field(default_factory=list)

    @property
    def files_skipped(self) -> int:
        """Sum of every skip counter, unreadable files included."""
        return (
            self.files_skipped_non_text
            + self.files_skipped_too_large
            + self.files_skipped_non_utf8
            + self.files_skipped_not_pdf
            + self.files_skipped_extension
            + self.files_skipped_unreadable_text
            + self.files_skipped_unreadable_pdf
        )
