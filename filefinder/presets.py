"""Preset file loading, option merging, and search configuration construction."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from filefinder.config import Settings
from filefinder.scan.models import DEFAULT_MAX_BYTES, SearchConfig, SearchConfigError

LOCAL_CONFIG_NAME = "filefinder.yaml"

OutputFormat = Literal["json", "markdown"]

SAMPLE_CONFIG = """\
defaults:
  format: json
  max_bytes: 2000000

presets:
  demo_text:
    dir: samples
    include_pdf: false
    ext: "txt,md"
    content: "(?i)compilatore|interprete|semantica|tipi|grammatica|parser|rust|python"
    format: json

  demo_pdf:
    dir: samples_pdf
    include_pdf: true
    ext: "pdf"
    content: "(?i)compilatore|interprete|semantica|tipi|grammatica|parser|rust|python"
    format: json
"""


class PresetError(ValueError):
    """Raised when the preset file is malformed or a preset is unknown."""


class SearchOptions(BaseModel):
    """Search options as given by the CLI, a preset, or the defaults section.

    ``None`` means "not set at this layer".
    """

    model_config = ConfigDict(extra="forbid")

    dir: Path | None = None
    include_pdf: bool | None = None
    name: str | None = None
    content: str | None = None
    format: OutputFormat | None = None
    max_bytes: int | None = Field(None, ge=0)
    ext: str | None = None
    limit: int | None = Field(None, ge=0)
    verbose: bool | None = None

    @field_validator("format", mode="before")
    @classmethod
    def _normalize_format(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().lower()
            if value == "md":
                return "markdown"
        return value

    def overlay(self, base: SearchOptions) -> SearchOptions:
        """Return ``base`` with every field set on ``self`` taking precedence."""
        merged = base.model_dump()
        merged.update(self.model_dump(exclude_none=True))
        return SearchOptions(**merged)


HARDCODED_DEFAULTS = SearchOptions(
    dir=Path("."),
    include_pdf=False,
    format="markdown",
    max_bytes=DEFAULT_MAX_BYTES,
    verbose=False,
)


class PresetFile(BaseModel):
    """Parsed preset file: an optional defaults section and named presets."""

    model_config = ConfigDict(extra="forbid")

    defaults: SearchOptions | None = None
    presets: dict[str, SearchOptions] = Field(default_factory=dict)


def resolve_config_path(explicit: Path | None, settings: Settings) -> Path | None:
    """Locate the preset file.

    Order: explicit path, ``settings.config_file``, ``./filefinder.yaml``,
    then ``<config_dir>/config.yaml``. Explicit paths are returned even if
    missing so the caller can report them.
    """
    if explicit is not None:
        return explicit
    if settings.config_file is not None:
        return settings.config_file

    local = Path.cwd() / LOCAL_CONFIG_NAME
    if local.exists():
        return local

    user_config = settings.get_default_config_path()
    if user_config.exists():
        return user_config

    return None


def load_preset_file(path: Path | None) -> PresetFile:
    """Load presets from YAML.

    Args:
        path: Preset file path, or None when no file was found

    Returns:
        Parsed preset file; empty when ``path`` is None

    Raises:
        PresetError: If the file is missing, not valid YAML, or has unknown keys
    """
    if path is None:
        return PresetFile()

    if not path.exists():
        raise PresetError(f"Config file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise PresetError(f"Failed to load config from {path}: {e}") from e

    try:
        return PresetFile.model_validate(data or {})
    except ValidationError as e:
        raise PresetError(f"Invalid config file {path}: {e}") from e


def merge_options(
    cli: SearchOptions,
    preset_file: PresetFile,
    preset_name: str | None = None,
) -> SearchOptions:
    """Layer options: CLI > preset > file defaults > hardcoded defaults.

    Raises:
        PresetError: If ``preset_name`` is not defined in ``preset_file``
    """
    merged = HARDCODED_DEFAULTS
    if preset_file.defaults is not None:
        merged = preset_file.defaults.overlay(merged)

    if preset_name is not None:
        preset = preset_file.presets.get(preset_name)
        if preset is None:
            known = ", ".join(sorted(preset_file.presets)) or "none defined"
            raise PresetError(f"Unknown preset '{preset_name}' (available: {known})")
        merged = preset.overlay(merged)

    return cli.overlay(merged)


def parse_extensions(raw: str | None) -> frozenset[str]:
    """Parse a comma-separated extension list into lowercase names without dots."""
    if not raw:
        return frozenset()
    return frozenset(
        part.strip().lower().lstrip(".") for part in raw.split(",") if part.strip().strip(".")
    )


def build_search_config(options: SearchOptions) -> SearchConfig:
    """Validate merged options and produce the immutable ``SearchConfig``.

    Raises:
        SearchConfigError: On an invalid pattern, root, or limit
    """
    root = options.dir if options.dir is not None else Path(".")
    if not root.exists():
        raise SearchConfigError(f"Directory not found: {root}")
    if not root.is_dir():
        raise SearchConfigError(f"Not a directory: {root}")

    pattern: re.Pattern[str] | None = None
    if options.content is not None:
        try:
            pattern = re.compile(options.content)
        except re.error as exc:
            raise SearchConfigError(f"Invalid regex for --content: {exc}") from exc

    max_bytes = options.max_bytes if options.max_bytes is not None else DEFAULT_MAX_BYTES
    if max_bytes < 0:
        raise SearchConfigError("--max-bytes must be non-negative")
    if options.limit is not None and options.limit < 0:
        raise SearchConfigError("--limit must be non-negative")

    return SearchConfig(
        root=root,
        name=options.name or None,
        content=pattern,
        extensions=parse_extensions(options.ext),
        include_pdf=bool(options.include_pdf),
        max_bytes=max_bytes,
        limit=options.limit or None,
        verbose=bool(options.verbose),
    )


def write_sample_config(path: Path) -> bool:
    """Write the sample preset file unless ``path`` already exists.

    Returns:
        True if the file was created, False if it already existed
    """
    if path.exists():
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(SAMPLE_CONFIG, encoding="utf-8")
    return True
