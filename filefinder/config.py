"""Configuration management with Pydantic and XDG base directory support."""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_xdg_config_home() -> Path:
    """Get XDG_CONFIG_HOME directory, defaulting to ~/.config."""
    xdg_config = os.getenv("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def default_max_workers() -> int:
    """Worker pool size used when none is configured."""
    return max(1, min(32, (os.cpu_count() or 1) * 2))


class Settings(BaseSettings):
    """FileFinder process settings.

    Precedence: CLI flag > environment variable > defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="FILEFINDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    config_dir: Path | None = Field(
        default=None,
        description="Override config directory (defaults to XDG_CONFIG_HOME/filefinder)",
    )

    config_file: Path | None = Field(
        default=None,
        description="Preset file to load instead of the discovered one",
    )

    max_workers: int | None = Field(
        default=None,
        ge=1,
        description="Number of worker threads scanning files concurrently",
    )

    def get_config_dir(self) -> Path:
        """Get the config directory (not created on read)."""
        if self.config_dir:
            return self.config_dir
        return get_xdg_config_home() / "filefinder"

    def get_default_config_path(self) -> Path:
        """Location of the per-user preset file."""
        return self.get_config_dir() / "config.yaml"

    def get_max_workers(self) -> int:
        """Resolved worker pool size."""
        if self.max_workers is not None:
            return self.max_workers
        return default_max_workers()


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance (useful for testing)."""
    global _settings
    _settings = settings
