"""CLI integration tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from filefinder import __version__
from filefinder.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_cwd(temp_dir: Path, override_settings, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run every CLI test from an empty directory with isolated settings."""
    workdir = temp_dir / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir


@pytest.fixture
def corpus(temp_dir: Path) -> Path:
    root = temp_dir / "corpus"
    root.mkdir()
    (root / "a.txt").write_text("Un interprete esegue il programma.")
    (root / "b.txt").write_text("La grammatica definisce la sintassi.")
    return root


def test_version():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_search_json(corpus: Path):
    result = runner.invoke(
        app,
        ["search", "--dir", str(corpus), "--content", "(?i)interprete", "--ext", "txt", "--format", "json"],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["schema_id"] == "search_report"
    assert payload["files_discovered"] == 2
    assert payload["files_scanned_text"] == 2
    assert payload["matches_total"] == 1
    assert Path(payload["results"][0]["path"]).name == "a.txt"
    assert payload["results"][0]["matched_content"] is True


def test_search_markdown_is_default(corpus: Path):
    result = runner.invoke(app, ["search", "--dir", str(corpus), "--name", "b."])

    assert result.exit_code == 0, result.output
    assert "# FileFinder results" in result.stdout
    assert "- Matches total: **1**" in result.stdout
    assert "b.txt" in result.stdout


def test_search_limit(corpus: Path):
    result = runner.invoke(
        app, ["search", "--dir", str(corpus), "--limit", "1", "--format", "json"]
    )

    payload = json.loads(result.stdout)
    assert payload["matches_total"] == 2
    assert payload["matches_printed"] == 1
    assert len(payload["results"]) == 1


def test_invalid_regex_exits_nonzero(corpus: Path):
    result = runner.invoke(app, ["search", "--dir", str(corpus), "--content", "(unclosed"])

    assert result.exit_code == 2
    assert "Invalid regex" in result.output
    assert "files_discovered" not in result.output


def test_missing_root_exits_nonzero(temp_dir: Path):
    result = runner.invoke(app, ["search", "--dir", str(temp_dir / "missing"), "--name", "x"])

    assert result.exit_code == 2
    assert "Directory not found" in result.output


def test_invalid_format_exits_nonzero(corpus: Path):
    result = runner.invoke(app, ["search", "--dir", str(corpus), "--format", "xml"])

    assert result.exit_code == 2


def test_unknown_preset_exits_nonzero(corpus: Path):
    result = runner.invoke(app, ["search", "--dir", str(corpus), "--preset", "nope"])

    assert result.exit_code == 2
    assert "Unknown preset" in result.output


def test_search_with_preset(corpus: Path, isolated_cwd: Path):
    (isolated_cwd / "filefinder.yaml").write_text(
        f"""
defaults:
  format: json
presets:
  italian:
    dir: "{corpus.as_posix()}"
    content: "grammatica"
"""
    )

    result = runner.invoke(app, ["search", "--preset", "italian"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert [Path(r["path"]).name for r in payload["results"]] == ["b.txt"]


def test_explicit_flag_beats_preset(corpus: Path, temp_dir: Path):
    config_path = temp_dir / "presets.yaml"
    config_path.write_text(
        f"""
presets:
  italian:
    dir: "{corpus.as_posix()}"
    content: "grammatica"
    format: json
"""
    )

    result = runner.invoke(
        app,
        ["search", "--config", str(config_path), "--preset", "italian", "--content", "interprete"],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert [Path(r["path"]).name for r in payload["results"]] == ["a.txt"]


def test_encrypted_pdf_completes_with_exit_zero(pdf_corpus: Path):
    result = runner.invoke(
        app,
        [
            "search",
            "--dir",
            str(pdf_corpus),
            "--content",
            "compilatore",
            "--include-pdf",
            "--format",
            "json",
        ],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["files_skipped_unreadable_pdf"] == 2
    assert payload["matches_total"] == 1


def test_verbose_prints_diagnostics(pdf_corpus: Path):
    result = runner.invoke(
        app,
        ["search", "--dir", str(pdf_corpus), "--content", "compilatore", "--include-pdf", "--verbose"],
    )

    assert result.exit_code == 0
    assert "[unreadable_pdf]" in result.output
    assert "locked.pdf" in result.output


def test_presets_lists_resolved_values(temp_dir: Path):
    config_path = temp_dir / "presets.yaml"
    config_path.write_text("presets:\n  docs:\n    ext: md\n    limit: 3\n")

    result = runner.invoke(app, ["presets", "--config", str(config_path), "--json"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["presets"]["docs"]["ext"] == "md"
    assert payload["presets"]["docs"]["limit"] == 3
    assert payload["presets"]["docs"]["format"] == "markdown"


def test_presets_without_config():
    result = runner.invoke(app, ["presets"])

    assert result.exit_code == 0
    assert "No presets defined" in result.stdout


def test_config_init_writes_sample_once(isolated_cwd: Path):
    first = runner.invoke(app, ["config-init"])
    second = runner.invoke(app, ["config-init"])

    assert first.exit_code == 0
    assert (isolated_cwd / "filefinder.yaml").exists()
    assert second.exit_code == 0
    assert "already exists" in second.output

    listing = runner.invoke(app, ["presets"])
    assert "demo_text" in listing.stdout
    assert "demo_pdf" in listing.stdout
