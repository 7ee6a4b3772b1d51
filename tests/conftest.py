"""Pytest configuration and fixtures."""

import shutil
import tempfile
from collections.abc import Generator
from pathlib import Path

import fitz
import pytest

from filefinder.config import Settings


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    try:
        yield Path(tmpdir)
    finally:
        shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def sample_corpus(temp_dir: Path) -> Path:
    """Two small Italian text files used by the scenario tests."""
    (temp_dir / "a.txt").write_text("Un interprete esegue il programma.", encoding="utf-8")
    (temp_dir / "b.txt").write_text("La grammatica definisce la sintassi.", encoding="utf-8")
    return temp_dir


@pytest.fixture
def nested_files(temp_dir: Path) -> Path:
    """Create nested directory structure with mixed files."""
    docs = temp_dir / "docs" / "notes"
    docs.mkdir(parents=True)
    src = temp_dir / "src"
    src.mkdir()
    ignored = temp_dir / "node_modules" / "pkg"
    ignored.mkdir(parents=True)

    (docs / "parser.md").write_text("# Parser\n\nA recursive descent parser.\n")
    (docs / "todo.txt").write_text("write the type checker\n")
    (src / "main.py").write_text("def parse(tokens):\n    return tokens\n")
    (src / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00")
    (ignored / "index.js").write_text("module.exports = 'parser';\n")

    return temp_dir


def make_pdf(path: Path, lines: list[str], *, password: str | None = None) -> Path:
    """Write a one-page PDF containing ``lines``; encrypt it when ``password`` is set."""
    doc = fitz.open()
    page = doc.new_page()
    for i, line in enumerate(lines):
        page.insert_text((72, 72 + 16 * i), line, fontsize=12)

    if password is None:
        doc.save(str(path))
    else:
        doc.save(
            str(path),
            encryption=fitz.PDF_ENCRYPT_AES_256,
            owner_pw=f"{password}-owner",
            user_pw=password,
        )
    doc.close()
    return path


@pytest.fixture
def pdf_corpus(temp_dir: Path) -> Path:
    """A readable PDF, an encrypted PDF, and an empty (broken) PDF."""
    make_pdf(temp_dir / "lecture.pdf", ["Il compilatore traduce il codice.", "Fine."])
    make_pdf(temp_dir / "locked.pdf", ["Il compilatore segreto."], password="secret")
    (temp_dir / "broken.pdf").write_bytes(b"")
    return temp_dir


@pytest.fixture
def override_settings(temp_dir: Path) -> Generator[Settings, None, None]:
    """Provide isolated FileFinder settings scoped to tests."""

    import filefinder.config as config_module

    original_settings = getattr(config_module, "_settings", None)

    config_dir = temp_dir / "appconfig"
    config_dir.mkdir(parents=True, exist_ok=True)

    settings = config_module.Settings(config_dir=config_dir, max_workers=4)
    config_module._settings = settings

    try:
        yield settings
    finally:
        config_module._settings = original_settings
