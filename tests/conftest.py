"""Shared test fixtures for the filetag test suite."""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _isolated_preferences(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep every test away from the real ~/.filetag/preferences.yaml."""
    prefs = tmp_path / "prefs" / "preferences.yaml"
    monkeypatch.setattr("filetag.preferences.PREFS_PATH", prefs)
    return prefs


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / ".filetag-test.json"


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    path = tmp_path / "test-file.txt"
    path.write_text("test content")
    return path


@pytest.fixture
def three_files(tmp_path: Path) -> tuple[Path, Path, Path]:
    """file1={work, important}, file2={work, draft}, file3={personal, important}."""
    files = []
    for i in (1, 2, 3):
        f = tmp_path / f"file{i}.txt"
        f.write_text(f"content{i}")
        files.append(f)
    return files[0], files[1], files[2]


@pytest.fixture(autouse=True)
def _plain_console(monkeypatch: pytest.MonkeyPatch) -> None:
    """Rich must not emit ANSI codes into captured output."""
    for var in ("FORCE_COLOR", "TTY_COMPATIBLE", "TTY_INTERACTIVE"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("COLUMNS", "200")
