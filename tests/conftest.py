"""Shared pytest fixtures for all test suites."""

from collections.abc import Callable
from pathlib import Path

import pytest

from labnotes.config import Settings

FIXTURE_NOTES = Path(__file__).parent / "fixtures" / "notes"


@pytest.fixture
def fixture_notes() -> Path:
    """Path of the clean fixture notes tree."""
    return FIXTURE_NOTES


@pytest.fixture
def make_notes(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Build a notes tree under tmp_path.

    Usage:
        def test_something(make_notes):
            root = make_notes({"Day1.md": "# Day 1", "images/a.png": ""})
    """

    def _make(files: dict[str, str]) -> Path:
        root = tmp_path / "notes"
        root.mkdir(exist_ok=True)
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return root

    return _make


@pytest.fixture
def settings_for() -> Callable[[Path], Settings]:
    """Settings pointing at a given notes root."""

    def _settings(root: Path) -> Settings:
        return Settings(notes_root=root)

    return _settings
