# tests/conftest.py

"""Shared pytest fixtures for all smart_shopping tests."""

from collections.abc import Generator
from pathlib import Path

import pytest

from smart_shopping.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_paths(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[Path, None, None]:
    """Redirect preference, export and log paths into a temp dir."""
    monkeypatch.setattr(Settings, "PREFS_PATH", tmp_path / "preferences.json")
    monkeypatch.setattr(Settings, "EXPORTS_DIR", tmp_path / "exports")
    monkeypatch.setattr(Settings, "LOGS_DIR", tmp_path / "logs")
    monkeypatch.setattr(Settings, "GOOGLE_API_KEY", "")
    yield tmp_path
