"""Pytest configuration and fixtures."""

from collections.abc import Generator

import pytest

from qc_reminders.config import reset_settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch) -> Generator[None, None, None]:
    """Point storage at a temp dir and rebuild settings for each test."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    reset_settings()
    yield
    reset_settings()
