"""Tests for application settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from qc_reminders.config import get_settings, reset_settings
from qc_reminders.config.settings import ReminderSettings


class TestSettings:
    def test_defaults(self):
        settings = get_settings()

        assert settings.app_name == "QC Reminders"
        assert settings.storage.db_name == "qc_reminders.db"
        assert settings.reminders.max_title_length == 100
        assert settings.reminders.max_message_length == 500
        assert settings.reminders.default_snooze_minutes == 15

    def test_singleton(self):
        assert get_settings() is get_settings()

    def test_env_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("REMINDER_DEFAULT_SNOOZE_MINUTES", "30")
        monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "other"))
        reset_settings()

        settings = get_settings()

        assert settings.reminders.default_snooze_minutes == 30
        assert settings.storage.db_path == Path(tmp_path / "other" / "qc_reminders.db")

    @pytest.mark.parametrize("days", [1, 8])
    def test_weekday_label_days_bounds(self, days):
        with pytest.raises(ValidationError):
            ReminderSettings(weekday_label_days=days)
