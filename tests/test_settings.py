"""Tests for environment configuration."""

import pytest
from pydantic import ValidationError

from journal_drill.config import (
    DrillSettings,
    GoogleSheetsSettings,
    get_settings,
    validate_all_settings,
)


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestDrillSettings:
    """Tests for drill configuration."""

    def test_defaults(self, monkeypatch):
        """Test the built-in defaults."""
        for name in ("DRILL_AMOUNT_TOLERANCE", "DRILL_STORAGE_BACKEND", "DRILL_CATALOG_PATH"):
            monkeypatch.delenv(name, raising=False)
        settings = DrillSettings()
        assert settings.amount_tolerance == 0.01
        assert settings.storage_backend == "memory"
        assert settings.catalog_path is None
        assert settings.feedback_dismiss_seconds == 4.0

    def test_env_override(self, monkeypatch):
        """Test reading values from the environment."""
        monkeypatch.setenv("DRILL_AMOUNT_TOLERANCE", "0.05")
        monkeypatch.setenv("DRILL_STORAGE_BACKEND", "google_sheets")
        settings = get_settings().drill
        assert settings.amount_tolerance == 0.05
        assert settings.storage_backend == "google_sheets"

    def test_unknown_backend_rejected(self, monkeypatch):
        """Test that only known storage backends are accepted."""
        monkeypatch.setenv("DRILL_STORAGE_BACKEND", "postgres")
        with pytest.raises(ValidationError):
            DrillSettings()


class TestGoogleSheetsSettings:
    """Tests for Google Sheets configuration."""

    def test_missing_credentials_file_warns(self, tmp_path):
        """Test that a missing credentials file warns instead of failing."""
        with pytest.warns(UserWarning):
            settings = GoogleSheetsSettings(
                credentials_path=str(tmp_path / "missing.json"),
                spreadsheet_id="sheet-id",
            )
        assert settings.progress_sheet_name == "Progress"
        assert settings.attempts_sheet_name == "Attempts"


class TestValidateAllSettings:
    """Tests for the startup check."""

    def test_memory_backend_skips_sheets(self, monkeypatch):
        """Test that Sheets is not checked when it is not used."""
        monkeypatch.setenv("DRILL_STORAGE_BACKEND", "memory")
        status = validate_all_settings()
        assert status["drill"] is True
        assert status["app"] is True
        assert "google_sheets" not in status

    def test_sheets_backend_without_config(self, monkeypatch):
        """Test that missing Sheets settings are reported."""
        monkeypatch.setenv("DRILL_STORAGE_BACKEND", "google_sheets")
        monkeypatch.delenv("GOOGLE_SHEETS_CREDENTIALS_PATH", raising=False)
        monkeypatch.delenv("GOOGLE_SHEETS_SPREADSHEET_ID", raising=False)
        status = validate_all_settings()
        assert status["google_sheets"] is False
        assert "google_sheets_error" in status
