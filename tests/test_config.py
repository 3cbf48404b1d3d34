"""
Tests for configuration loading.
"""

import pytest
from pydantic import ValidationError

from src.config import (
    AppSettings,
    GoogleSheetsSettings,
    ReportSettings,
    validate_all_settings,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate from the developer's environment and .env file."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "REPORT_CURRENCY_SYMBOL",
        "REPORT_CACHE_TTL_SECONDS",
        "REPORT_AVAILABLE_UNTIL_FORMAT",
        "REPORT_LOG_LEVEL",
        "GOOGLE_SHEETS_CREDENTIALS_PATH",
        "GOOGLE_SHEETS_SPREADSHEET_ID",
        "GOOGLE_SHEETS_MEMBERS_SHEET_NAME",
        "DEBUG_MODE",
    ):
        monkeypatch.delenv(name, raising=False)


class TestReportSettings:
    """Tests for report settings."""

    def test_defaults(self):
        settings = ReportSettings()
        assert settings.currency_symbol == "฿"
        assert settings.cache_ttl_seconds == 10
        assert settings.available_until_format == "%b %d"
        assert settings.log_level == "INFO"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("REPORT_CACHE_TTL_SECONDS", "60")
        monkeypatch.setenv("REPORT_LOG_LEVEL", "debug")
        settings = ReportSettings()
        assert settings.cache_ttl_seconds == 60
        assert settings.log_level == "DEBUG"

    def test_unknown_log_level(self, monkeypatch):
        monkeypatch.setenv("REPORT_LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError):
            ReportSettings()

    def test_negative_ttl(self, monkeypatch):
        monkeypatch.setenv("REPORT_CACHE_TTL_SECONDS", "-1")
        with pytest.raises(ValidationError):
            ReportSettings()

    def test_reads_dotenv(self, tmp_path):
        (tmp_path / ".env").write_text("REPORT_CURRENCY_SYMBOL=USD\n")
        assert ReportSettings().currency_symbol == "USD"


class TestGoogleSheetsSettings:
    """Tests for data source settings."""

    def test_requires_spreadsheet(self):
        with pytest.raises(ValidationError):
            GoogleSheetsSettings()

    def test_sheet_names(self, monkeypatch, tmp_path):
        credentials = tmp_path / "credentials.json"
        credentials.write_text("{}")
        monkeypatch.setenv("GOOGLE_SHEETS_CREDENTIALS_PATH", str(credentials))
        monkeypatch.setenv("GOOGLE_SHEETS_SPREADSHEET_ID", "sheet-123")
        monkeypatch.setenv("GOOGLE_SHEETS_MEMBERS_SHEET_NAME", "people")

        settings = GoogleSheetsSettings()

        assert settings.sheet_names == {
            "transactions": "transactions",
            "services": "service",
            "change_log": "subscription change log",
            "members": "people",
        }

    def test_missing_credentials_file_warns(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_SHEETS_CREDENTIALS_PATH", "missing.json")
        monkeypatch.setenv("GOOGLE_SHEETS_SPREADSHEET_ID", "sheet-123")
        with pytest.warns(UserWarning, match="missing.json"):
            GoogleSheetsSettings()


class TestAppSettings:
    """Tests for process-wide settings and the status check."""

    def test_debug_mode(self, monkeypatch):
        monkeypatch.setenv("DEBUG_MODE", "true")
        assert AppSettings().debug_mode is True

    def test_validate_all_settings_reports_failures(self):
        """Test a missing spreadsheet config is reported, not raised."""
        status = validate_all_settings()
        assert status["report"] is True
        assert status["app"] is True
        assert status["google_sheets"] is False
        assert "spreadsheet_id" in status["google_sheets_error"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
