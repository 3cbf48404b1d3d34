"""
Configuration Management for Subscription Splitter

Every setting comes from the environment or a local .env file.

The billing pipeline itself takes no configuration; only the data source,
logging and the dashboard read these settings.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets data source configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the spreadsheet holding the four tables"
    )

    # One worksheet per logical table
    transactions_sheet_name: str = Field(
        default="transactions",
        description="Worksheet with payment transactions"
    )
    services_sheet_name: str = Field(
        default="service",
        description="Worksheet with subscription services"
    )
    change_log_sheet_name: str = Field(
        default="subscription change log",
        description="Worksheet with membership change log entries"
    )
    members_sheet_name: str = Field(
        default="summary",
        description="Worksheet with household members"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn on a missing credentials file; it may be mounted after startup."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v

    @property
    def sheet_names(self) -> dict[str, str]:
        """Logical table name -> worksheet title."""
        return {
            "transactions": self.transactions_sheet_name,
            "services": self.services_sheet_name,
            "change_log": self.change_log_sheet_name,
            "members": self.members_sheet_name,
        }


class ReportSettings(BaseSettings):
    """Report rendering and regeneration configuration."""

    model_config = SettingsConfigDict(
        env_prefix="REPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    currency_symbol: str = Field(
        default="฿",
        description="Symbol shown next to amounts on the dashboard"
    )
    cache_ttl_seconds: int = Field(
        default=10,
        ge=0,
        le=86400,
        description="How long a generated report is reused before refetching"
    )
    available_until_format: str = Field(
        default="%b %d",
        description="strftime format for the available-until date"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured logs"
    )

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class AppSettings(BaseSettings):
    """Process-wide settings. debug_mode forces DEBUG logs."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    debug_mode: bool = Field(
        default=False,
        description="Log at DEBUG regardless of REPORT_LOG_LEVEL"
    )


class Settings(BaseSettings):
    """Entry point to the settings groups."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Each group is read on access, so a missing spreadsheet config does
    # not stop the report settings from loading

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def report(self) -> ReportSettings:
        return ReportSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """Shared Settings instance. get_settings.cache_clear() forces a reload."""
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Try loading each settings group.

    Returns {group: loaded_ok} plus a "{group}_error" message for every
    group that failed, for the dashboard status page.
    """
    results = {}

    settings = get_settings()

    for name in ("google_sheets", "report", "app"):
        try:
            _ = getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
