"""
Configuration Management for Bond Journal Drill

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Storage credentials, the scenario catalog location and the answer
tolerance are all read from the environment (or a .env file).
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleSheetsSettings(BaseSettings):
    """Where progress rows and the attempt log live in Google Sheets."""

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
        description="ID of the Google Sheets spreadsheet to use"
    )

    # Sheet names within the spreadsheet
    progress_sheet_name: str = Field(
        default="Progress",
        description="Name of the sheet holding one progress row per student"
    )
    attempts_sheet_name: str = Field(
        default="Attempts",
        description="Name of the append-only attempt log sheet"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Only warn about a missing key file; it may be mounted after startup."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Progress cannot be saved until it is in place."
            )
        return v


class DrillSettings(BaseSettings):
    """Answer checking and scenario catalog configuration."""

    model_config = SettingsConfigDict(
        env_prefix="DRILL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    amount_tolerance: float = Field(
        default=0.01,
        ge=0.0,
        le=1.0,
        description="Largest difference between two amounts still treated as equal"
    )
    catalog_path: Optional[str] = Field(
        default=None,
        description="Optional JSON file replacing the built-in scenario catalog"
    )
    storage_backend: str = Field(
        default="memory",
        pattern="^(memory|google_sheets)$",
        description="Where student progress is persisted"
    )
    feedback_dismiss_seconds: float = Field(
        default=4.0,
        ge=0.0,
        le=60.0,
        description="How long retry feedback stays on screen"
    )


class AppSettings(BaseSettings):
    """
    Application settings.

    Environment and page-level options.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    page_title: str = Field(
        default="Bond Journal Entries",
        description="Title shown in the browser tab and page header"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Groups the sub-settings; each is read from the environment on access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are loaded lazily so the drill can run without
    # Google Sheets credentials.

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def drill(self) -> DrillSettings:
        return DrillSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    The root object is built once per process.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Check every settings group the configured backend needs.

    Returns a dict of {setting_name: is_valid}, with an extra
    "<name>_error" entry describing each failure.
    Google Sheets is only checked when it is the selected backend.
    """
    results = {}

    settings = get_settings()

    try:
        drill = settings.drill
        results["drill"] = True
    except Exception as e:
        drill = None
        results["drill"] = False
        results["drill_error"] = str(e)

    if drill is not None and drill.storage_backend == "google_sheets":
        try:
            _ = settings.google_sheets
            results["google_sheets"] = True
        except Exception as e:
            results["google_sheets"] = False
            results["google_sheets_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
