"""
Configuration Management for Expense Mascots

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Selection limits live next to the storage credentials so the same
MIN/MAX pair governs the editor, the save action and the navigation bar.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SelectionSettings(BaseSettings):
    """Cardinality limits for the category mascot selection."""

    model_config = SettingsConfigDict(
        env_prefix="MASCOT_",
        extra="ignore"
    )

    min_selections: int = Field(
        default=6,
        ge=1,
        description="Minimum number of mascots a user must keep selected"
    )
    max_selections: int = Field(
        default=10,
        ge=1,
        description="Maximum number of mascots a user may select"
    )
    nav_display_limit: int = Field(
        default=10,
        ge=1,
        description="How many mascots the navigation bar shows"
    )

    @model_validator(mode="after")
    def validate_bounds(self) -> "SelectionSettings":
        """The minimum can never exceed the maximum."""
        if self.min_selections > self.max_selections:
            raise ValueError(
                f"min_selections ({self.min_selections}) cannot exceed "
                f"max_selections ({self.max_selections})"
            )
        return self


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
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

    preferences_sheet_name: str = Field(
        default="UserPreferences",
        description="Name of the sheet holding user preference records"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v


class SupabaseSettings(BaseSettings):
    """Supabase database configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SUPABASE_",
        extra="ignore"
    )

    url: str = Field(
        ...,
        description="Supabase project URL"
    )
    service_role_key: str = Field(
        ...,
        description="Supabase service role key"
    )
    preferences_table: str = Field(
        default="user_preferences",
        description="Table holding one row per (user_id, preference_key)"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
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

    storage_backend: Literal["memory", "google_sheets", "supabase"] = Field(
        default="memory",
        description="Which preference store to use"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Note: These are loaded lazily to allow partial configuration

    @property
    def selection(self) -> SelectionSettings:
        return SelectionSettings()

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def supabase(self) -> SupabaseSettings:
        return SupabaseSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("selection", "google_sheets", "supabase", "app"):
        try:
            _ = getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
