"""Configuration package."""

from expense_mascots.config.settings import (
    AppSettings,
    GoogleSheetsSettings,
    SelectionSettings,
    Settings,
    SupabaseSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "GoogleSheetsSettings",
    "SelectionSettings",
    "Settings",
    "SupabaseSettings",
    "get_settings",
    "validate_all_settings",
]
