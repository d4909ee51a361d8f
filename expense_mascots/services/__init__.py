"""Services package."""

from expense_mascots.services.storage import (
    GoogleSheetsClient,
    GoogleSheetsPreferenceStorage,
    InMemoryPreferenceStorage,
    MalformedPreferenceError,
    PreferenceStorageInterface,
    StorageError,
    SupabasePreferenceStorage,
    TransientStoreError,
    UnauthorizedError,
)

__all__ = [
    "GoogleSheetsClient",
    "GoogleSheetsPreferenceStorage",
    "InMemoryPreferenceStorage",
    "MalformedPreferenceError",
    "PreferenceStorageInterface",
    "StorageError",
    "SupabasePreferenceStorage",
    "TransientStoreError",
    "UnauthorizedError",
]
