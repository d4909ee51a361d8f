"""
Storage Services Package

Provides the preference persistence gateway: an abstract interface and
concrete backends (in-memory, Google Sheets, Supabase).
"""

from expense_mascots.services.storage.interface import (
    MalformedPreferenceError,
    PreferenceStorageInterface,
    StorageError,
    TransientStoreError,
    UnauthorizedError,
)
from expense_mascots.services.storage.memory import InMemoryPreferenceStorage
from expense_mascots.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsPreferenceStorage,
)
from expense_mascots.services.storage.supabase_store import SupabasePreferenceStorage

__all__ = [
    # Interfaces
    "PreferenceStorageInterface",
    # Exceptions
    "MalformedPreferenceError",
    "StorageError",
    "TransientStoreError",
    "UnauthorizedError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsPreferenceStorage",
    "InMemoryPreferenceStorage",
    "SupabasePreferenceStorage",
]
