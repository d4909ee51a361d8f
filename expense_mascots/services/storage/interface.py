"""
Abstract Preference Storage Interface

DESIGN DECISION: We define an abstract interface for preference storage.
This allows us to:
1. Swap Google Sheets for Supabase (or anything else) without touching the engine
2. Use in-memory storage for testing and anonymous demos
3. Reuse the same gateway for future preference kinds with different rules

The interface is intentionally simple - one record per (user, kind),
upsert on write, no history. It does NOT validate the shape of `value`
or the selection limits; that is the caller's job.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from expense_mascots.models.preferences import PreferenceKind, PreferenceRecord


class PreferenceStorageInterface(ABC):
    """
    Abstract interface for per-user preference records.

    Any storage implementation must implement these methods.
    All of them raise UnauthorizedError when user_id is empty and
    TransientStoreError when the backend cannot be reached.
    """

    @abstractmethod
    async def read(
        self,
        user_id: str,
        kind: PreferenceKind,
    ) -> Optional[PreferenceRecord]:
        """
        Read the record for a user and preference kind.

        Returns:
            The record if present, None otherwise

        Raises:
            UnauthorizedError: If no user id was supplied
            TransientStoreError: If the backend failed
            MalformedPreferenceError: If the stored payload can't be decoded
        """
        pass

    @abstractmethod
    async def write(
        self,
        user_id: str,
        kind: PreferenceKind,
        value: dict[str, Any],
    ) -> PreferenceRecord:
        """
        Create or overwrite the record (upsert).

        `value` replaces the stored value wholesale; updated_at is refreshed.

        Returns:
            The record as stored
        """
        pass

    @abstractmethod
    async def delete(
        self,
        user_id: str,
        kind: PreferenceKind,
    ) -> None:
        """Remove the record if present. Absence is not an error."""
        pass


def require_user(user_id: Optional[str]) -> str:
    """Guard shared by all backends."""
    if not user_id:
        raise UnauthorizedError("User not authenticated")
    return user_id


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class UnauthorizedError(StorageError):
    """No caller identity was resolved before calling the store."""
    pass


class TransientStoreError(StorageError):
    """Could not reach the storage backend, or it failed."""
    pass


class MalformedPreferenceError(StorageError):
    """A stored preference payload could not be decoded or validated."""
    pass
