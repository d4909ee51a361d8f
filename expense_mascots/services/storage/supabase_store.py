"""
Supabase Preference Storage

Backs the gateway with the `user_preferences` table:

    user_id uuid, preference_key text, preference_value jsonb,
    created_at timestamptz, updated_at timestamptz,
    unique (user_id, preference_key)

The Supabase SDK is synchronous, so calls run in a thread pool to avoid
blocking the event loop.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Optional

from supabase import Client, create_client
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from expense_mascots.config import get_settings
from expense_mascots.models.preferences import PreferenceKind, PreferenceRecord
from expense_mascots.services.storage.interface import (
    MalformedPreferenceError,
    PreferenceStorageInterface,
    TransientStoreError,
    require_user,
)


def _get_supabase_client() -> Client:
    """Create a Supabase client using the service_role key."""
    settings = get_settings().supabase
    return create_client(settings.url, settings.service_role_key)


_transient_retry = retry(
    retry=retry_if_exception_type(TransientStoreError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    reraise=True,
)


class SupabasePreferenceStorage(PreferenceStorageInterface):
    """Supabase/PostgreSQL implementation of preference storage."""

    def __init__(
        self,
        client: Optional[Client] = None,
        table: Optional[str] = None,
    ):
        self._client = client
        self._table = table or get_settings().supabase.preferences_table

    def _get_client(self) -> Client:
        if self._client is None:
            try:
                self._client = _get_supabase_client()
            except Exception as e:
                raise TransientStoreError(f"Failed to create Supabase client: {e}")
        return self._client

    def _row_to_record(self, row: dict[str, Any]) -> PreferenceRecord:
        value = row.get("preference_value")
        if value is None:
            value = {}
        if not isinstance(value, dict):
            raise MalformedPreferenceError("preference_value is not a JSON object")
        try:
            return PreferenceRecord(
                user_id=row["user_id"],
                preference_kind=PreferenceKind(row["preference_key"]),
                value=value,
                created_at=row.get("created_at"),
                updated_at=row.get("updated_at") or datetime.now(timezone.utc),
            )
        except (KeyError, ValueError) as e:
            raise MalformedPreferenceError(f"Unreadable preference row: {e}")

    def _read_sync(self, user_id: str, kind: PreferenceKind) -> Optional[dict]:
        try:
            response = (
                self._get_client()
                .table(self._table)
                .select("*")
                .eq("user_id", user_id)
                .eq("preference_key", kind.value)
                .maybe_single()
                .execute()
            )
        except TransientStoreError:
            raise
        except Exception as e:
            raise TransientStoreError(f"Failed to read preference: {e}")
        # maybe_single() yields no response at all when the row is missing
        if response is None:
            return None
        return response.data

    def _write_sync(self, user_id: str, kind: PreferenceKind, value: dict) -> dict:
        try:
            response = (
                self._get_client()
                .table(self._table)
                .upsert(
                    {
                        "user_id": user_id,
                        "preference_key": kind.value,
                        "preference_value": value,
                        "updated_at": datetime.now(timezone.utc).isoformat(),
                    },
                    on_conflict="user_id,preference_key",
                )
                .execute()
            )
        except TransientStoreError:
            raise
        except Exception as e:
            raise TransientStoreError(f"Failed to save preference: {e}")
        if not response.data:
            raise TransientStoreError("Upsert returned no row")
        return response.data[0]

    def _delete_sync(self, user_id: str, kind: PreferenceKind) -> None:
        try:
            (
                self._get_client()
                .table(self._table)
                .delete()
                .eq("user_id", user_id)
                .eq("preference_key", kind.value)
                .execute()
            )
        except TransientStoreError:
            raise
        except Exception as e:
            raise TransientStoreError(f"Failed to delete preference: {e}")

    @_transient_retry
    async def read(
        self,
        user_id: str,
        kind: PreferenceKind,
    ) -> Optional[PreferenceRecord]:
        row = await asyncio.to_thread(self._read_sync, require_user(user_id), kind)
        return self._row_to_record(row) if row else None

    @_transient_retry
    async def write(
        self,
        user_id: str,
        kind: PreferenceKind,
        value: dict[str, Any],
    ) -> PreferenceRecord:
        row = await asyncio.to_thread(
            self._write_sync, require_user(user_id), kind, value
        )
        return self._row_to_record(row)

    @_transient_retry
    async def delete(self, user_id: str, kind: PreferenceKind) -> None:
        await asyncio.to_thread(self._delete_sync, require_user(user_id), kind)
