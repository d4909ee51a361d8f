"""In-memory preference store. Used by tests and when no backend is configured."""

from copy import deepcopy
from datetime import datetime, timezone
from typing import Any, Optional

from expense_mascots.models.preferences import PreferenceKind, PreferenceRecord
from expense_mascots.services.storage.interface import (
    PreferenceStorageInterface,
    require_user,
)


class InMemoryPreferenceStorage(PreferenceStorageInterface):
    """Dict-backed store keyed by (user_id, kind)."""

    def __init__(self):
        self._store: dict[tuple[str, str], PreferenceRecord] = {}

    async def read(
        self,
        user_id: str,
        kind: PreferenceKind,
    ) -> Optional[PreferenceRecord]:
        record = self._store.get((require_user(user_id), kind.value))
        return record.model_copy(deep=True) if record else None

    async def write(
        self,
        user_id: str,
        kind: PreferenceKind,
        value: dict[str, Any],
    ) -> PreferenceRecord:
        key = (require_user(user_id), kind.value)
        now = datetime.now(timezone.utc)
        existing = self._store.get(key)
        record = PreferenceRecord(
            user_id=user_id,
            preference_kind=kind,
            value=deepcopy(value),
            created_at=existing.created_at if existing else now,
            updated_at=now,
        )
        self._store[key] = record
        return record.model_copy(deep=True)

    async def delete(self, user_id: str, kind: PreferenceKind) -> None:
        self._store.pop((require_user(user_id), kind.value), None)
