"""
Shared fixtures for the Expense Mascots tests.

No real backends are contacted: storage is in-memory or faked.
"""

import asyncio
from typing import Any, Optional

import pytest

from expense_mascots.audit import AuditLogger
from expense_mascots.events import ChangeNotificationBus
from expense_mascots.models.catalog import CatalogItem, CategoryGroup
from expense_mascots.models.preferences import (
    PreferenceKind,
    PreferenceRecord,
    SelectionLimits,
)
from expense_mascots.preferences import PreferenceService
from expense_mascots.services.storage import (
    InMemoryPreferenceStorage,
    TransientStoreError,
)


LIMITS = SelectionLimits(min_selections=6, max_selections=10)


def make_item(
    name: str,
    group: CategoryGroup = CategoryGroup.OTHER,
    default: bool = False,
) -> CatalogItem:
    return CatalogItem(
        identifier=f"/test/{name}.png",
        name=name,
        group=group,
        is_preferred_default=default,
    )


def ident(name: str) -> str:
    return f"/test/{name}.png"


class RecordingStorage(InMemoryPreferenceStorage):
    """
    In-memory store that counts calls and can be told to fail or stall.
    """

    def __init__(self):
        super().__init__()
        self.reads = 0
        self.writes: list[dict[str, Any]] = []
        self.fail_reads = False
        self.fail_writes = False
        self.write_gate: Optional[asyncio.Event] = None

    async def read(self, user_id: str, kind: PreferenceKind) -> Optional[PreferenceRecord]:
        self.reads += 1
        if self.fail_reads:
            raise TransientStoreError("store unavailable")
        return await super().read(user_id, kind)

    async def write(self, user_id: str, kind: PreferenceKind, value: dict[str, Any]) -> PreferenceRecord:
        if self.write_gate is not None:
            await self.write_gate.wait()
        if self.fail_writes:
            raise TransientStoreError("store unavailable")
        self.writes.append(value)
        return await super().write(user_id, kind, value)


@pytest.fixture
def catalog() -> tuple[CatalogItem, ...]:
    """Twelve items i1..i12; i1..i6 are the defaults."""
    return tuple(
        make_item(f"i{n}", default=n <= 6) for n in range(1, 13)
    )


@pytest.fixture
def storage() -> RecordingStorage:
    return RecordingStorage()


@pytest.fixture
def audit_logger() -> AuditLogger:
    return AuditLogger()


@pytest.fixture
def bus() -> ChangeNotificationBus:
    return ChangeNotificationBus()


@pytest.fixture
def service(storage, catalog, audit_logger) -> PreferenceService:
    return PreferenceService(
        storage=storage,
        catalog=catalog,
        limits=LIMITS,
        audit_logger=audit_logger,
    )


async def store_selection(storage, user_id: str, value: dict[str, Any]) -> None:
    """Seed a record without going through the write counter."""
    await InMemoryPreferenceStorage.write(
        storage, user_id, PreferenceKind.CATEGORY_MASCOTS, value
    )
