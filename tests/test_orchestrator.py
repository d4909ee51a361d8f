"""
Tests for the mascot editing session.

Flow tests run against the recording in-memory store; saves are awaited
explicitly with wait_for_pending_saves().
"""

import asyncio

import pytest

from expense_mascots.events import CATEGORY_PREFERENCES_UPDATED
from expense_mascots.models.audit import AuditEventType
from expense_mascots.models.catalog import CategoryGroup
from expense_mascots.models.preferences import PreferenceKind
from expense_mascots.navigation import NavMascotsAdapter
from expense_mascots.orchestrator import (
    MascotEditorSession,
    SessionNotReadyError,
    SessionState,
    create_app_components,
)
from expense_mascots.preferences import (
    PreferenceService,
    ReconciliationSource,
    anonymous_identity,
    static_identity,
)
from expense_mascots.services.storage import InMemoryPreferenceStorage

from tests.conftest import LIMITS, ident, make_item, store_selection


KIND = PreferenceKind.CATEGORY_MASCOTS
DEFAULTS = [ident(f"i{n}") for n in range(1, 7)]


def ids(*numbers: int) -> list[str]:
    return [ident(f"i{n}") for n in numbers]


def record_publishes(bus) -> list[int]:
    calls: list[int] = []
    bus.subscribe(CATEGORY_PREFERENCES_UPDATED, lambda: calls.append(1))
    return calls


class TestSessionLifecycle:

    async def test_queries_before_load_raise(self, service, bus):
        session = MascotEditorSession(service, bus, static_identity("user-1"))

        assert session.state == SessionState.UNINITIALIZED
        with pytest.raises(SessionNotReadyError):
            session.select_image(ident("i7"))
        with pytest.raises(SessionNotReadyError):
            _ = session.selected_identifiers

    async def test_load_is_idempotent(self, service, storage, bus):
        session = MascotEditorSession(service, bus, static_identity("user-1"))

        first = await session.load()
        second = await session.load()

        assert first is second
        assert storage.reads == 1
        assert session.state == SessionState.READY

    async def test_concurrent_loads_read_once(self, service, storage, bus):
        session = MascotEditorSession(service, bus, static_identity("user-1"))

        await asyncio.gather(session.load(), session.load(), session.load())

        assert storage.reads == 1

    async def test_failing_identity_loads_as_anonymous(self, service, storage, bus):
        async def broken():
            raise RuntimeError("token expired")

        session = MascotEditorSession(service, bus, broken)
        outcome = await session.load()

        assert outcome.source == ReconciliationSource.ANONYMOUS
        assert session.is_persistable is False
        assert session.selected_identifiers == DEFAULTS


class TestAnonymousSession:

    async def test_mutations_apply_locally_and_never_write(self, service, storage, bus):
        publishes = record_publishes(bus)
        session = MascotEditorSession(service, bus, anonymous_identity)
        await session.load()

        result = session.select_image(ident("i7"))
        await session.wait_for_pending_saves()

        assert result.changed is True
        assert session.selected_identifiers == DEFAULTS + [ident("i7")]
        assert storage.writes == []
        assert publishes == [1]


class TestAuthenticatedSession:

    async def test_first_change_saves_defaults_plus_selection(self, service, storage, bus):
        session = MascotEditorSession(service, bus, static_identity("user-1"))
        outcome = await session.load()
        assert outcome.source == ReconciliationSource.NO_RECORD

        session.select_image(ident("i7"))
        await session.wait_for_pending_saves()

        assert storage.writes == [{"selectedIdentifiers": DEFAULTS + [ident("i7")]}]

    async def test_loads_stored_selection(self, service, storage, bus):
        stored = ids(12, 11, 10, 9, 8, 7)
        await store_selection(storage, "user-1", {"selectedIdentifiers": stored})
        session = MascotEditorSession(service, bus, static_identity("user-1"))

        outcome = await session.load()

        assert outcome.source == ReconciliationSource.STORED
        assert session.selected_identifiers == stored
        assert session.is_min_reached() is True

    async def test_rejected_changes_do_not_write_or_notify(self, service, storage, bus, audit_logger):
        publishes = record_publishes(bus)
        session = MascotEditorSession(service, bus, static_identity("user-1"))
        await session.load()

        assert session.remove_image(ident("i1")).changed is False
        assert session.select_image(ident("i1")).changed is False
        await session.wait_for_pending_saves()

        assert storage.writes == []
        assert publishes == []
        assert audit_logger.recent_events[-1].event_type == AuditEventType.SELECTION_REJECTED

    async def test_max_then_swap(self, service, storage, bus):
        await store_selection(storage, "user-1", {"selectedIdentifiers": ids(*range(1, 11))})
        session = MascotEditorSession(service, bus, static_identity("user-1"))
        await session.load()

        assert session.select_image(ident("i11")).changed is False
        assert session.is_max_reached() is True
        session.remove_image(ident("i1"))
        session.select_image(ident("i11"))
        await session.wait_for_pending_saves()

        assert session.selected_identifiers == ids(*range(2, 12))
        assert storage.writes[-1] == {"selectedIdentifiers": ids(*range(2, 12))}

    async def test_last_write_wins(self, service, storage, bus):
        session = MascotEditorSession(service, bus, static_identity("user-1"))
        await session.load()

        session.select_image(ident("i7"))
        session.select_image(ident("i8"))
        session.remove_image(ident("i1"))
        await session.wait_for_pending_saves()

        assert len(storage.writes) == 3
        record = await storage.read("user-1", KIND)
        assert record.value == {"selectedIdentifiers": ids(2, 3, 4, 5, 6, 7, 8)}

    async def test_change_is_visible_before_save_completes(self, service, storage, bus):
        publishes = record_publishes(bus)
        storage.write_gate = asyncio.Event()
        session = MascotEditorSession(service, bus, static_identity("user-1"))
        await session.load()

        session.select_image(ident("i7"))
        await asyncio.sleep(0)

        assert session.is_image_selected(ident("i7")) is True
        assert session.is_saving is True
        assert publishes == []

        storage.write_gate.set()
        await session.wait_for_pending_saves()

        assert session.is_saving is False
        assert publishes == [1]

    async def test_notification_follows_the_write(self, service, storage, bus):
        seen_writes: list[int] = []
        bus.subscribe(CATEGORY_PREFERENCES_UPDATED, lambda: seen_writes.append(len(storage.writes)))
        session = MascotEditorSession(service, bus, static_identity("user-1"))
        await session.load()

        session.select_image(ident("i7"))
        await session.wait_for_pending_saves()

        assert seen_writes == [1]

    async def test_failed_save_keeps_local_state_and_still_notifies(
        self, service, storage, bus, audit_logger
    ):
        publishes = record_publishes(bus)
        storage.fail_writes = True
        session = MascotEditorSession(service, bus, static_identity("user-1"))
        await session.load()

        session.select_image(ident("i7"))
        await session.wait_for_pending_saves()

        assert session.selected_identifiers == DEFAULTS + [ident("i7")]
        assert await storage.read("user-1", KIND) is None
        assert publishes == [1]
        types = [e.event_type for e in audit_logger.recent_events]
        assert AuditEventType.PREFERENCES_SAVE_FAILED in types

    async def test_read_error_session_still_saves(self, service, storage, bus):
        storage.fail_reads = True
        session = MascotEditorSession(service, bus, static_identity("user-1"))
        outcome = await session.load()
        storage.fail_reads = False

        session.select_image(ident("i9"))
        await session.wait_for_pending_saves()

        assert outcome.source == ReconciliationSource.STORE_ERROR
        assert storage.writes == [{"selectedIdentifiers": DEFAULTS + [ident("i9")]}]

    def test_mutation_outside_event_loop_is_refused(self, service, storage, bus):
        """Without a loop to save on, the change is refused instead of blocking."""
        session = MascotEditorSession(service, bus, static_identity("user-1"))
        asyncio.run(session.load())

        with pytest.raises(SessionNotReadyError, match="event loop"):
            session.select_image(ident("i7"))
        with pytest.raises(SessionNotReadyError):
            session.remove_image(ident("i1"))

        assert session.selected_identifiers == DEFAULTS
        assert session.is_saving is False
        assert storage.writes == []

    def test_anonymous_mutation_outside_event_loop(self, service, storage, bus):
        publishes = record_publishes(bus)
        session = MascotEditorSession(service, bus, anonymous_identity)
        asyncio.run(session.load())

        assert session.select_image(ident("i7")).changed is True
        assert publishes == [1]
        assert storage.writes == []


class TestSessionQueries:

    async def test_group_views(self, storage, bus, audit_logger):
        food, transport = CategoryGroup.FOOD_AND_DRINKS, CategoryGroup.TRANSPORT
        catalog = [
            make_item("rice", food, default=True),
            make_item("tea", food),
            make_item("noodles", food, default=True),
            make_item("bus", transport, default=True),
            make_item("taxi", transport, default=True),
            make_item("train", transport, default=True),
            make_item("plane", transport),
        ]
        service = PreferenceService(storage, catalog, LIMITS, audit_logger)
        session = MascotEditorSession(service, bus, anonymous_identity)
        await session.load()

        assert [i.name for i in session.get_selected_images_for(food)] == ["rice", "tea", "noodles"]
        assert [i.name for i in session.get_alternative_images(transport)] == ["plane"]
        assert len(session.get_selected_images()) == 6
        summary = session.get_selection_summary()
        assert (summary.current, summary.min, summary.max) == (6, 6, 10)


class TestEndToEnd:

    async def test_navigation_follows_editor(self, service, storage, bus):
        identity = static_identity("user-1")
        nav = NavMascotsAdapter(service, bus, identity)
        session = MascotEditorSession(service, bus, identity)

        assert [m.identifier for m in await nav.get_mascots()] == DEFAULTS

        await session.load()
        session.select_image(ident("i12"))
        await session.wait_for_pending_saves()

        assert nav.is_stale is True
        assert [m.identifier for m in await nav.get_mascots()] == DEFAULTS + [ident("i12")]

    def test_create_app_components_without_storage(self):
        service, bus = create_app_components(use_storage=False)

        assert isinstance(service.storage, InMemoryPreferenceStorage)
        assert service.limits.min_selections <= service.limits.max_selections
        assert bus.subscriber_count(CATEGORY_PREFERENCES_UPDATED) == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
