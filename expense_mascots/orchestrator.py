"""
Main Orchestrator for Expense Mascots

This module ties the components together and defines the editing flow:
1. Load (resolve identity → read store → reconcile → READY)
2. Mutate (rules → local state → fire-and-forget save → notify)

DESIGN DECISION: Local state is authoritative within a session.
Mutations apply immediately, before the store has acknowledged anything.
A failed save is audited and NOT rolled back; the next successful save
brings the store back in line. The store is eventually consistent with
the session, never the other way round.
"""

import asyncio
from enum import Enum
from typing import Optional

import structlog

from expense_mascots.audit import AuditLogger
from expense_mascots.catalog import CATEGORY_IMAGES
from expense_mascots.config import get_settings
from expense_mascots.events import CATEGORY_PREFERENCES_UPDATED, ChangeNotificationBus
from expense_mascots.models.audit import AuditEventBuilder
from expense_mascots.models.catalog import CatalogItem, CategoryGroup
from expense_mascots.models.preferences import (
    MutationResult,
    SelectionLimits,
    SelectionSummary,
)
from expense_mascots.preferences import (
    IdentityResolver,
    PreferenceService,
    ReconciliationOutcome,
    reconcile_selection,
    resolve_identity,
)
from expense_mascots.selection import SelectionState
from expense_mascots.services.storage import (
    GoogleSheetsPreferenceStorage,
    InMemoryPreferenceStorage,
    PreferenceStorageInterface,
    SupabasePreferenceStorage,
)


logger = structlog.get_logger()


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


class SessionNotReadyError(Exception):
    """
    The session can't serve the call yet: load() hasn't finished, or a
    persisted mutation was made with no running event loop to save on.
    """
    pass


class MascotEditorSession:
    """
    One mounted editing surface (the mascot picker).

    Flow:
    1. load() → reconcile the stored preference into a valid selection
    2. select_image()/remove_image() → apply locally, return immediately
    3. Accepted changes are saved in the background, then the bus fires
       so navigation surfaces re-read

    Anonymous sessions work the same way but never write.
    """

    def __init__(
        self,
        service: PreferenceService,
        bus: ChangeNotificationBus,
        identity: IdentityResolver,
    ):
        self._service = service
        self._bus = bus
        self._identity = identity
        self._selection = SelectionState(service.catalog, service.limits)
        self._state = SessionState.UNINITIALIZED
        self._outcome: Optional[ReconciliationOutcome] = None
        self._load_lock = asyncio.Lock()
        self._pending_saves: set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_loaded(self) -> bool:
        return self._state == SessionState.READY

    @property
    def is_persistable(self) -> bool:
        return bool(self._outcome and self._outcome.persistable)

    @property
    def user_id(self) -> Optional[str]:
        return self._outcome.user_id if self._outcome else None

    @property
    def outcome(self) -> Optional[ReconciliationOutcome]:
        return self._outcome

    async def load(self) -> ReconciliationOutcome:
        """
        Bootstrap the selection. Runs once; READY is terminal.

        Never raises for store problems - the outcome says whether
        defaults were used and why.
        """
        async with self._load_lock:
            if self._state == SessionState.READY and self._outcome is not None:
                return self._outcome

            self._state = SessionState.LOADING
            user_id = await resolve_identity(self._identity, self._service.audit_logger)
            outcome = await reconcile_selection(
                self._service.storage,
                user_id,
                self._service.catalog,
                self._service.limits,
                audit_logger=self._service.audit_logger,
            )
            self._selection.replace(outcome.identifiers)
            self._outcome = outcome
            self._state = SessionState.READY
            return outcome

    def _ensure_ready(self) -> None:
        if self._state != SessionState.READY:
            raise SessionNotReadyError(
                f"Mascot selection is {self._state.value}; call load() first"
            )

    def _ensure_save_loop(self) -> None:
        # Saves run as tasks; a mutation must never wait on the store itself
        if not self.is_persistable:
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            raise SessionNotReadyError(
                "Saving mascot selections needs a running event loop; "
                "mutate from async code"
            )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def select_image(self, identifier: str) -> MutationResult:
        """
        Add an image to the selection.

        changed=False means nothing happened; check is_max_reached() to
        tell "at capacity" from "already selected".
        """
        self._ensure_ready()
        self._ensure_save_loop()
        result = self._selection.select(identifier)
        self._after_mutation("select", identifier, result)
        return result

    def remove_image(self, identifier: str) -> MutationResult:
        """
        Remove an image from the selection.

        changed=False means nothing happened; check is_min_reached() to
        tell "at the floor" from "was not selected".
        """
        self._ensure_ready()
        self._ensure_save_loop()
        result = self._selection.remove(identifier)
        self._after_mutation("remove", identifier, result)
        return result

    def _after_mutation(
        self,
        operation: str,
        identifier: str,
        result: MutationResult,
    ) -> None:
        audit = self._service.audit_logger
        if not result.changed:
            audit.log(AuditEventBuilder.selection_rejected(
                user_id=self.user_id,
                operation=operation,
                identifier=identifier,
                count=len(result.resulting),
            ))
            return

        audit.log(AuditEventBuilder.selection_changed(
            user_id=self.user_id,
            operation=operation,
            identifier=identifier,
            count=len(result.resulting),
        ))

        if self.is_persistable:
            self._schedule_save(result.resulting)
        else:
            self._bus.publish(CATEGORY_PREFERENCES_UPDATED)

    def _schedule_save(self, identifiers: list[str]) -> None:
        """Issue a write for this exact selection without waiting for it."""
        task = asyncio.get_running_loop().create_task(self._persist(identifiers))
        self._pending_saves.add(task)
        task.add_done_callback(self._pending_saves.discard)

    async def _persist(self, identifiers: list[str]) -> None:
        try:
            result = await self._service.save_category_mascot_preferences(
                self.user_id, identifiers
            )
            if not result.success:
                logger.warning(
                    "mascot_save_not_applied",
                    user_id=self.user_id,
                    error=result.error,
                )
        finally:
            self._bus.publish(CATEGORY_PREFERENCES_UPDATED)

    @property
    def is_saving(self) -> bool:
        return any(not task.done() for task in self._pending_saves)

    async def wait_for_pending_saves(self) -> None:
        """Wait for every in-flight save (used by tests and the Streamlit app)."""
        while self._pending_saves:
            await asyncio.gather(*list(self._pending_saves), return_exceptions=True)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def selected_identifiers(self) -> list[str]:
        self._ensure_ready()
        return self._selection.selected_identifiers

    def is_image_selected(self, identifier: str) -> bool:
        self._ensure_ready()
        return self._selection.is_selected(identifier)

    def is_max_reached(self) -> bool:
        self._ensure_ready()
        return self._selection.is_max_reached()

    def is_min_reached(self) -> bool:
        self._ensure_ready()
        return self._selection.is_min_reached()

    def get_selection_summary(self) -> SelectionSummary:
        self._ensure_ready()
        return self._selection.count_summary()

    def get_selected_images(self) -> list[CatalogItem]:
        self._ensure_ready()
        return self._selection.selected_items()

    def get_selected_images_for(self, group: CategoryGroup) -> list[CatalogItem]:
        self._ensure_ready()
        return self._selection.effective_set_for(group)

    def get_alternative_images(self, group: CategoryGroup) -> list[CatalogItem]:
        self._ensure_ready()
        return self._selection.complement_for(group)


def create_storage(backend: Optional[str] = None) -> PreferenceStorageInterface:
    """Build the configured preference store."""
    backend = backend or get_settings().app.storage_backend
    if backend == "google_sheets":
        return GoogleSheetsPreferenceStorage()
    if backend == "supabase":
        return SupabasePreferenceStorage()
    return InMemoryPreferenceStorage()


def create_app_components(
    use_storage: bool = True,
) -> tuple[PreferenceService, ChangeNotificationBus]:
    """
    Factory function to create all application components.

    Call once per process; the returned bus lives as long as the process.

    Args:
        use_storage: Whether to initialize the configured remote store.
                    Set to False for testing without storage.

    Returns:
        (preference_service, notification_bus)
    """
    settings = get_settings()
    selection = settings.selection
    limits = SelectionLimits(
        min_selections=selection.min_selections,
        max_selections=selection.max_selections,
    )
    audit_logger = AuditLogger()

    storage: PreferenceStorageInterface
    if use_storage:
        try:
            storage = create_storage()
        except Exception as e:
            # Storage not configured - continue in memory
            logger.warning("storage_not_configured", error=str(e))
            storage = InMemoryPreferenceStorage()
    else:
        storage = InMemoryPreferenceStorage()

    service = PreferenceService(
        storage=storage,
        catalog=CATEGORY_IMAGES,
        limits=limits,
        audit_logger=audit_logger,
    )
    return service, ChangeNotificationBus()
