"""
Navigation Mascots Adapter

The navigation bar shows the user's mascots independently of the
picker. It caches the display set and re-reads it only after the bus
announces a preference change, instead of hitting the store on every
render.
"""

from typing import Optional

from expense_mascots.events import CATEGORY_PREFERENCES_UPDATED, ChangeNotificationBus
from expense_mascots.models.catalog import CatalogItem
from expense_mascots.preferences.reconcile import IdentityResolver, resolve_identity
from expense_mascots.preferences.service import PreferenceService


class NavMascotsAdapter:
    """Read side of the preference engine for one navigation surface."""

    def __init__(
        self,
        service: PreferenceService,
        bus: ChangeNotificationBus,
        identity: IdentityResolver,
        limit: int = 10,
    ):
        self._service = service
        self._identity = identity
        self._limit = limit
        self._mascots: Optional[list[CatalogItem]] = None
        self._stale = True
        self._unsubscribe = bus.subscribe(
            CATEGORY_PREFERENCES_UPDATED,
            self._on_preferences_updated,
        )

    @property
    def is_stale(self) -> bool:
        return self._stale

    def _on_preferences_updated(self) -> None:
        # No payload; the next get_mascots() re-reads the store
        self._stale = True

    async def get_mascots(self) -> list[CatalogItem]:
        """Current display set, re-read only on first use or after a change."""
        if self._stale or self._mascots is None:
            # Cleared before awaiting so a publish during the read marks it stale again
            self._stale = False
            user_id = await resolve_identity(
                self._identity, self._service.audit_logger
            )
            self._mascots = await self._service.get_effective_display_set(
                user_id, self._limit
            )
        return list(self._mascots)

    def close(self) -> None:
        """Stop listening for changes. Safe to call repeatedly."""
        self._unsubscribe()
