"""
Preference Actions

Request-level operations on a user's mascot preference: read, save,
reset, and the navigation read path. The editor session writes through
save_category_mascot_preferences(); the navigation adapter reads through
get_effective_display_set().
"""

from typing import Optional, Sequence

from expense_mascots.audit import AuditLogger
from expense_mascots.catalog import CATEGORY_IMAGES
from expense_mascots.models.audit import AuditEventBuilder
from expense_mascots.models.catalog import CatalogItem
from expense_mascots.models.preferences import (
    ActionResult,
    CategoryMascotPreferences,
    PreferenceKind,
    SelectionLimits,
)
from expense_mascots.preferences.reconcile import (
    parse_mascot_preferences,
    reconcile_selection,
    sanitize_identifiers,
)
from expense_mascots.selection.rules import (
    DEFAULT_LIMITS,
    derive_defaults,
    validate_count,
)
from expense_mascots.services.storage import (
    PreferenceStorageInterface,
    UnauthorizedError,
)


NOT_AUTHENTICATED = "User not authenticated"


class PreferenceService:
    """
    Wraps the persistence gateway with the mascot-specific rules.

    The gateway stays generic; limits and payload shape are enforced here.
    """

    def __init__(
        self,
        storage: PreferenceStorageInterface,
        catalog: Sequence[CatalogItem] = CATEGORY_IMAGES,
        limits: SelectionLimits = DEFAULT_LIMITS,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._catalog = tuple(catalog)
        self._limits = limits
        self._audit_logger = audit_logger or AuditLogger()
        self._kind = PreferenceKind.CATEGORY_MASCOTS

    @property
    def storage(self) -> PreferenceStorageInterface:
        return self._storage

    @property
    def catalog(self) -> tuple[CatalogItem, ...]:
        return self._catalog

    @property
    def limits(self) -> SelectionLimits:
        return self._limits

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    def default_identifiers(self) -> list[str]:
        return derive_defaults(self._catalog, self._limits)

    async def get_category_mascot_preferences(
        self,
        user_id: Optional[str],
    ) -> list[str]:
        """
        Get the user's selected identifiers.

        Returns default selections if no valid preference exists.
        """
        outcome = await reconcile_selection(
            self._storage,
            user_id,
            self._catalog,
            self._limits,
            self._kind,
            self._audit_logger,
        )
        return outcome.identifiers

    async def save_category_mascot_preferences(
        self,
        user_id: Optional[str],
        selected_identifiers: Sequence[str],
    ) -> ActionResult:
        """Validate and persist the user's selection."""
        if not user_id:
            return ActionResult(success=False, error=NOT_AUTHENTICATED)

        check = validate_count(selected_identifiers, self._limits)
        if not check.ok:
            return ActionResult(success=False, error=check.message)

        prefs = CategoryMascotPreferences(
            selected_identifiers=list(selected_identifiers)[:self._limits.max_selections]
        )

        try:
            await self._storage.write(user_id, self._kind, prefs.to_value())
        except UnauthorizedError:
            return ActionResult(success=False, error=NOT_AUTHENTICATED)
        except Exception as e:
            self._audit_logger.log(AuditEventBuilder.preferences_save_failed(
                user_id=user_id,
                preference_kind=self._kind.value,
                error_message=str(e),
            ))
            return ActionResult(success=False, error=str(e) or "Failed to save preferences")

        self._audit_logger.log(AuditEventBuilder.preferences_saved(
            user_id=user_id,
            preference_kind=self._kind.value,
            count=len(prefs.selected_identifiers),
        ))
        return ActionResult(success=True)

    async def reset_category_mascot_preferences(
        self,
        user_id: Optional[str],
    ) -> ActionResult:
        """
        Delete the stored preference; later reads fall back to defaults.

        The derived defaults are not written back. A reset user therefore
        follows later changes to the catalog's default flags, where a saved
        copy of the defaults would stay frozen at reset time.
        """
        if not user_id:
            return ActionResult(success=False, error=NOT_AUTHENTICATED)

        try:
            await self._storage.delete(user_id, self._kind)
        except UnauthorizedError:
            return ActionResult(success=False, error=NOT_AUTHENTICATED)
        except Exception as e:
            self._audit_logger.log(AuditEventBuilder.store_error(
                user_id=user_id,
                operation="delete",
                error_message=str(e),
            ))
            return ActionResult(success=False, error=str(e) or "Failed to reset preferences")

        self._audit_logger.log(AuditEventBuilder.preferences_reset(
            user_id=user_id,
            preference_kind=self._kind.value,
        ))
        return ActionResult(success=True)

    async def get_effective_display_set(
        self,
        user_id: Optional[str],
        limit: int = 10,
    ) -> list[CatalogItem]:
        """
        Mascots for the navigation bar.

        Stored identifiers map to catalog items in the user's order; unknown
        ones are dropped. Fewer than the minimum, no user, or any error
        falls back to the default selection.
        """
        by_id = {img.identifier: img for img in self._catalog}
        defaults = [by_id[i] for i in self.default_identifiers()][:limit]

        if not user_id:
            return defaults

        try:
            record = await self._storage.read(user_id, self._kind)
            if record is None:
                return defaults
            prefs = parse_mascot_preferences(record)
        except Exception as e:
            self._audit_logger.log(AuditEventBuilder.store_error(
                user_id=user_id,
                operation="read_display_set",
                error_message=str(e),
            ))
            return defaults

        identifiers = sanitize_identifiers(prefs.selected_identifiers, self._catalog)
        if len(identifiers) < self._limits.min_selections:
            return defaults
        return [by_id[i] for i in identifiers][:limit]
