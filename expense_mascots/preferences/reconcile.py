"""
Bootstrap / Reconciliation

Turns whatever the store holds (nothing, garbage, a stale list, a good
list) into a selection that satisfies the limits.

DESIGN DECISION: Reconciliation never fails. Every error path converges
to the derived default selection, so the picker and the navigation bar
always have something valid to render. Errors are audited, not raised.
"""

from enum import Enum
from typing import Awaitable, Callable, Optional, Sequence

from pydantic import BaseModel, ValidationError

from expense_mascots.audit import AuditLogger
from expense_mascots.models.audit import AuditEventBuilder
from expense_mascots.models.catalog import CatalogItem
from expense_mascots.models.preferences import (
    CategoryMascotPreferences,
    CountViolation,
    PreferenceKind,
    PreferenceRecord,
    SelectionLimits,
)
from expense_mascots.selection.rules import (
    DEFAULT_LIMITS,
    derive_defaults,
    validate_count,
)
from expense_mascots.services.storage import (
    MalformedPreferenceError,
    PreferenceStorageInterface,
)


# Supplied by the authentication layer; returns None for anonymous visitors
IdentityResolver = Callable[[], Awaitable[Optional[str]]]


def static_identity(user_id: Optional[str]) -> IdentityResolver:
    """Resolver for a user id that is already known (or None)."""
    async def resolve() -> Optional[str]:
        return user_id
    return resolve


anonymous_identity = static_identity(None)


class ReconciliationSource(str, Enum):
    """Where the reconciled selection came from."""
    STORED = "stored"
    NO_RECORD = "no_record"
    BELOW_MINIMUM = "below_minimum"
    MALFORMED = "malformed"
    STORE_ERROR = "store_error"
    ANONYMOUS = "anonymous"


class ReconciliationOutcome(BaseModel):
    identifiers: list[str]
    source: ReconciliationSource
    persistable: bool
    user_id: Optional[str] = None

    @property
    def used_defaults(self) -> bool:
        return self.source != ReconciliationSource.STORED


def parse_mascot_preferences(record: PreferenceRecord) -> CategoryMascotPreferences:
    """Validate a stored value's shape. Never trust the store."""
    try:
        return CategoryMascotPreferences.model_validate(record.value)
    except ValidationError as e:
        raise MalformedPreferenceError(f"Invalid category mascot payload: {e}")


def sanitize_identifiers(
    ids: Sequence[str],
    catalog: Sequence[CatalogItem],
) -> list[str]:
    """Drop unknown and duplicate identifiers, keeping stored order."""
    known = {img.identifier for img in catalog}
    result: list[str] = []
    for identifier in ids:
        if identifier in known and identifier not in result:
            result.append(identifier)
    return result


async def resolve_identity(
    identity: IdentityResolver,
    audit_logger: Optional[AuditLogger] = None,
) -> Optional[str]:
    """Resolve the caller; a failing resolver means anonymous."""
    try:
        return await identity()
    except Exception as e:
        if audit_logger:
            audit_logger.log(AuditEventBuilder.store_error(
                user_id=None,
                operation="resolve_identity",
                error_message=str(e),
            ))
        return None


async def reconcile_selection(
    storage: PreferenceStorageInterface,
    user_id: Optional[str],
    catalog: Sequence[CatalogItem],
    limits: SelectionLimits = DEFAULT_LIMITS,
    kind: PreferenceKind = PreferenceKind.CATEGORY_MASCOTS,
    audit_logger: Optional[AuditLogger] = None,
) -> ReconciliationOutcome:
    """
    Derive a valid selection for a user.

    Flow:
    1. Anonymous → defaults, not persistable
    2. No record → defaults
    3. Record with a bad shape, or a read error → defaults
    4. Record with fewer than min known identifiers → defaults
    5. Otherwise → stored identifiers, truncated to max
    """
    def fallback(source: ReconciliationSource) -> ReconciliationOutcome:
        identifiers = derive_defaults(catalog, limits)
        if audit_logger:
            audit_logger.log(AuditEventBuilder.preferences_fallback(
                user_id=user_id,
                preference_kind=kind.value,
                reason=source.value,
                count=len(identifiers),
            ))
        return ReconciliationOutcome(
            identifiers=identifiers,
            source=source,
            persistable=user_id is not None,
            user_id=user_id,
        )

    if not user_id:
        user_id = None
        return fallback(ReconciliationSource.ANONYMOUS)

    try:
        record = await storage.read(user_id, kind)
        if record is None:
            return fallback(ReconciliationSource.NO_RECORD)
        prefs = parse_mascot_preferences(record)
    except MalformedPreferenceError as e:
        if audit_logger:
            audit_logger.log(AuditEventBuilder.store_error(
                user_id=user_id,
                operation="read",
                error_message=str(e),
            ))
        return fallback(ReconciliationSource.MALFORMED)
    except Exception as e:
        if audit_logger:
            audit_logger.log(AuditEventBuilder.store_error(
                user_id=user_id,
                operation="read",
                error_message=str(e),
            ))
        return fallback(ReconciliationSource.STORE_ERROR)

    identifiers = sanitize_identifiers(prefs.selected_identifiers, catalog)
    check = validate_count(identifiers, limits)
    if not check.ok and check.violation == CountViolation.BELOW_MINIMUM:
        return fallback(ReconciliationSource.BELOW_MINIMUM)

    identifiers = identifiers[:limits.max_selections]
    if audit_logger:
        audit_logger.log(AuditEventBuilder.preferences_loaded(
            user_id=user_id,
            preference_kind=kind.value,
            count=len(identifiers),
        ))
    return ReconciliationOutcome(
        identifiers=identifiers,
        source=ReconciliationSource.STORED,
        persistable=True,
        user_id=user_id,
    )
