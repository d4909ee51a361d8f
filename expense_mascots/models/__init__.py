"""
Data Models Package

This package contains all Pydantic models used by the mascot preference engine.
All data flowing between the store, the selection state and the UI must
conform to these schemas.
"""

from expense_mascots.models.catalog import CatalogItem, CategoryGroup
from expense_mascots.models.preferences import (
    ActionResult,
    CategoryMascotPreferences,
    CountValidation,
    CountViolation,
    MutationResult,
    PreferenceKind,
    PreferenceRecord,
    SelectionLimits,
    SelectionSummary,
)
from expense_mascots.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Catalog models
    "CatalogItem",
    "CategoryGroup",
    # Preference models
    "ActionResult",
    "CategoryMascotPreferences",
    "CountValidation",
    "CountViolation",
    "MutationResult",
    "PreferenceKind",
    "PreferenceRecord",
    "SelectionLimits",
    "SelectionSummary",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
