"""Preference reconciliation and request-level preference actions."""

from expense_mascots.preferences.reconcile import (
    IdentityResolver,
    ReconciliationOutcome,
    ReconciliationSource,
    anonymous_identity,
    parse_mascot_preferences,
    reconcile_selection,
    resolve_identity,
    sanitize_identifiers,
    static_identity,
)
from expense_mascots.preferences.service import NOT_AUTHENTICATED, PreferenceService

__all__ = [
    "IdentityResolver",
    "NOT_AUTHENTICATED",
    "PreferenceService",
    "ReconciliationOutcome",
    "ReconciliationSource",
    "anonymous_identity",
    "parse_mascot_preferences",
    "reconcile_selection",
    "resolve_identity",
    "sanitize_identifiers",
    "static_identity",
]
