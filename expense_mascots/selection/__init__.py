"""Selection rules and the in-memory selection state."""

from expense_mascots.selection.rules import (
    DEFAULT_LIMITS,
    can_remove,
    can_select,
    derive_defaults,
    validate_count,
)
from expense_mascots.selection.state import SelectionState

__all__ = [
    "DEFAULT_LIMITS",
    "SelectionState",
    "can_remove",
    "can_select",
    "derive_defaults",
    "validate_count",
]
