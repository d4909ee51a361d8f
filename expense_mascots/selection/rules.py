"""
Selection Rules

Pure functions deciding whether a selection may change. They never raise
and never touch state; callers apply the mutation only when a rule allows it.

DESIGN DECISION: One SelectionLimits pair governs every rule. Earlier
versions of the app carried two different minimums (4 and 6) in two
places; there is now a single default of 6, overridable via settings.
"""

from typing import Sequence

from expense_mascots.models.catalog import CatalogItem
from expense_mascots.models.preferences import (
    CountValidation,
    CountViolation,
    SelectionLimits,
)


DEFAULT_LIMITS = SelectionLimits(min_selections=6, max_selections=10)


def can_select(
    current: Sequence[str],
    candidate_id: str,
    limits: SelectionLimits = DEFAULT_LIMITS,
) -> bool:
    """Determine if an image can be added given current selections."""
    if candidate_id in current:
        return False
    return len(current) < limits.max_selections


def can_remove(
    current: Sequence[str],
    limits: SelectionLimits = DEFAULT_LIMITS,
) -> bool:
    """
    Determine if an image can be removed given current selections.

    Membership is not checked here; removing a non-member is a no-op
    at the state container level.
    """
    return len(current) > limits.min_selections


def validate_count(
    ids: Sequence[str],
    limits: SelectionLimits = DEFAULT_LIMITS,
) -> CountValidation:
    """Validate selection size against limits."""
    if len(ids) < limits.min_selections:
        return CountValidation(
            ok=False,
            violation=CountViolation.BELOW_MINIMUM,
            message=f"You must select at least {limits.min_selections} images",
        )

    if len(ids) > limits.max_selections:
        return CountValidation(
            ok=False,
            violation=CountViolation.ABOVE_MAXIMUM,
            message=f"You can select at most {limits.max_selections} images",
        )

    return CountValidation(ok=True)


def derive_defaults(
    catalog: Sequence[CatalogItem],
    limits: SelectionLimits = DEFAULT_LIMITS,
) -> list[str]:
    """
    Build the default selection for a catalog.

    - Use images flagged as default, in catalog order.
    - If fewer than the minimum, top up with non-defaults in catalog order.
    - Always cap at the maximum.

    Deterministic for a given catalog.
    """
    selected = [img.identifier for img in catalog if img.is_preferred_default]

    if len(selected) < limits.min_selections:
        for img in catalog:
            if len(selected) >= limits.min_selections:
                break
            if img.is_preferred_default or img.identifier in selected:
                continue
            selected.append(img.identifier)

    return selected[:limits.max_selections]
