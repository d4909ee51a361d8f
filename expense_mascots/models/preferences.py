"""
Preference Models for Expense Mascots

These models describe:
1. The persisted preference record (one per user and preference kind)
2. The typed payload stored for category mascots
3. The small value objects the selection engine hands back to callers

DESIGN DECISION: The store keeps `value` as an untyped JSON blob.
We never trust it - every read goes through CategoryMascotPreferences
before any identifier reaches the selection state.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)


class PreferenceKind(str, Enum):
    """Kinds of per-user preference records."""
    CATEGORY_MASCOTS = "category_mascots"


class SelectionLimits(BaseModel):
    """Inclusive cardinality bounds for a selection set."""

    model_config = ConfigDict(frozen=True)

    min_selections: int = Field(default=6, ge=1)
    max_selections: int = Field(default=10, ge=1)

    @model_validator(mode='after')
    def validate_bounds(self) -> 'SelectionLimits':
        if self.min_selections > self.max_selections:
            raise ValueError("Minimum selections cannot exceed maximum selections")
        return self


class CategoryMascotPreferences(BaseModel):
    """
    Typed view of the stored `value` for PreferenceKind.CATEGORY_MASCOTS.

    Serialized as {"selectedIdentifiers": [...]}. Records written by older
    clients used "selectedImagePaths"; both keys are accepted on read.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    selected_identifiers: list[str] = Field(
        ...,
        validation_alias=AliasChoices(
            "selectedIdentifiers",
            "selectedImagePaths",
            "selected_identifiers",
        ),
        serialization_alias="selectedIdentifiers",
    )

    def to_value(self) -> dict[str, Any]:
        """The JSON value handed to the persistence gateway."""
        return self.model_dump(by_alias=True)


class PreferenceRecord(BaseModel):
    """A persisted preference, keyed by (user_id, preference_kind)."""

    user_id: str = Field(..., min_length=1)
    preference_kind: PreferenceKind
    value: dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


class MutationResult(BaseModel):
    """
    Outcome of a select/remove call.

    changed=False means the selection is untouched. The caller checks
    is_max_reached()/is_min_reached() to find out why.
    """

    model_config = ConfigDict(frozen=True)

    changed: bool
    resulting: list[str]


class SelectionSummary(BaseModel):
    """Counter shown next to the picker ("7 of 10, at least 6")."""

    model_config = ConfigDict(frozen=True)

    current: int
    min: int
    max: int


class CountViolation(str, Enum):
    BELOW_MINIMUM = "below_minimum"
    ABOVE_MAXIMUM = "above_maximum"


class CountValidation(BaseModel):
    """Result of checking a selection size against the limits."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    violation: Optional[CountViolation] = None
    message: Optional[str] = None


class ActionResult(BaseModel):
    """Result of a save/reset action, safe to show in the UI."""

    success: bool
    error: Optional[str] = None
