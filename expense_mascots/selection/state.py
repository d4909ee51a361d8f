"""
Selection State Container

Holds one user's current selection and is the only place interactive
mutations happen. Every select/remove goes through the selection rules,
so the held set never leaves [min, max] once it has been initialized.
"""

from typing import Optional, Sequence

from expense_mascots.models.catalog import CatalogItem, CategoryGroup
from expense_mascots.models.preferences import (
    MutationResult,
    SelectionLimits,
    SelectionSummary,
)
from expense_mascots.selection.rules import DEFAULT_LIMITS, can_remove, can_select


class SelectionState:
    """
    In-memory holder of the selected identifiers.

    Single owner, single writer. Readers always get copies.
    """

    def __init__(
        self,
        catalog: Sequence[CatalogItem],
        limits: SelectionLimits = DEFAULT_LIMITS,
        initial: Optional[Sequence[str]] = None,
    ):
        self._catalog = tuple(catalog)
        self._known = {img.identifier for img in self._catalog}
        self._limits = limits
        self._selected: list[str] = list(initial or [])

    @property
    def limits(self) -> SelectionLimits:
        return self._limits

    @property
    def selected_identifiers(self) -> list[str]:
        return list(self._selected)

    def replace(self, ids: Sequence[str]) -> None:
        """Overwrite the held set. Reserved for bootstrap/reconciliation."""
        self._selected = list(ids)

    def select(self, identifier: str) -> MutationResult:
        """Add an image if the rules allow it and it exists in the catalog."""
        if identifier not in self._known or not can_select(
            self._selected, identifier, self._limits
        ):
            return MutationResult(changed=False, resulting=self.selected_identifiers)

        self._selected = [*self._selected, identifier]
        return MutationResult(changed=True, resulting=self.selected_identifiers)

    def remove(self, identifier: str) -> MutationResult:
        """Remove an image unless that would drop below the minimum."""
        if not can_remove(self._selected, self._limits):
            return MutationResult(changed=False, resulting=self.selected_identifiers)

        if identifier not in self._selected:
            # No removal occurred
            return MutationResult(changed=False, resulting=self.selected_identifiers)

        self._selected = [i for i in self._selected if i != identifier]
        return MutationResult(changed=True, resulting=self.selected_identifiers)

    # Queries

    def is_selected(self, identifier: str) -> bool:
        return identifier in self._selected

    def is_max_reached(self) -> bool:
        return len(self._selected) >= self._limits.max_selections

    def is_min_reached(self) -> bool:
        return len(self._selected) <= self._limits.min_selections

    def selected_items(self) -> list[CatalogItem]:
        """Selected catalog items, in catalog order."""
        return [img for img in self._catalog if img.identifier in self._selected]

    def effective_set_for(self, group: CategoryGroup) -> list[CatalogItem]:
        return [img for img in self.selected_items() if img.group == group]

    def complement_for(self, group: CategoryGroup) -> list[CatalogItem]:
        """Images of a category that are not currently selected."""
        return [
            img for img in self._catalog
            if img.group == group and img.identifier not in self._selected
        ]

    def count_summary(self) -> SelectionSummary:
        return SelectionSummary(
            current=len(self._selected),
            min=self._limits.min_selections,
            max=self._limits.max_selections,
        )
