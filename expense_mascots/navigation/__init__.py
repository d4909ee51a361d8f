"""Navigation surface consumer of mascot preferences."""

from expense_mascots.navigation.adapter import NavMascotsAdapter

__all__ = ["NavMascotsAdapter"]
