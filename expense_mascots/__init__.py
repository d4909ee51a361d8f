"""
Expense Mascots - Source Package

The category mascot preference engine of a personal expense tracker:
users keep a bounded set of category images ("mascots") that the
navigation bar shows as quick-add shortcuts.

DESIGN PRINCIPLES:
1. The selection is always within [min, max] once loaded
2. Missing or broken preferences fall back to deterministic defaults
3. Local state wins within a session; the store catches up
4. Consumers re-read on notification, never trust pushed values
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Mascots Team"
