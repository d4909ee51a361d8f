"""Process-wide change notification."""

from expense_mascots.events.bus import (
    CATEGORY_PREFERENCES_UPDATED,
    ChangeNotificationBus,
)

__all__ = ["CATEGORY_PREFERENCES_UPDATED", "ChangeNotificationBus"]
