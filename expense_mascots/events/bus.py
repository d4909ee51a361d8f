"""
Change Notification Bus

Decouples "preference changed" producers (the editor session) from
consumers that refresh on their own schedule (the navigation bar).

DESIGN DECISION: Events carry no payload. A subscriber that receives
CATEGORY_PREFERENCES_UPDATED re-reads the authoritative state itself,
so racing publishes can never leave it holding a stale pushed value.

One bus is created by create_app_components() and lives for the whole
process. All access happens on the event-loop thread, so no locking.
"""

from typing import Callable

import structlog


CATEGORY_PREFERENCES_UPDATED = "category_preferences_updated"

Handler = Callable[[], None]

logger = structlog.get_logger()


class ChangeNotificationBus:
    """Named, payload-free publish/subscribe channel."""

    def __init__(self):
        self._handlers: dict[str, list[Handler]] = {}

    def subscribe(self, event_name: str, handler: Handler) -> Callable[[], None]:
        """
        Register a handler for an event.

        Returns an unsubscribe function. Calling it more than once, or
        from inside a handler while a publish is running, is safe.
        """
        entry = _Subscription(handler)
        self._handlers.setdefault(event_name, []).append(entry)

        def unsubscribe() -> None:
            handlers = self._handlers.get(event_name, [])
            if entry in handlers:
                handlers.remove(entry)

        return unsubscribe

    def publish(self, event_name: str) -> None:
        """Invoke every handler currently subscribed to event_name."""
        # Snapshot: handlers may unsubscribe while we iterate
        for entry in list(self._handlers.get(event_name, [])):
            if entry not in self._handlers.get(event_name, []):
                continue
            try:
                entry.handler()
            except Exception as e:
                # One broken consumer must not starve the others
                logger.error(
                    "event_handler_failed",
                    event_name=event_name,
                    error=str(e),
                    exc_info=True,
                )

    def subscriber_count(self, event_name: str) -> int:
        return len(self._handlers.get(event_name, []))


class _Subscription:
    """Wraps a handler so the same callable can be subscribed twice."""

    __slots__ = ("handler",)

    def __init__(self, handler: Handler):
        self.handler = handler
