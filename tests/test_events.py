"""
Tests for the change notification bus.
"""

import pytest

from expense_mascots.events import CATEGORY_PREFERENCES_UPDATED, ChangeNotificationBus


class TestChangeNotificationBus:

    def test_each_subscriber_called_once(self, bus):
        calls = []
        bus.subscribe(CATEGORY_PREFERENCES_UPDATED, lambda: calls.append("a"))
        bus.subscribe(CATEGORY_PREFERENCES_UPDATED, lambda: calls.append("b"))

        bus.publish(CATEGORY_PREFERENCES_UPDATED)

        assert calls == ["a", "b"]

    def test_unsubscribed_handler_not_called(self, bus):
        calls = []
        unsubscribe_a = bus.subscribe(CATEGORY_PREFERENCES_UPDATED, lambda: calls.append("a"))
        bus.subscribe(CATEGORY_PREFERENCES_UPDATED, lambda: calls.append("b"))

        unsubscribe_a()
        bus.publish(CATEGORY_PREFERENCES_UPDATED)

        assert calls == ["b"]

    def test_unsubscribe_is_idempotent(self, bus):
        unsubscribe = bus.subscribe(CATEGORY_PREFERENCES_UPDATED, lambda: None)
        unsubscribe()
        unsubscribe()
        assert bus.subscriber_count(CATEGORY_PREFERENCES_UPDATED) == 0

    def test_same_handler_subscribed_twice(self, bus):
        calls = []

        def handler():
            calls.append(1)

        first = bus.subscribe(CATEGORY_PREFERENCES_UPDATED, handler)
        bus.subscribe(CATEGORY_PREFERENCES_UPDATED, handler)
        first()
        bus.publish(CATEGORY_PREFERENCES_UPDATED)

        assert calls == [1]

    def test_unsubscribe_during_publish(self, bus):
        """A handler removing another mid-publish stops it from running."""
        calls = []
        holder = {}

        def first():
            calls.append("first")
            holder["second"]()

        bus.subscribe(CATEGORY_PREFERENCES_UPDATED, first)
        holder["second"] = bus.subscribe(
            CATEGORY_PREFERENCES_UPDATED, lambda: calls.append("second")
        )

        bus.publish(CATEGORY_PREFERENCES_UPDATED)

        assert calls == ["first"]

    def test_failing_handler_does_not_stop_others(self, bus):
        calls = []

        def broken():
            raise RuntimeError("boom")

        bus.subscribe(CATEGORY_PREFERENCES_UPDATED, broken)
        bus.subscribe(CATEGORY_PREFERENCES_UPDATED, lambda: calls.append("ok"))

        bus.publish(CATEGORY_PREFERENCES_UPDATED)

        assert calls == ["ok"]

    def test_events_are_independent(self, bus):
        calls = []
        bus.subscribe("other_event", lambda: calls.append("other"))
        bus.publish(CATEGORY_PREFERENCES_UPDATED)
        assert calls == []

    def test_publish_without_subscribers(self):
        ChangeNotificationBus().publish(CATEGORY_PREFERENCES_UPDATED)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
