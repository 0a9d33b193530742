import pytest

from crossing.internal.events import EventBus, Topic


class TestEventBus:
    def test_publish_without_subscribers_is_noop(self):
        bus = EventBus()
        bus.publish(Topic.RESET)
        bus.publish("never-registered", 1, 2)

    def test_handlers_run_in_registration_order(self):
        bus = EventBus()
        calls = []
        bus.subscribe(Topic.SCORE_CHANGE, lambda s: calls.append(("a", s)))
        bus.subscribe(Topic.SCORE_CHANGE, lambda s: calls.append(("b", s)))

        bus.publish(Topic.SCORE_CHANGE, 20)

        assert calls == [("a", 20), ("b", 20)]

    def test_string_and_enum_topics_are_the_same_channel(self):
        bus = EventBus()
        calls = []
        bus.subscribe("score-change", calls.append)
        bus.publish(Topic.SCORE_CHANGE, 40)
        assert calls == [40]

    def test_reentrant_publish_runs_depth_first(self):
        """A handler publishing another topic finishes that dispatch before the next handler."""
        bus = EventBus()
        order = []

        def first():
            order.append("first")
            bus.publish(Topic.PLAYER_FREEZE)

        bus.subscribe(Topic.COLLISION, first)
        bus.subscribe(Topic.COLLISION, lambda: order.append("second"))
        bus.subscribe(Topic.PLAYER_FREEZE, lambda: order.append("freeze"))

        bus.publish(Topic.COLLISION)

        assert order == ["first", "freeze", "second"]

    def test_subscription_during_dispatch_sees_only_later_publishes(self):
        bus = EventBus()
        late = []

        def subscribe_late():
            bus.subscribe(Topic.RESET, lambda: late.append("late"))

        bus.subscribe(Topic.RESET, subscribe_late)
        bus.publish(Topic.RESET)
        assert late == []

        bus.publish(Topic.RESET)
        assert late == ["late"]

    def test_unsubscribe(self):
        bus = EventBus()
        calls = []
        bus.subscribe(Topic.RESET, calls.append)
        bus.unsubscribe(Topic.RESET, calls.append)
        bus.unsubscribe(Topic.RESET, calls.append)  # absent: no-op

        bus.publish(Topic.RESET, 1)

        assert calls == []
        assert bus.subscriber_count(Topic.RESET) == 0

    def test_handler_errors_propagate(self):
        bus = EventBus()

        def broken():
            raise KeyError("boom")

        bus.subscribe(Topic.RESET, broken)
        with pytest.raises(KeyError):
            bus.publish(Topic.RESET)
