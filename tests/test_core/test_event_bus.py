from __future__ import annotations
import pytest
from construction_dna.core.event_bus import EventBus

class TestEventBus:
    def test_subscribe_and_emit(self):
        bus = EventBus()
        received = []
        bus.subscribe("test.event", lambda data: received.append(data))
        bus.emit("test.event", {"key": "value"})
        assert len(received) == 1
        assert received[0]["key"] == "value"

    def test_multiple_subscribers(self):
        bus = EventBus()
        results = []
        bus.subscribe("question.answered", lambda d: results.append("A"))
        bus.subscribe("question.answered", lambda d: results.append("B"))
        bus.emit("question.answered", {})
        assert results == ["A", "B"]

    def test_unsubscribe(self):
        bus = EventBus()
        received = []
        handler = lambda d: received.append(d)
        bus.subscribe("ev", handler)
        bus.unsubscribe("ev", handler)
        bus.emit("ev", {"x": 1})
        assert len(received) == 0

    def test_emit_unregistered_event(self):
        bus = EventBus()
        bus.emit("no.listener", {})

    def test_event_history(self):
        bus = EventBus(keep_history=True)
        bus.emit("a", {"v": 1})
        bus.emit("b", {"v": 2})
        history = bus.get_history()
        assert len(history) == 2
        assert history[0]["event"] == "a"
        bus.clear_history()
        assert bus.get_history() == []

    def test_no_history_by_default(self):
        bus = EventBus()
        bus.emit("a", {})
        assert bus.get_history() == []

    def test_wildcard_subscribe(self):
        bus = EventBus()
        received = []
        bus.subscribe("*", lambda d: received.append(d))
        bus.emit("any.event", {"x": 1})
        assert len(received) == 1

    def test_failing_handler_does_not_block_others(self):
        bus = EventBus()
        received = []

        def boom(_):
            raise RuntimeError("boom")

        bus.subscribe("ev", boom)
        bus.subscribe("ev", lambda d: received.append(d))
        bus.emit("ev", {"x": 1})
        assert received == [{"x": 1}]

    def test_history_is_bounded(self):
        bus = EventBus(keep_history=True, history_limit=3)
        for i in range(10):
            bus.emit("question.answered", {"n": i})
        history = bus.get_history()
        assert bus.history_limit == 3
        assert [h["data"]["n"] for h in history] == [7, 8, 9]

    def test_invalid_history_limit(self):
        with pytest.raises(ValueError):
            EventBus(keep_history=True, history_limit=0)
