"""
Tests for the event bus.
"""

import logging

import pytest


class TestEventBus:
    """Test EventBus."""

    def test_emit_to_handlers_in_order(self, event_bus):
        """EVT-001: Handlers run in registration order, wildcard last."""
        from langgate.events import ALL_EVENTS

        calls = []
        event_bus.register_handler(ALL_EVENTS, lambda t, p: calls.append(("all", t)))
        event_bus.register_handler("x", lambda t, p: calls.append(("first", p)))
        event_bus.register_handler("x", lambda t, p: calls.append(("second", p)))

        delivered = event_bus.emit("x", 1)

        assert delivered == 3
        assert calls == [("first", 1), ("second", 1), ("all", "x")]

    def test_no_handlers(self, event_bus):
        """EVT-002: Emitting with no subscribers is a no-op."""
        assert event_bus.emit("nobody-listens", {"a": 1}) == 0

    def test_failing_handler_isolated(self, event_bus, caplog):
        """EVT-003: A raising handler is logged and does not stop others."""
        calls = []

        def broken(event_type, payload):
            raise RuntimeError("handler bug")

        event_bus.register_handler("x", broken)
        event_bus.register_handler("x", lambda t, p: calls.append(p))

        with caplog.at_level(logging.ERROR, logger="langgate"):
            delivered = event_bus.emit("x", "payload")

        assert delivered == 1
        assert calls == ["payload"]
        assert "handler bug" in caplog.text

    def test_remove_handler(self, event_bus):
        """EVT-004: Removed handlers stop receiving events."""
        calls = []

        def handler(event_type, payload):
            calls.append(payload)

        event_bus.register_handler("x", handler)
        assert event_bus.handler_count("x") == 1
        assert event_bus.remove_handler("x", handler) is True
        assert event_bus.remove_handler("x", handler) is False

        event_bus.emit("x", 1)

        assert calls == []
        assert event_bus.handler_count("x") == 0

    @pytest.mark.asyncio
    async def test_engine_unaffected_by_broken_handler(self, two_model_engine, event_bus):
        """EVT-005: A broken subscriber does not change inference results."""
        from langgate.events import INFERENCE_COMPLETED
        from langgate.routing.models import InferenceRequest

        def broken(event_type, payload):
            raise ValueError("subscriber down")

        event_bus.register_handler(INFERENCE_COMPLETED, broken)

        response = await two_model_engine.infer(InferenceRequest("question-answering", "q"))

        assert response.model_used == "model-b"
