"""
In-process event bus for LangGate.

Engines emit named events (model registered, inference completed,
evaluation failed, ...) for observability. Handlers are optional: an
engine behaves identically with or without subscribers, and a failing
handler is logged and skipped.
"""

import logging
import threading
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

EventHandler = Callable[[str, Any], None]

MODEL_REGISTERED = "model:registered"
METRIC_REGISTERED = "metric:registered"
INFERENCE_COMPLETED = "inference:completed"
INFERENCE_FALLBACK = "inference:fallback"
EVALUATION_COMPLETED = "evaluation:completed"
EVALUATION_FAILED = "evaluation:failed"
BENCHMARK_COMPLETED = "benchmark:completed"
QUERY_COMPLETED = "query:completed"
QUERY_REJECTED = "query:rejected"

# Handlers registered under this key receive every event
ALL_EVENTS = "*"


class EventBus:
    """
    Synchronous publish/subscribe hub.

    Handlers are called as ``handler(event_type, payload)`` in registration
    order, wildcard handlers after type-specific ones.
    """

    def __init__(self):
        self._handlers: Dict[str, List[EventHandler]] = {}
        self._lock = threading.RLock()

    def register_handler(self, event_type: str, handler: EventHandler) -> None:
        """Subscribe a handler to an event type (or ``ALL_EVENTS``)."""
        with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(f"Event handler registered for {event_type}")

    def remove_handler(self, event_type: str, handler: EventHandler) -> bool:
        """Unsubscribe a handler. Returns True if it was registered."""
        with self._lock:
            handlers = self._handlers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)
                return True
        return False

    def handler_count(self, event_type: str) -> int:
        """Number of handlers subscribed to an event type."""
        with self._lock:
            return len(self._handlers.get(event_type, []))

    def emit(self, event_type: str, payload: Any = None) -> int:
        """
        Publish an event.

        Returns:
            Number of handlers that ran without raising
        """
        with self._lock:
            handlers = list(self._handlers.get(event_type, []))
            handlers += self._handlers.get(ALL_EVENTS, [])

        delivered = 0
        for handler in handlers:
            try:
                handler(event_type, payload)
                delivered += 1
            except Exception:
                logger.exception(
                    f"Event handler {getattr(handler, '__name__', handler)!r} "
                    f"failed for {event_type}"
                )
        return delivered
