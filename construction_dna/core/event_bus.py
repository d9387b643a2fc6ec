"""Publish-subscribe event bus shared by the engine and its plugins."""
from __future__ import annotations

import collections
import logging
import threading
from datetime import datetime, timezone
from typing import Callable

logger = logging.getLogger(__name__)

EventHandler = Callable

WILDCARD = "*"
DEFAULT_HISTORY_LIMIT = 100


class EventBus:
    """Synchronous in-process bus.

    Handlers receive the event payload dict. Subscribers of ``"*"`` receive
    every event. With ``keep_history`` the most recent *history_limit*
    events are retained, oldest first.
    """

    def __init__(self, keep_history: bool = False, history_limit: int = DEFAULT_HISTORY_LIMIT):
        if history_limit < 1:
            raise ValueError(f"history_limit must be positive, got {history_limit}")
        self._lock = threading.Lock()
        self._handlers: dict = collections.defaultdict(list)
        self._keep_history = keep_history
        self._history: collections.deque = collections.deque(maxlen=history_limit)

    @property
    def history_limit(self) -> int:
        return self._history.maxlen

    def subscribe(self, event: str, handler: EventHandler) -> None:
        with self._lock:
            self._handlers[event].append(handler)

    def unsubscribe(self, event: str, handler: EventHandler) -> None:
        with self._lock:
            if event in self._handlers:
                self._handlers[event] = [h for h in self._handlers[event] if h is not handler]

    def emit(self, event: str, data: dict) -> None:
        with self._lock:
            if self._keep_history:
                self._history.append({
                    "event": event,
                    "data": data,
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                })
            handlers = self._handlers.get(event, []) + self._handlers.get(WILDCARD, [])

        for handler in handlers:
            try:
                handler(data)
            except Exception:
                logger.exception("Event handler error for %s", event)

    def get_history(self) -> list:
        with self._lock:
            return list(self._history)

    def clear_history(self) -> None:
        with self._lock:
            self._history.clear()
