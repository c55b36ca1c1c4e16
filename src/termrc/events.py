"""Host event kinds and handler registry."""

from __future__ import annotations

import logging as py_logging
from collections.abc import Callable
from enum import Enum
from typing import Any

logger = py_logging.getLogger(__name__)

Handler = Callable[..., Any]


class EventKind(str, Enum):
    STARTUP = "startup"
    CONFIG_RELOAD = "window-config-reloaded"
    STATUS_TICK = "update-status"
    KEY_PRESS = "key-press"


class EventDispatcher:
    """Run registered handlers in order; a failing handler is logged and skipped."""

    def __init__(self) -> None:
        self._handlers: dict[EventKind, list[Handler]] = {}

    def register(self, kind: EventKind, handler: Handler) -> Handler:
        self._handlers.setdefault(kind, []).append(handler)
        return handler

    def on(self, kind: EventKind) -> Callable[[Handler], Handler]:
        def decorator(handler: Handler) -> Handler:
            return self.register(kind, handler)

        return decorator

    def handlers(self, kind: EventKind) -> list[Handler]:
        return list(self._handlers.get(kind, []))

    def emit(self, kind: EventKind, *args: Any, **kwargs: Any) -> list[Any]:
        results: list[Any] = []
        for handler in self.handlers(kind):
            try:
                results.append(handler(*args, **kwargs))
            except Exception:
                logger.exception("Event handler failed event=%s handler=%r", kind.value, handler)
        return results
