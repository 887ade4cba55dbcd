"""In-process change notifications for committed dispatch mutations."""

from __future__ import annotations

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

Handler = Callable[[str, dict[str, Any]], None]

REQUEST_CREATED = "request.created"
REQUEST_ASSIGNED = "request.assigned"
REQUEST_STARTED = "request.started"
REQUEST_COMPLETED = "request.completed"
REQUEST_RATED = "request.rated"
CHAT_MESSAGE = "chat.message"
DRIVER_UPDATED = "driver.updated"


class EventBus:
    """Fan-out of (event, payload) pairs to subscribed handlers.

    Handlers run synchronously in the publishing thread, after the change
    has been committed. A handler that raises is logged and skipped.
    """

    def __init__(self) -> None:
        self._handlers: list[Handler] = []

    def subscribe(self, handler: Handler) -> Callable[[], None]:
        """Register a handler. Returns a callable that removes it again."""
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def publish(self, event: str, payload: dict[str, Any]) -> None:
        for handler in list(self._handlers):
            try:
                handler(event, payload)
            except Exception:
                logger.exception("Event handler failed for %s", event)


# Singleton instance used across the app
event_bus = EventBus()
