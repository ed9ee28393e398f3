"""In-process event bus standing in for host-wide DOM events."""
import logging
from collections import defaultdict
from collections.abc import Callable

logger = logging.getLogger(__name__)

USER_UPDATED = "user-updated"

EventHandler = Callable[[], None]


class EventBus:
    """Payload-less named events; listeners re-read state when notified."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, name: str, handler: EventHandler) -> Callable[[], None]:
        """Register handler for name. Returns a callable that unsubscribes it."""
        self._handlers[name].append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers[name]:
                self._handlers[name].remove(handler)

        return unsubscribe

    def emit(self, name: str) -> None:
        """Notify every handler subscribed to name, in subscription order."""
        for handler in list(self._handlers[name]):
            try:
                handler()
            except Exception:
                # A broken listener must not stop delivery to the others
                logger.exception("event_handler_failed", extra={"event": name})

    def listener_count(self, name: str) -> int:
        return len(self._handlers[name])
