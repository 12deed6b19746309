"""Observer channel for session transition events."""

import logging
import threading
from collections.abc import Callable

from tasktrack.services.auth.models import SessionEvent

logger = logging.getLogger(__name__)

SessionListener = Callable[[SessionEvent], None]


class SessionEventChannel:
    """
    Delivers SessionEvents to registered listeners in registration order.

    A listener that raises is logged and skipped; the remaining listeners
    still receive the event.

    Example:
        >>> channel = SessionEventChannel()
        >>> unsubscribe = channel.subscribe(print)
        >>> unsubscribe()
    """

    def __init__(self) -> None:
        self._listeners: list[SessionListener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register a listener.

        Returns:
            Callable that removes the listener (safe to call more than once)
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: SessionEvent) -> None:
        """Deliver `event` to every current listener."""
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(event)
            except Exception as e:
                logger.error(
                    f"Session listener failed on {event.kind.value}: {e}",
                    exc_info=True,
                )

    @property
    def listener_count(self) -> int:
        return len(self._listeners)
