"""Minimal subscribe/notify primitive for observable state."""
import logging
from typing import Callable, Generic, List, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EventEmitter(Generic[T]):
    """
    Ordered list of handlers called with a payload on every emit.

    Handlers are called in subscription order. A failing handler is logged
    and does not stop the remaining handlers.
    """

    def __init__(self, name: str):
        self.name = name
        self._handlers: List[Callable[[T], None]] = []

    def subscribe(self, handler: Callable[[T], None]) -> Callable[[], None]:
        """Register a handler. Returns a callable that unsubscribes it."""
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def emit(self, payload: T) -> None:
        """Deliver payload to every subscribed handler."""
        for handler in list(self._handlers):
            try:
                handler(payload)
            except Exception as e:
                logger.error(
                    f"[EVENTS] Handler failed for '{self.name}' - "
                    f"Error: {type(e).__name__}: {str(e)}",
                    exc_info=True,
                )
