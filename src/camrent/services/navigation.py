"""Back-navigation handler stack.

Open dialogs register a close callback with a priority. A back event
runs only the highest-priority handler; among equal priorities the most
recently registered one wins, so nested dialogs close innermost first.
"""

import itertools
from collections.abc import Callable
from dataclasses import dataclass, field

from camrent.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class _Handler:
    priority: int
    sequence: int
    callback: Callable[[], None] = field(repr=False)


class BackHandlerStack:
    """Priority-ordered back handlers keyed by id."""

    def __init__(self) -> None:
        self._handlers: dict[str, _Handler] = {}
        self._counter = itertools.count()

    @property
    def active_count(self) -> int:
        """Number of registered handlers."""
        return len(self._handlers)

    def register(self, handler_id: str, callback: Callable[[], None], priority: int = 0) -> None:
        """Register or replace the handler for handler_id."""
        self._handlers[handler_id] = _Handler(priority, next(self._counter), callback)

    def unregister(self, handler_id: str) -> bool:
        """Remove a handler. Returns False if it was not registered."""
        return self._handlers.pop(handler_id, None) is not None

    def handle_back(self) -> bool:
        """Dispatch a back event.

        Returns:
            True if a handler consumed the event, False to let normal
            navigation proceed.
        """
        if not self._handlers:
            return False

        handler_id, handler = max(
            self._handlers.items(),
            key=lambda item: (item[1].priority, item[1].sequence),
        )
        try:
            handler.callback()
        except Exception:
            # The event is still consumed so navigation does not leave the page
            logger.exception("Back handler %s failed", handler_id)
        return True
