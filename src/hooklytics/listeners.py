"""Single-slot listener registration."""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from .events import Event


logger = logging.getLogger(__name__)

Listener = Callable[[list[Event]], None]


class ListenerRegistry:
    """
    Holds at most one batch listener.

    Setting a listener replaces the previous one; setting None empties
    the slot. Notifying an empty slot does nothing.
    """

    def __init__(self) -> None:
        self._listener: Listener | None = None

    @property
    def listener(self) -> Listener | None:
        return self._listener

    def set_listener(self, fn: Listener | None) -> None:
        if self._listener is not None and fn is not None and fn is not self._listener:
            logger.debug("Replacing registered listener")
        self._listener = fn

    def has_listener(self) -> bool:
        return self._listener is not None

    def notify(self, batch: Sequence[Event]) -> bool:
        """
        Hand a batch to the listener.

        Returns True if a listener received it. Listener exceptions
        propagate to the caller.
        """
        listener = self._listener
        if listener is None:
            return False
        listener(list(batch))
        return True
