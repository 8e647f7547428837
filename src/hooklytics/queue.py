"""FIFO event buffer with lazy compaction."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .events import Event


logger = logging.getLogger(__name__)

# dequeue() only slices the consumed prefix away once head passes this mark
COMPACTION_THRESHOLD = 1000

OVERFLOW_DROP_OLDEST = "drop_oldest"
OVERFLOW_DROP_NEWEST = "drop_newest"


@dataclass
class FastQueue:
    """
    Append-only event queue with a moving head pointer.

    Producers call enqueue(); the scheduler drains with flush_queue().
    dequeue() exists for single-item consumers and compacts the consumed
    prefix lazily, so popping many items never shifts the list.

    The queue is unbounded unless max_size is set. In bounded mode:
    - "drop_oldest" discards the oldest queued event to make room
    - "drop_newest" discards the incoming event
    Either way enqueue() never raises.
    """
    max_size: int | None = None
    overflow_policy: str = OVERFLOW_DROP_OLDEST

    items: list[Event] = field(default_factory=list, init=False)
    head: int = field(default=0, init=False)
    _stats: dict = field(default_factory=dict, init=False)

    def __post_init__(self):
        self._stats = {
            "enqueued": 0,
            "dropped": 0,
            "compactions": 0,
        }

    def enqueue(self, event: Event) -> None:
        """Append an event to the tail."""
        if self.max_size is not None and self.queue_length() >= self.max_size:
            self._stats["dropped"] += 1
            if self.overflow_policy == OVERFLOW_DROP_NEWEST:
                logger.debug(f"Queue full ({self.max_size}), dropping newest event")
                return
            logger.debug(f"Queue full ({self.max_size}), dropping oldest event")
            self.head += 1
            self._maybe_compact()

        self.items.append(event)
        self._stats["enqueued"] += 1

    def dequeue(self) -> Event | None:
        """Pop the event at the head, or None if the queue is empty."""
        if self.head >= len(self.items):
            return None

        event = self.items[self.head]
        self.head += 1
        self._maybe_compact()
        return event

    def flush_queue(self) -> list[Event]:
        """Remove and return every queued event in enqueue order."""
        batch = self.items[self.head:]
        self.items = []
        self.head = 0
        return batch

    def queue_length(self) -> int:
        """Number of events still logically queued."""
        return len(self.items) - self.head

    def is_queue_empty(self) -> bool:
        return self.head >= len(self.items)

    def _maybe_compact(self) -> None:
        if self.head > COMPACTION_THRESHOLD and self.head >= len(self.items) / 2:
            self.items = self.items[self.head:]
            self.head = 0
            self._stats["compactions"] += 1

    @property
    def stats(self) -> dict:
        """Get queue statistics."""
        return {
            **self._stats,
            "queue_length": self.queue_length(),
        }
