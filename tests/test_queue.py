"""Tests for the event queue."""

import pytest

from hooklytics.events import build_event
from hooklytics.queue import COMPACTION_THRESHOLD, FastQueue


def make_events(count):
    return [build_event("evt", {"i": i}, clock=lambda i=i: i) for i in range(count)]


class TestFlushQueue:
    def test_returns_all_in_order(self, queue):
        events = make_events(5)
        for event in events:
            queue.enqueue(event)

        batch = queue.flush_queue()

        assert batch == events
        assert [e.metadata["i"] for e in batch] == [0, 1, 2, 3, 4]

    def test_leaves_queue_empty(self, queue):
        for event in make_events(3):
            queue.enqueue(event)

        queue.flush_queue()

        assert queue.is_queue_empty()
        assert queue.queue_length() == 0
        assert queue.items == []
        assert queue.head == 0

    def test_flush_empty_queue(self, queue):
        assert queue.flush_queue() == []
        assert queue.is_queue_empty()

    def test_flush_after_partial_dequeue(self, queue):
        events = make_events(4)
        for event in events:
            queue.enqueue(event)

        assert queue.dequeue() is events[0]
        assert queue.flush_queue() == events[1:]


class TestDequeue:
    def test_empty_returns_none(self, queue):
        assert queue.dequeue() is None
        assert queue.queue_length() == 0

    def test_fifo_order(self, queue):
        events = make_events(3)
        for event in events:
            queue.enqueue(event)

        assert [queue.dequeue() for _ in range(3)] == events
        assert queue.dequeue() is None

    def test_interleaving_keeps_head_in_bounds(self, queue):
        events = make_events(50)
        for i, event in enumerate(events):
            queue.enqueue(event)
            if i % 3 == 0:
                queue.dequeue()
                queue.dequeue()
            assert queue.head <= len(queue.items)
            assert queue.queue_length() >= 0

        while queue.dequeue() is not None:
            assert queue.head <= len(queue.items)
        assert queue.queue_length() == 0


class TestCompaction:
    def test_compaction_is_transparent(self):
        queue = FastQueue()
        events = make_events(3000)
        for event in events:
            queue.enqueue(event)

        for i in range(1500):
            assert queue.dequeue() is events[i]

        # head reached 1500 > threshold and >= 3000 / 2
        assert queue.stats["compactions"] == 1
        assert queue.head == 0
        assert len(queue.items) == 1500
        assert queue.queue_length() == 1500
        assert queue.dequeue() is events[1500]
        assert queue.flush_queue() == events[1501:]

    def test_no_compaction_below_threshold(self):
        queue = FastQueue()
        for event in make_events(COMPACTION_THRESHOLD):
            queue.enqueue(event)

        for _ in range(COMPACTION_THRESHOLD):
            queue.dequeue()

        assert queue.stats["compactions"] == 0
        assert queue.head == COMPACTION_THRESHOLD
        assert queue.is_queue_empty()


class TestBoundedQueue:
    def test_unbounded_by_default(self, queue):
        for event in make_events(5000):
            queue.enqueue(event)
        assert queue.queue_length() == 5000
        assert queue.stats["dropped"] == 0

    def test_drop_oldest(self):
        queue = FastQueue(max_size=3)
        events = make_events(5)
        for event in events:
            queue.enqueue(event)

        assert queue.queue_length() == 3
        assert queue.flush_queue() == events[2:]
        assert queue.stats["dropped"] == 2

    def test_drop_newest(self):
        queue = FastQueue(max_size=3, overflow_policy="drop_newest")
        events = make_events(5)
        for event in events:
            queue.enqueue(event)

        assert queue.flush_queue() == events[:3]
        assert queue.stats["dropped"] == 2
        assert queue.stats["enqueued"] == 3

    @pytest.mark.parametrize("policy", ["drop_oldest", "drop_newest"])
    def test_capacity_frees_after_flush(self, policy):
        queue = FastQueue(max_size=2, overflow_policy=policy)
        for event in make_events(2):
            queue.enqueue(event)
        queue.flush_queue()

        for event in make_events(2):
            queue.enqueue(event)
        assert queue.stats["dropped"] == 0
        assert queue.queue_length() == 2
