"""Tests for the repeating timer implementations."""

import asyncio

import pytest

from hooklytics.timers import AsyncioTimers, VirtualTimers


class TestVirtualTimers:
    def test_fires_each_period(self, timers):
        ticks = []
        timers.call_every(1000, lambda: ticks.append(timers.now_ms()))

        timers.advance(3500)

        assert ticks == [1000, 2000, 3000]
        assert timers.now_ms() == 3500

    def test_advance_in_small_steps(self, timers):
        ticks = []
        timers.call_every(1000, lambda: ticks.append(timers.now_ms()))

        for _ in range(20):
            timers.advance(100)

        assert ticks == [1000, 2000]

    def test_cancel_stops_ticks(self, timers):
        ticks = []
        handle = timers.call_every(1000, lambda: ticks.append(1))

        timers.advance(1000)
        handle.cancel()
        handle.cancel()
        timers.advance(5000)

        assert ticks == [1]
        assert handle.cancelled
        assert timers.pending == 0

    def test_independent_timers_interleave_by_due_time(self, timers):
        order = []
        timers.call_every(1000, lambda: order.append(("fast", timers.now_ms())))
        timers.call_every(2500, lambda: order.append(("slow", timers.now_ms())))

        timers.advance(3000)

        assert order == [
            ("fast", 1000),
            ("fast", 2000),
            ("slow", 2500),
            ("fast", 3000),
        ]

    def test_cancel_from_inside_tick(self, timers):
        ticks = []
        handle = None

        def tick():
            ticks.append(timers.now_ms())
            handle.cancel()

        handle = timers.call_every(100, tick)
        timers.advance(1000)

        assert ticks == [100]

    def test_failing_tick_keeps_timer_alive(self, timers):
        calls = []

        def tick():
            calls.append(1)
            raise RuntimeError("boom")

        timers.call_every(100, tick)
        timers.advance(300)

        assert len(calls) == 3

    def test_start_offset(self):
        timers = VirtualTimers(start_ms=1_700_000_000_000)
        ticks = []
        timers.call_every(1000, lambda: ticks.append(timers.now_ms()))
        timers.advance(1000)
        assert ticks == [1_700_000_001_000]

    def test_rejects_non_positive_interval(self, timers):
        with pytest.raises(ValueError):
            timers.call_every(0, lambda: None)


class TestAsyncioTimers:
    @pytest.mark.asyncio
    async def test_ticks_on_running_loop(self):
        timers = AsyncioTimers()
        ticks = []
        handle = timers.call_every(10, lambda: ticks.append(1))

        await asyncio.sleep(0.065)
        handle.cancel()
        count = len(ticks)
        await asyncio.sleep(0.05)

        assert count >= 2
        assert len(ticks) == count
        assert handle.cancelled

    @pytest.mark.asyncio
    async def test_failing_tick_keeps_looping(self):
        timers = AsyncioTimers()
        calls = []

        def tick():
            calls.append(1)
            raise RuntimeError("boom")

        handle = timers.call_every(10, tick)
        await asyncio.sleep(0.065)
        handle.cancel()

        assert len(calls) >= 2

    @pytest.mark.asyncio
    async def test_now_ms_is_wall_clock(self):
        assert AsyncioTimers().now_ms() > 1_600_000_000_000

    def test_requires_running_loop(self):
        with pytest.raises(RuntimeError):
            AsyncioTimers().call_every(10, lambda: None)
