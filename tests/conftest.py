"""Shared test fixtures for hooklytics."""

import pytest

from hooklytics.listeners import ListenerRegistry
from hooklytics.provider import AnalyticsProvider
from hooklytics.queue import FastQueue
from hooklytics.scheduler import DispatchScheduler
from hooklytics.timers import VirtualTimers

from tests.mocks.collaborators import Recorder, Visibility, fixed_snapshot


@pytest.fixture
def timers() -> VirtualTimers:
    return VirtualTimers()


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def visibility() -> Visibility:
    return Visibility()


@pytest.fixture
def queue() -> FastQueue:
    return FastQueue()


@pytest.fixture
def registry() -> ListenerRegistry:
    return ListenerRegistry()


@pytest.fixture
def scheduler(queue, registry, timers, visibility) -> DispatchScheduler:
    return DispatchScheduler(
        queue=queue,
        listeners=registry,
        timers=timers,
        snapshot_provider=fixed_snapshot,
        visibility_oracle=visibility,
    )


@pytest.fixture
def provider(timers, visibility):
    provider = AnalyticsProvider(
        timers=timers,
        snapshot_provider=fixed_snapshot,
        visibility_oracle=visibility,
    )
    yield provider
    provider.unmount()
