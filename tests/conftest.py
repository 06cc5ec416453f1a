"""Shared fixtures: a controllable clock and a fresh in-memory engine."""

from datetime import datetime, timedelta, timezone

import pytest

from alumod.moderation.engine import ModerationEngine
from alumod.moderation.store import MemoryStore

START = datetime(2026, 3, 10, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = START) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def engine(store, clock):
    return ModerationEngine(store, clock=clock)
