"""Shared fixtures for simulated time."""

import asyncio
from collections.abc import Callable

import pytest


class FakeClock:
    """
    Monotonic clock that only moves when something sleeps on it.

    Pass the instance as the manager's clock and ``sleep`` as its sleep function.
    Every sleep is recorded; ``on_sleep`` hooks run before time advances.
    """

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: list[float] = []
        self.on_sleep: list[Callable[[float], None]] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        for hook in self.on_sleep:
            hook(delay)
        self.now += delay
        await asyncio.sleep(0)

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock():
    """A fresh FakeClock starting at t=1000s."""
    return FakeClock()
