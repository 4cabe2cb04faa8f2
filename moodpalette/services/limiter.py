"""Bounded-concurrency gate for calls against the text generation service."""
from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

T = TypeVar("T")


class ConcurrencyLimiter:
    """Run at most ``capacity`` scheduled tasks at once, admitting waiters in FIFO order."""

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._semaphore = asyncio.Semaphore(capacity)
        self._active = 0
        self.peak = 0

    @property
    def active(self) -> int:
        return self._active

    async def schedule(self, task: Callable[[], Awaitable[T]]) -> T:
        async with self._semaphore:
            self._active += 1
            self.peak = max(self.peak, self._active)
            try:
                return await task()
            finally:
                self._active -= 1
