"""
Run-wide admission control for page fetches.
"""

import asyncio
from typing import Callable, Optional


class AdmissionController:
    """
    Counting gate bounding how many fetches may be in flight across a
    whole crawl run, shared by every domain traversal.

    A token is held from just before a fetch until the page has been
    processed and the politeness delay has elapsed.
    """

    def __init__(self, capacity: int, on_change: Optional[Callable[[int], None]] = None):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self.in_use = 0
        self.peak_in_use = 0
        self._semaphore = asyncio.Semaphore(capacity)
        self._on_change = on_change

    async def acquire(self):
        """Wait until a slot is free and take it."""
        await self._semaphore.acquire()
        self.in_use += 1
        if self.in_use > self.peak_in_use:
            self.peak_in_use = self.in_use
        self._notify()

    def release(self):
        """Return a slot, waking at most one waiter."""
        if self.in_use == 0:
            raise RuntimeError("release() called without a matching acquire()")
        self.in_use -= 1
        self._semaphore.release()
        self._notify()

    async def __aenter__(self):
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.release()

    @property
    def available(self) -> int:
        return self.capacity - self.in_use

    def _notify(self):
        if self._on_change:
            self._on_change(self.in_use)
