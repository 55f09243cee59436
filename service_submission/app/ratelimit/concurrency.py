"""
Bounded in-flight submissions.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

from shared.errors import ConfigurationError


class ConcurrencyCap:
    """Limit the number of submissions in progress at the same time."""

    def __init__(self, limit: int):
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise ConfigurationError(
                "Concurrency limit must be a positive integer",
                details={"limit": repr(limit)}
            )
        self._limit = limit
        self._semaphore = asyncio.Semaphore(limit)
        self._in_flight = 0

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @property
    def available(self) -> int:
        return self._limit - self._in_flight

    async def acquire_slot(self) -> None:
        """Block until fewer than ``limit`` submissions are in flight."""
        await self._semaphore.acquire()
        self._in_flight += 1

    def release_slot(self) -> None:
        """Return a slot taken with ``acquire_slot``."""
        if self._in_flight <= 0:
            raise RuntimeError("release_slot called without a held slot")
        self._in_flight -= 1
        self._semaphore.release()

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[None]:
        """Hold a slot for the duration of the block, whatever way it exits."""
        await self.acquire_slot()
        try:
            yield
        finally:
            self.release_slot()
