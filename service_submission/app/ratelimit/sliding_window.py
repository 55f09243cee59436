"""
Sliding-window rate gate for outbound registry requests.
"""

import asyncio
import threading
import time
from collections import deque
from datetime import timedelta
from typing import Awaitable, Callable, Deque, Optional, Tuple, Union

from shared.logging import get_logger
from shared.errors import ConfigurationError


class RateGate:
    """Admit at most ``limit`` requests within any trailing ``window``.

    Admission instants are kept oldest-first and pruned lazily on every
    attempt. The bookkeeping lock is a ``threading.Lock`` held only for the
    check-and-update, so a gate can be shared by event loops running in
    different threads. Waiters are not admitted in FIFO order.
    """

    def __init__(self,
                 limit: int,
                 window: Optional[Union[float, timedelta]],
                 *,
                 clock: Callable[[], float] = time.monotonic,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        if isinstance(limit, bool) or not isinstance(limit, int):
            raise ConfigurationError(
                "Request limit must be an integer",
                details={"limit": repr(limit)}
            )
        if limit <= 0:
            raise ConfigurationError(
                "Request limit must be positive",
                details={"limit": limit}
            )
        if window is None:
            raise ConfigurationError("Rate window duration is required")
        if isinstance(window, timedelta):
            window = window.total_seconds()
        if window <= 0:
            raise ConfigurationError(
                "Rate window duration must be positive",
                details={"window_seconds": window}
            )

        self._limit = limit
        self._window = float(window)
        self._clock = clock
        self._sleep = sleep
        self._timestamps: Deque[float] = deque()
        self._lock = threading.Lock()
        self.logger = get_logger("submission.rate_gate")

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> float:
        return self._window

    def _prune(self, now: float) -> None:
        while self._timestamps and now - self._timestamps[0] >= self._window:
            self._timestamps.popleft()

    def _admit(self) -> Tuple[Optional[float], float]:
        with self._lock:
            now = self._clock()
            self._prune(now)
            if len(self._timestamps) < self._limit:
                self._timestamps.append(now)
                return now, 0.0
            return None, self._window - (now - self._timestamps[0])

    def try_acquire(self) -> float:
        """Admit one request now if the window allows it.

        Returns 0.0 when the request was admitted and recorded, otherwise the
        number of seconds until the oldest admission leaves the window.
        """
        _, wait_time = self._admit()
        return wait_time

    async def acquire(self) -> float:
        """Wait until a request may proceed, record it and return the admission instant."""
        while True:
            admitted_at, wait_time = self._admit()
            if admitted_at is not None:
                return admitted_at

            self.logger.debug(
                "Rate limit reached, waiting for slot",
                wait_seconds=round(wait_time, 4),
                limit=self._limit,
                window_seconds=self._window
            )
            # Another waiter may take the freed slot first, so re-check after waking.
            await self._sleep(wait_time)

    def in_window(self) -> int:
        """Number of admissions still inside the trailing window."""
        with self._lock:
            self._prune(self._clock())
            return len(self._timestamps)
