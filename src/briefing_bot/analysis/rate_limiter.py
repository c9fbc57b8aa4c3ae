"""Minimum-spacing rate limiter for LLM calls."""

import threading
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager


class RateLimiter:
    """Enforces a minimum interval between consecutive calls.

    The interval is measured from the end of the previous call. The lock is
    held for the duration of the call, so concurrent callers from several
    threads are serialized and the spacing holds for all of them.
    """

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the limiter.

        Args:
            min_interval: Minimum seconds between calls.
            clock: Monotonic clock, injectable for tests.
            sleep: Sleep function, injectable for tests.
        """
        self._min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._last_call_end: float | None = None

    @property
    def min_interval(self) -> float:
        return self._min_interval

    @contextmanager
    def slot(self) -> Iterator[None]:
        """Wait for the interval to elapse, then hold the slot for one call."""
        with self._lock:
            if self._last_call_end is not None:
                elapsed = self._clock() - self._last_call_end
                if elapsed < self._min_interval:
                    self._sleep(self._min_interval - elapsed)
            try:
                yield
            finally:
                self._last_call_end = self._clock()
