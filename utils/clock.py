from __future__ import annotations

import time
from collections import deque
from typing import Callable, Deque


class FrameClock:
    """Elapsed time since start plus a rolling frames-per-second estimate."""

    def __init__(self, average_over: int = 60, now: Callable[[], float] = time.perf_counter) -> None:
        self._now = now
        self._start = now()
        self._timestamps: Deque[float] = deque(maxlen=average_over)

    def tick(self) -> float:
        """Record a frame and return the elapsed time at that frame."""
        stamp = self._now()
        self._timestamps.append(stamp)
        return stamp - self._start

    @property
    def elapsed(self) -> float:
        return self._now() - self._start

    @property
    def fps(self) -> float:
        if len(self._timestamps) < 2:
            return 0.0
        span = self._timestamps[-1] - self._timestamps[0]
        if span <= 0:
            return 0.0
        return (len(self._timestamps) - 1) / span
