# MIT License
# Copyright (c) 2025 Hashborn

"""
Time sources for the pool.

The pool reads the clock once per operation, so time never advances inside
an operation. Both clocks are monotonically non-decreasing.
"""

import time
import logging

logger = logging.getLogger(__name__)


class Clock:
    def now(self) -> int:
        raise NotImplementedError


class SystemClock(Clock):
    """Wall-clock seconds, clamped so it never moves backwards."""

    def __init__(self):
        self._last = 0

    def now(self) -> int:
        current = int(time.time())
        if current < self._last:
            logger.warning(f"System clock moved backwards by {self._last - current}s, holding at {self._last}")
            return self._last
        self._last = current
        return current


class ManualClock(Clock):
    """Clock driven explicitly by tests and the scenario runner."""

    def __init__(self, start: int = 0):
        if start < 0:
            raise ValueError(f"Clock cannot start before 0: {start}")
        self._now = start

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError(f"Cannot advance clock by negative amount: {seconds}")
        self._now += seconds
        return self._now

    def set(self, timestamp: int) -> int:
        if timestamp < self._now:
            raise ValueError(f"Cannot move clock backwards: {timestamp} < {self._now}")
        self._now = timestamp
        return self._now
