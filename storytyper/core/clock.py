"""Millisecond time source used by the engine."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod


class Clock(ABC):
    @abstractmethod
    def now(self) -> float:
        """Current time in milliseconds. Only differences between readings are meaningful."""


class MonotonicClock(Clock):
    def now(self) -> float:
        return time.monotonic() * 1000.0
