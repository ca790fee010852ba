"""Clock sources used to measure elapsed time"""
import time
from abc import ABC, abstractmethod


class Clock(ABC):
    """Supplies the current instant in seconds"""

    @abstractmethod
    def now(self) -> float:
        ...


class SystemClock(Clock):
    """Reads the system's monotonic clock"""

    def now(self) -> float:
        return time.monotonic()


class ManualClock(Clock):
    """
    Clock that only moves when told to.

    Pass its sleep method as the engine's sleep function to make waits advance
    the clock instead of blocking.
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self.sleeps = []

    def now(self) -> float:
        return self._now

    def set(self, instant: float) -> None:
        self._now = instant

    def advance(self, seconds: float) -> float:
        self._now += seconds
        return self._now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.advance(seconds)
