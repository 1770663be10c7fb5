"""Clock abstraction used by the reminder engine."""

from abc import ABC, abstractmethod
from datetime import datetime
from threading import Event


class Clock(ABC):
    """Source of the current time plus an interruptible wait."""

    @abstractmethod
    def now(self) -> datetime:
        pass

    @abstractmethod
    def wait_until(self, target: datetime, cancel_event: Event) -> bool:
        """Sleep toward ``target``; return True if woken by cancellation.

        May return before ``target``; callers re-check ``now()`` on every wake.
        """
        pass


class SystemClock(Clock):
    """Wall clock; sleeps in bounded slices so clock jumps are noticed."""

    def __init__(self, max_sleep_seconds: float = 30.0):
        self.max_sleep_seconds = max_sleep_seconds

    def now(self) -> datetime:
        return datetime.now()

    def wait_until(self, target: datetime, cancel_event: Event) -> bool:
        seconds = max(0.0, (target - self.now()).total_seconds())
        return cancel_event.wait(min(seconds, self.max_sleep_seconds))
