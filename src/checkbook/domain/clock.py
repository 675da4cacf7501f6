"""Clock abstraction for the current calendar day.

Dates are timezone-naive calendar days. The system clock uses server local
time; a fixed clock pins "today" for jobs, reruns and tests.
"""

from abc import ABC, abstractmethod
from datetime import date


class Clock(ABC):
    """Source of the current calendar date."""

    @abstractmethod
    def today(self) -> date:
        """Return today's date."""
        pass


class SystemClock(Clock):
    """Clock backed by the server's local date."""

    def today(self) -> date:
        return date.today()


class FixedClock(Clock):
    """Clock that always returns the same date."""

    def __init__(self, today: date):
        self._today = today

    def today(self) -> date:
        return self._today
