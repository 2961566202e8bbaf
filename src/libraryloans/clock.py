"""Date sources for lending rules.

Due-date checks and renewals ask a clock for today's date instead of calling
``date.today()`` directly, so tests can pin the calendar.
"""

from datetime import date, timedelta
from typing import Protocol


class Clock(Protocol):
    """Anything that can tell today's date."""

    def today(self) -> date: ...


class SystemClock:
    """Clock backed by the local system date."""

    def today(self) -> date:
        return date.today()


class FixedClock:
    """Clock pinned to a given date. Used for testing."""

    def __init__(self, current: date):
        self.current = current

    def today(self) -> date:
        return self.current

    def advance(self, days: int = 1) -> date:
        """Move the clock forward and return the new date."""
        self.current = self.current + timedelta(days=days)
        return self.current
