"""
Time provider abstraction

Lifecycle checks (policy expiry, review dates, override activity) compare
against "now". Injecting the clock keeps every one of those checks
reproducible in tests while production code reads the system clock.
"""

from datetime import datetime, timedelta, timezone
from typing import Protocol


class TimeProvider(Protocol):
    """Protocol for time providers"""

    def now(self) -> datetime:
        """Return current UTC datetime"""
        ...


class RealTimeProvider:
    """Production time provider using system clock"""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class ManualTimeProvider:
    """
    Controllable clock for tests and what-if inspection

    Time only moves when told to, so "does this policy expire?" questions
    have exactly one answer.
    """

    def __init__(self, initial_time: datetime | None = None) -> None:
        """
        Args:
            initial_time: Starting time (defaults to Unix epoch)
        """
        self._current_time = initial_time or datetime(1970, 1, 1, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._current_time

    def set_time(self, dt: datetime) -> None:
        """Set current time to specific value"""
        self._current_time = dt

    def advance_seconds(self, seconds: int) -> None:
        self._current_time += timedelta(seconds=seconds)

    def advance_days(self, days: int) -> None:
        self._current_time += timedelta(days=days)


def days_after(moment: datetime, days: int) -> datetime:
    """Return the instant exactly `days` whole days after `moment`"""
    return moment + timedelta(days=days)


default_time_provider: TimeProvider = RealTimeProvider()
