"""
Clock abstraction for the runtime.

Everything that needs "now" (schedules, debounce windows, time and day
constraints) asks the runtime clock, so tests can drive time explicitly.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Optional


class Clock(ABC):
    """Source of the current wall-clock time."""

    @abstractmethod
    def now(self) -> datetime:
        """
        Get the current time.

        Returns:
            Current local datetime
        """
        pass


class SystemClock(Clock):
    """Clock backed by the host's local time."""

    def now(self) -> datetime:
        return datetime.now()


class ManualClock(Clock):
    """
    Clock for testing.

    Time only moves when set() or advance() is called.
    """

    def __init__(self, start: Optional[datetime] = None) -> None:
        self._now = start or datetime(2025, 1, 15, 12, 0, 0)

    def set(self, dt: datetime) -> None:
        """Set current time for testing."""
        self._now = dt

    def advance(self, **kwargs: float) -> datetime:
        """
        Move time forward.

        Args:
            **kwargs: timedelta keyword arguments (seconds=, minutes=, ...)

        Returns:
            The new current time
        """
        self._now = self._now + timedelta(**kwargs)
        return self._now

    def now(self) -> datetime:
        return self._now
