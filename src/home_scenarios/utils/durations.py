"""
Parsing of informal duration strings.

Two flavours are supported:
- Schedules ("2 seconds", "minute", "5 min") become a ScheduleDescriptor,
  which maps to a cron-style periodic expression.
- Windows ("500", "500 ms", "1 minute", "20hours") become a length of time,
  used for debounce windows and variable expiry.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Union

from home_scenarios.core.errors import ScheduleParseError

SCHEDULE_PATTERN = re.compile(
    r"^(\d+)?\s*(second|minute|hour|sec|min|hr)?s?$",
    re.IGNORECASE,
)

WINDOW_PATTERN = re.compile(
    r"^(\d+)?\s*(millisecond|second|minute|hour|ms|sec|min|hr)?s?$",
    re.IGNORECASE,
)

# Canonical unit -> milliseconds
UNIT_MS = {
    "ms": 1,
    "second": 1000,
    "minute": 60 * 1000,
    "hour": 60 * 60 * 1000,
}

UNIT_ALIASES = {
    "ms": "ms",
    "millisecond": "ms",
    "sec": "second",
    "second": "second",
    "min": "minute",
    "minute": "minute",
    "hr": "hour",
    "hour": "hour",
}

DurationLike = Union[str, int, float, timedelta]


@dataclass(frozen=True)
class ScheduleDescriptor:
    """
    A periodic schedule parsed from a duration string.

    Fires on wall-clock boundaries like its cron expression: "every 2
    seconds" fires when the second of the minute is divisible by 2, "every 5
    minutes" at second 0 of minutes divisible by 5, "every 3 hours" at
    minute 0 of hours divisible by 3.
    """

    interval: int
    unit: str  # "second", "minute" or "hour"

    @property
    def cron_expression(self) -> str:
        """Six-field cron expression (with seconds) for this schedule."""
        if self.unit == "second":
            return f"*/{self.interval} * * * * *"
        if self.unit == "minute":
            return f"0 */{self.interval} * * * *"
        return f"0 0 */{self.interval} * * *"

    def next_fire_after(self, dt: datetime) -> datetime:
        """
        Get the first boundary strictly after dt.

        Args:
            dt: Reference time

        Returns:
            Next time this schedule fires
        """
        if self.unit == "second":
            step = timedelta(seconds=1)
            candidate = dt.replace(microsecond=0) + step
            while candidate.second % self.interval:
                candidate += step
        elif self.unit == "minute":
            step = timedelta(minutes=1)
            candidate = dt.replace(second=0, microsecond=0) + step
            while candidate.minute % self.interval:
                candidate += step
        else:
            step = timedelta(hours=1)
            candidate = dt.replace(minute=0, second=0, microsecond=0) + step
            while candidate.hour % self.interval:
                candidate += step
        return candidate

    def __str__(self) -> str:
        plural = "s" if self.interval != 1 else ""
        return f"every {self.interval} {self.unit}{plural}"


def parse_schedule(text: str) -> ScheduleDescriptor:
    """
    Parse a duration string into a periodic schedule.

    Args:
        text: e.g. "2 seconds", "minute", "1 hour", "10" (seconds)

    Returns:
        The parsed ScheduleDescriptor

    Raises:
        ScheduleParseError: If the string is empty, malformed or zero
    """
    if not isinstance(text, str) or not text.strip():
        raise ScheduleParseError(f"Failed to parse schedule for {text!r}")

    match = SCHEDULE_PATTERN.match(text.strip())
    if not match:
        raise ScheduleParseError(f"Failed to parse schedule for {text!r}")

    interval = int(match.group(1)) if match.group(1) else 1
    unit = UNIT_ALIASES[match.group(2).lower()] if match.group(2) else "second"

    if interval < 1:
        raise ScheduleParseError(f"Schedule interval must be at least 1: {text!r}")

    return ScheduleDescriptor(interval=interval, unit=unit)


def to_milliseconds(value: DurationLike, default_unit: str = "ms") -> int:
    """
    Convert a duration to whole milliseconds.

    Args:
        value: Milliseconds as a number, a timedelta, or a string such as
            "500", "500 ms", "1 min", "20hours"
        default_unit: Unit applied to strings without one

    Returns:
        Duration in milliseconds

    Raises:
        ScheduleParseError: If the string is malformed or the value negative
    """
    if isinstance(value, bool):
        raise ScheduleParseError(f"Invalid duration: {value!r}")

    if isinstance(value, timedelta):
        ms = int(value.total_seconds() * 1000)
    elif isinstance(value, (int, float)):
        ms = int(value)
    elif isinstance(value, str) and value.strip():
        match = WINDOW_PATTERN.match(value.strip())
        if not match:
            raise ScheduleParseError(f"Invalid duration format: {value!r}")
        amount = int(match.group(1)) if match.group(1) else 1
        unit = UNIT_ALIASES[match.group(2).lower()] if match.group(2) else default_unit
        ms = amount * UNIT_MS[unit]
    else:
        raise ScheduleParseError(f"Invalid duration: {value!r}")

    if ms < 0:
        raise ScheduleParseError(f"Duration cannot be negative: {value!r}")
    return ms


def to_timedelta(value: DurationLike) -> timedelta:
    """
    Convert a duration to a timedelta.

    Bare numbers and unit-less strings are seconds.
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if value < 0:
            raise ScheduleParseError(f"Duration cannot be negative: {value!r}")
        return timedelta(seconds=value)
    return timedelta(milliseconds=to_milliseconds(value, default_unit="second"))
