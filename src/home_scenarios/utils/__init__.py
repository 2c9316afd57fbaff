"""Duration parsing and the deferred-assertion matcher."""

from home_scenarios.utils.durations import (
    ScheduleDescriptor,
    parse_schedule,
    to_milliseconds,
    to_timedelta,
)
from home_scenarios.utils.expect import UNDEFINED, Deferred, Expect, Immediate, expect

__all__ = [
    "ScheduleDescriptor",
    "parse_schedule",
    "to_milliseconds",
    "to_timedelta",
    "Expect",
    "Immediate",
    "Deferred",
    "UNDEFINED",
    "expect",
]
