"""
Timing components.

TimeComponent publishes wall-clock ticks and solar events and provides
time-of-day triggers and constraints. DayComponent provides day-of-week and
date-range constraints.
"""

from .days import DAY_ALIASES, DAY_NAMES, DayComponent, is_date_between, parse_date, parse_days
from .solar import SOLAR_EVENTS, SolarLocation, solar_event_name
from .time_of_day import (
    HOUR_TOPIC,
    MINUTE_TOPIC,
    SECOND_TOPIC,
    SOLAR_TOPIC,
    TIME_TOPIC,
    TimeComponent,
    is_time_between,
    validate_time_of_day,
)

__all__ = [
    "TimeComponent",
    "DayComponent",
    "SolarLocation",
    "SECOND_TOPIC",
    "MINUTE_TOPIC",
    "HOUR_TOPIC",
    "TIME_TOPIC",
    "SOLAR_TOPIC",
    "SOLAR_EVENTS",
    "DAY_NAMES",
    "DAY_ALIASES",
    "is_time_between",
    "validate_time_of_day",
    "solar_event_name",
    "is_date_between",
    "parse_date",
    "parse_days",
]
