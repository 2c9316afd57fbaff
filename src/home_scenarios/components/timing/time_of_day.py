"""
TimeComponent - wall-clock ticks, time triggers and time-window constraints.

On attach the component schedules three periodic jobs that publish
wall-clock-aligned ticks on the Event Bus:

    "second"  every second
    "minute"  every minute, followed by "time" carrying the "HH:MM" string
    "hour"    every hour

It also schedules today's solar events for the configured location and
recalculates them every midnight. Each event publishes "time.<event>"
(e.g. "time.sunrise") followed by "solar" carrying the event name.

Trigger words:
- time.is_("07:30"): assert when the minute tick reads 07:30
- time.is_("sunset"): assert when the solar event happens
- time.every("2 seconds"): assert on a periodic schedule

Constraint words:
- time.between("22:00", "23:30"): inclusive window (wraps midnight when
  start > end)
- time.is_after("18:00") / time.is_before("06:00"): inclusive of the minute
"""

import logging
import re
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from home_scenarios.components.base import Component, Predicate
from home_scenarios.core.errors import TimeFormatError
from home_scenarios.core.scheduler import Job
from home_scenarios.core.vocabulary import Vocabulary
from home_scenarios.utils.durations import ScheduleDescriptor, parse_schedule

from .solar import SolarLocation, solar_event_name

if TYPE_CHECKING:
    from home_scenarios.core.scenario import Scenario

logger = logging.getLogger(__name__)

SECOND_TOPIC = "second"
MINUTE_TOPIC = "minute"
HOUR_TOPIC = "hour"
TIME_TOPIC = "time"
SOLAR_TOPIC = "solar"

# How close to a solar event is_solar_time() still counts as "now"
SOLAR_TOLERANCE = timedelta(minutes=1)

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def validate_time_of_day(value: str) -> str:
    """
    Check a zero-padded 24-hour "HH:MM" string.

    Returns:
        The value unchanged

    Raises:
        TimeFormatError: If the value is not HH:MM
    """
    if not isinstance(value, str) or not TIME_PATTERN.match(value):
        raise TimeFormatError(f"Time {value!r} is not in the correct format of HH:MM")
    return value


def format_time_of_day(dt: datetime) -> str:
    return dt.strftime("%H:%M")


def is_time_between(current: str, start: str, end: str) -> bool:
    """
    Check whether current falls in the inclusive window [start, end].

    Zero-padded HH:MM strings compare correctly as plain strings. When
    start is later than end the window wraps past midnight.
    """
    validate_time_of_day(start)
    validate_time_of_day(end)

    if start <= end:
        return start <= current <= end
    return current >= start or current <= end


class TimeComponent(Component):
    """
    Time-of-day triggers, constraints and wall-clock ticks.

    Config:
        emit_ticks: publish second/minute/hour ticks (default from
            RuntimeConfig.emit_ticks)
        solar: schedule solar events (only when ticks are emitted)
        latitude, longitude, timezone: location used for solar events
    """

    def __init__(self) -> None:
        super().__init__()
        self._location: Optional[SolarLocation] = None
        self._solar_enabled = False
        self._solar_jobs: List[Job] = []

    @property
    def id(self) -> str:
        return "time"

    def default_config(self) -> Dict[str, Any]:
        return {
            "version": 1,
            "emit_ticks": True,
            "solar": True,
            "latitude": 13.7563,
            "longitude": 100.5018,
            "timezone": "Asia/Bangkok",
        }

    def on_attach(self) -> None:
        self._location = SolarLocation(
            self.config["latitude"], self.config["longitude"], self.config["timezone"]
        )

        emit_ticks = self.config.get("emit_ticks", True) and self.runtime.config.emit_ticks
        if not emit_ticks:
            logger.info("Wall-clock ticks disabled")
            return

        scheduler = self.runtime.scheduler
        scheduler.every(ScheduleDescriptor(1, "second"), self._on_second, name="tick.second")
        scheduler.every(ScheduleDescriptor(1, "minute"), self._on_minute, name="tick.minute")
        scheduler.every(ScheduleDescriptor(1, "hour"), self._on_hour, name="tick.hour")

        if self.config.get("solar", True):
            self._solar_enabled = True
            self._schedule_solar_events()
            scheduler.every(
                ScheduleDescriptor(24, "hour"), self._schedule_solar_events, name="solar.reschedule"
            )

    def now(self) -> datetime:
        return self.runtime.clock.now()

    def current_time(self) -> str:
        """Current wall-clock time as "HH:MM"."""
        return format_time_of_day(self.now())

    # Ticks

    def _on_second(self) -> None:
        self.emit(SECOND_TOPIC)

    def _on_minute(self) -> None:
        self.emit(MINUTE_TOPIC)
        self.emit(TIME_TOPIC, self.current_time())

    def _on_hour(self) -> None:
        self.emit(HOUR_TOPIC)

    # Solar events

    @property
    def location(self) -> SolarLocation:
        if self._location is None:
            raise RuntimeError("Time component is not attached to a runtime")
        return self._location

    def set_location(self, latitude: float, longitude: float, timezone: Optional[str] = None) -> None:
        """
        Move the runtime to another location and recompute today's solar events.

        Args:
            latitude: Degrees, north positive
            longitude: Degrees, east positive
            timezone: IANA timezone name (keeps the current one if omitted)

        Raises:
            ConfigurationError: If a coordinate or the timezone is invalid
        """
        self._location = SolarLocation(latitude, longitude, timezone or self.location.timezone)
        logger.info(f"Location set to {self._location!r}")
        if self._solar_enabled:
            self._schedule_solar_events()

    def solar_times(self, day: Optional[date] = None) -> Dict[str, datetime]:
        """Solar event times for a day (today by default), as clock-local datetimes."""
        return self.location.times(day or self.now().date())

    def solar_time(self, event: str) -> Optional[datetime]:
        """
        Today's time of one solar event.

        Returns:
            The event time, or None if the sun does not reach it today

        Raises:
            TimeFormatError: If event is not a solar event name
        """
        return self.solar_times().get(self._solar_event(event))

    def is_solar_time(self, event: str) -> bool:
        """Check whether now is within a minute of today's solar event."""
        when = self.solar_time(event)
        if when is None:
            return False
        return abs(self.now() - when) <= SOLAR_TOLERANCE

    def _schedule_solar_events(self) -> None:
        for job in self._solar_jobs:
            job.cancel()

        now = self.now()
        scheduler = self.runtime.scheduler
        self._solar_jobs = [
            scheduler.call_at(when, self._solar_emitter(event), name=f"solar.{event}")
            for event, when in self.solar_times(now.date()).items()
            if when > now
        ]
        logger.debug(f"Scheduled {len(self._solar_jobs)} solar events for {now.date()}")

    def _solar_emitter(self, event: str):
        def fire() -> None:
            self.emit(f"{TIME_TOPIC}.{event}")
            self.emit(SOLAR_TOPIC, event)

        return fire

    @staticmethod
    def _solar_event(name: str) -> str:
        event = solar_event_name(name)
        if event is None:
            raise TimeFormatError(f"{name!r} is not a solar event")
        return event

    # Checks

    def is_between(self, start: str, end: str) -> bool:
        return is_time_between(self.current_time(), start, end)

    def is_after(self, target: str) -> bool:
        return self.current_time() >= validate_time_of_day(target)

    def is_before(self, target: str) -> bool:
        return self.current_time() <= validate_time_of_day(target)

    # Vocabulary

    def triggers(self, scenario: "Scenario") -> Dict[str, Any]:
        def is_(target: str) -> Vocabulary:
            event = solar_event_name(target)
            if event is not None:
                topic, expected = SOLAR_TOPIC, event
            else:
                try:
                    expected = validate_time_of_day(target)
                except TimeFormatError:
                    raise TimeFormatError(
                        f"Time {target!r} is neither HH:MM nor a solar event"
                    ) from None
                topic = TIME_TOPIC

            def handler(current: str) -> None:
                if current == expected:
                    scenario.assert_()

            self.runtime.bus.on(topic, handler)
            return scenario.triggers

        def every(target: str) -> Vocabulary:
            schedule = parse_schedule(target)
            self.runtime.scheduler.every(
                schedule,
                scenario.assert_,
                name=f"{scenario.description} ({schedule})",
            )
            return scenario.triggers

        return {"time": Vocabulary("time trigger", is_=is_, every=every)}

    def constraints(self, scenario: "Scenario", constraints: List[Predicate]) -> Dict[str, Any]:
        def between(start: str, end: str) -> Vocabulary:
            validate_time_of_day(start)
            validate_time_of_day(end)
            return self.constrain(scenario, constraints, lambda: self.is_between(start, end))

        def is_after(target: str) -> Vocabulary:
            validate_time_of_day(target)
            return self.constrain(scenario, constraints, lambda: self.is_after(target))

        def is_before(target: str) -> Vocabulary:
            validate_time_of_day(target)
            return self.constrain(scenario, constraints, lambda: self.is_before(target))

        return {
            "time": Vocabulary(
                "time constraint",
                between=between,
                is_after=is_after,
                is_before=is_before,
            )
        }
