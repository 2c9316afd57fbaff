"""
Solar event times (sunrise, sunset, twilight, golden hour) for a location.

Times are computed with astral and returned as naive datetimes in the
location's timezone, the same frame as the runtime clock.
"""

import logging
from datetime import date, datetime, tzinfo
from typing import Callable, Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from astral import Depression, Observer, SunDirection
from astral import sun as astral_sun

from home_scenarios.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

SolarCalculator = Callable[[Observer, date, tzinfo], datetime]

# Event name -> calculator, in the order the events happen during a day
SOLAR_EVENTS: Dict[str, SolarCalculator] = {
    "night_end": lambda o, d, tz: astral_sun.dawn(
        o, date=d, depression=Depression.ASTRONOMICAL, tzinfo=tz
    ),
    "nautical_dawn": lambda o, d, tz: astral_sun.dawn(
        o, date=d, depression=Depression.NAUTICAL, tzinfo=tz
    ),
    "dawn": lambda o, d, tz: astral_sun.dawn(o, date=d, depression=Depression.CIVIL, tzinfo=tz),
    "sunrise": lambda o, d, tz: astral_sun.sunrise(o, date=d, tzinfo=tz),
    "golden_hour_end": lambda o, d, tz: astral_sun.golden_hour(
        o, date=d, direction=SunDirection.RISING, tzinfo=tz
    )[1],
    "golden_hour": lambda o, d, tz: astral_sun.golden_hour(
        o, date=d, direction=SunDirection.SETTING, tzinfo=tz
    )[0],
    "sunset": lambda o, d, tz: astral_sun.sunset(o, date=d, tzinfo=tz),
    "dusk": lambda o, d, tz: astral_sun.dusk(o, date=d, depression=Depression.CIVIL, tzinfo=tz),
    "nautical_dusk": lambda o, d, tz: astral_sun.dusk(
        o, date=d, depression=Depression.NAUTICAL, tzinfo=tz
    ),
    "night": lambda o, d, tz: astral_sun.dusk(
        o, date=d, depression=Depression.ASTRONOMICAL, tzinfo=tz
    ),
}

# "goldenHourEnd", "golden_hour_end" and "Golden Hour End" all resolve
_LOOKUP = {name.replace("_", ""): name for name in SOLAR_EVENTS}


def solar_event_name(value: str) -> Optional[str]:
    """
    Resolve a solar event name.

    Returns:
        The canonical snake_case name, or None if value is not a solar event
    """
    if not isinstance(value, str):
        return None
    key = value.replace("_", "").replace(" ", "").lower()
    return _LOOKUP.get(key)


class SolarLocation:
    """
    Where solar times are computed for.

    Args:
        latitude: Degrees, north positive
        longitude: Degrees, east positive
        timezone: IANA timezone name of the runtime clock

    Raises:
        ConfigurationError: If a coordinate is out of range or the
            timezone is unknown
    """

    def __init__(self, latitude: float, longitude: float, timezone: str) -> None:
        if not -90 <= latitude <= 90:
            raise ConfigurationError(f"Latitude {latitude} is out of range (-90..90)")
        if not -180 <= longitude <= 180:
            raise ConfigurationError(f"Longitude {longitude} is out of range (-180..180)")
        try:
            self.tz = ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigurationError(f"Unknown timezone {timezone!r}") from e

        self.latitude = latitude
        self.longitude = longitude
        self.timezone = timezone
        self.observer = Observer(latitude=latitude, longitude=longitude)

    def __repr__(self) -> str:
        return f"<SolarLocation {self.latitude}, {self.longitude} ({self.timezone})>"

    def times(self, day: date) -> Dict[str, datetime]:
        """
        Compute every solar event for a day.

        Events the sun never reaches on that day (polar day or night) are
        left out.

        Returns:
            Event name -> naive local datetime, in order of occurrence
        """
        result: Dict[str, datetime] = {}
        for name, calculate in SOLAR_EVENTS.items():
            try:
                result[name] = calculate(self.observer, day, self.tz).replace(tzinfo=None)
            except ValueError as e:
                logger.debug(f"No {name} on {day} at {self!r}: {e}")
        return result
