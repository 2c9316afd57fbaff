"""
DayComponent - day-of-week and date-range constraints.

Constraint words:
- day.is_("saturday"), day.is_(["mon", "wed"]), day.is_("weekday")
- day.between("1st December", "31st December")
"""

import logging
import re
from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from home_scenarios.components.base import Component, Predicate
from home_scenarios.core.errors import DayFormatError
from home_scenarios.core.vocabulary import Vocabulary

if TYPE_CHECKING:
    from home_scenarios.core.scenario import Scenario

logger = logging.getLogger(__name__)

DAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

DAY_ALIASES: Dict[str, Tuple[str, ...]] = {
    **{name: (name,) for name in DAY_NAMES},
    **{name[:3]: (name,) for name in DAY_NAMES},
    "thur": ("thursday",),
    "weekday": DAY_NAMES[:5],
    "weekend": DAY_NAMES[5:],
}

# Formats without a year recur every year
YEARLESS_FORMATS = ("%B %d", "%b %d", "%d %B", "%d %b")
DATED_FORMATS = (
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%B %d %Y",
    "%b %d %Y",
    "%d %B %Y",
    "%d %b %Y",
)

_ORDINAL = re.compile(r"(\d+)(st|nd|rd|th)\b", re.IGNORECASE)

DaySpec = Union[str, Iterable[str]]
# (month, day) for yearless dates, full date otherwise
ParsedDate = Union[Tuple[int, int], date]


def parse_days(spec: DaySpec) -> FrozenSet[str]:
    """
    Expand day names, abbreviations and aliases.

    Args:
        spec: A day name or a list of them ("mon", "Tuesday", "weekend")

    Returns:
        Set of lowercase full day names

    Raises:
        DayFormatError: If a name is not recognized
    """
    items = [spec] if isinstance(spec, str) else list(spec)
    if not items:
        raise DayFormatError("At least one day is required")

    days = set()
    for item in items:
        if not isinstance(item, str) or item.strip().lower() not in DAY_ALIASES:
            raise DayFormatError(f"Could not parse day {item!r}")
        days.update(DAY_ALIASES[item.strip().lower()])
    return frozenset(days)


def day_name(dt: Union[date, datetime]) -> str:
    return DAY_NAMES[dt.weekday()]


def parse_date(text: str) -> ParsedDate:
    """
    Parse a date such as "1st December", "Dec 1", "2023-12-01".

    Returns:
        (month, day) for yearless dates, a date otherwise

    Raises:
        DayFormatError: If no known format matches
    """
    if not isinstance(text, str):
        raise DayFormatError(f"Could not parse date {text!r}")

    cleaned = _ORDINAL.sub(r"\1", " ".join(text.replace(",", " ").split()))

    for fmt in YEARLESS_FORMATS:
        try:
            # Leap year so "29 February" parses
            parsed = datetime.strptime(f"{cleaned} 2000", f"{fmt} %Y")
        except ValueError:
            continue
        return (parsed.month, parsed.day)

    for fmt in DATED_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date()
        except ValueError:
            continue

    raise DayFormatError(f"Could not parse date {text!r}")


def is_date_between(today: date, start: ParsedDate, end: ParsedDate) -> bool:
    """
    Check whether today falls in the inclusive range [start, end].

    Yearless ranges recur every year and wrap past 31 December when start
    is later than end. A yearless bound paired with a dated one takes the
    dated bound's year.
    """
    if isinstance(start, tuple) and isinstance(end, tuple):
        current = (today.month, today.day)
        if start <= end:
            return start <= current <= end
        return current >= start or current <= end

    start_date, end_date = anchor_date_range(start, end)
    return start_date <= today <= end_date  # type: ignore[operator]


def anchor_date_range(start: ParsedDate, end: ParsedDate) -> Tuple[ParsedDate, ParsedDate]:
    """
    Pin a yearless bound to the year of the dated bound it is paired with.

    Ranges with two yearless or two dated bounds come back unchanged.

    Raises:
        DayFormatError: If the yearless bound does not exist in that year
            (29 February outside a leap year)
    """
    if isinstance(start, tuple) == isinstance(end, tuple):
        return start, end
    try:
        return _anchor(start, end), _anchor(end, start)
    except ValueError:
        raise DayFormatError(
            f"Date range {start!r} to {end!r} names a day that does not exist that year"
        ) from None


def _anchor(value: ParsedDate, other: ParsedDate) -> date:
    if isinstance(value, date):
        return value
    month, day = value
    return date(other.year, month, day)  # type: ignore[union-attr]


class DayComponent(Component):
    """Day-of-week and date-range constraints against the runtime clock."""

    @property
    def id(self) -> str:
        return "day"

    def today(self) -> date:
        return self.runtime.clock.now().date()

    def is_(self, spec: DaySpec, days: Optional[FrozenSet[str]] = None) -> bool:
        """Check whether today is one of the given days."""
        if days is None:
            days = parse_days(spec)
        return day_name(self.today()) in days

    def is_between(self, start: ParsedDate, end: ParsedDate) -> bool:
        return is_date_between(self.today(), start, end)

    def constraints(self, scenario: "Scenario", constraints: List[Predicate]) -> Dict[str, Any]:
        def is_(spec: DaySpec) -> Vocabulary:
            days = parse_days(spec)
            return self.constrain(scenario, constraints, lambda: self.is_(spec, days))

        def between(start: str, end: str) -> Vocabulary:
            parsed_start, parsed_end = anchor_date_range(parse_date(start), parse_date(end))
            return self.constrain(
                scenario,
                constraints,
                lambda: self.is_between(parsed_start, parsed_end),
            )

        return {"day": Vocabulary("day constraint", is_=is_, between=between)}
