"""
Variable store - named values with optional expiry.

Every change is published on the "variable" topic as a VariableChange, so
scenarios can react to it.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from home_scenarios.core.bus import EventBus
from home_scenarios.core.scheduler import Job, Scheduler
from home_scenarios.utils.durations import DurationLike, to_timedelta

logger = logging.getLogger(__name__)

VARIABLE_TOPIC = "variable"
VARIABLE_REMOVE_TOPIC = "variable.remove"


@dataclass(frozen=True)
class VariableChange:
    """
    Payload published on every variable change.

    Attributes:
        name: Variable name
        value: New value (None once expired or removed)
        previous: Value before the change
    """

    name: str
    value: Any
    previous: Any = None


@dataclass
class StoredVariable:
    """A stored value and its pending expiry job, if any."""

    value: Any
    expiry: Optional[Job] = None


class VariableStore:
    """
    In-memory variable store.

    Setting a name cancels any pending expiry for it (last write wins for
    both value and TTL). An expiring variable publishes a second change
    with value None when its timer fires.
    """

    def __init__(self, bus: EventBus, scheduler: Scheduler) -> None:
        self._bus = bus
        self._scheduler = scheduler
        self._variables: Dict[str, StoredVariable] = {}

    def set(self, name: str, value: Any, ttl: Optional[DurationLike] = None) -> None:
        """
        Store a value and publish the change.

        Args:
            name: Variable name
            value: New value
            ttl: Optional lifetime (seconds, timedelta or "10 minutes")

        Raises:
            ScheduleParseError: If ttl is malformed
        """
        lifetime = to_timedelta(ttl) if ttl is not None else None

        previous = self._variables.get(name)
        if previous and previous.expiry:
            previous.expiry.cancel()

        stored = StoredVariable(value=value)
        if lifetime is not None:
            stored.expiry = self._scheduler.call_later(
                lifetime,
                lambda: self._expire(name, stored),
                name=f"expire variable '{name}'",
            )
        self._variables[name] = stored

        logger.debug(f"Variable '{name}' set to {value!r}")
        self._bus.emit(
            VARIABLE_TOPIC,
            VariableChange(name, value, previous.value if previous else None),
        )

    def get(self, name: str, default: Any = None) -> Any:
        """
        Get the current value of a variable.

        Returns:
            The value, or default if unset or expired
        """
        stored = self._variables.get(name)
        if stored is None or stored.value is None:
            return default
        return stored.value

    def has(self, name: str) -> bool:
        return self.get(name) is not None

    def remove(self, name: str) -> bool:
        """
        Remove a variable entirely.

        Returns:
            True if the variable existed
        """
        stored = self._variables.pop(name, None)
        if stored is None:
            return False

        if stored.expiry:
            stored.expiry.cancel()
        logger.debug(f"Variable '{name}' removed")
        self._bus.emit(VARIABLE_REMOVE_TOPIC, VariableChange(name, None, stored.value))
        return True

    def names(self) -> List[str]:
        return [name for name, stored in self._variables.items() if stored.value is not None]

    def _expire(self, name: str, stored: StoredVariable) -> None:
        if self._variables.get(name) is not stored:
            return

        previous = stored.value
        stored.value = None
        stored.expiry = None
        logger.debug(f"Variable '{name}' expired")
        self._bus.emit(VARIABLE_TOPIC, VariableChange(name, None, previous))
