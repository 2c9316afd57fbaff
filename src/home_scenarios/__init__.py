"""
home-scenarios: a fluent rule-automation runtime for the home.

Scenarios are declared once and stay armed:

    runtime = build_runtime()
    runtime.scenario("Evening lights")
        .when()
            .time.is_("18:30")
        .constraint()
            .day.is_("weekday")
            .then(lights_on)

This library provides:
- The Scenario engine (when / constraint / then / else)
- Pluggable components that extend the scenario vocabulary
- Event Bus and variable store
- Time-agnostic scheduling
- Deferred assertions (Expect)
"""

import logging
from typing import Optional

from home_scenarios.core.bus import EventBus
from home_scenarios.core.clock import Clock, ManualClock, SystemClock
from home_scenarios.core.config import RuntimeConfig
from home_scenarios.core.errors import (
    ComponentNotFoundError,
    ConfigurationError,
    DayFormatError,
    DeviceNotFoundError,
    DuplicateComponentError,
    DuplicateScenarioError,
    HomeScenariosError,
    ScenarioOptionError,
    ScheduleParseError,
    TimeFormatError,
    VocabularyConflictError,
)
from home_scenarios.core.runtime import Runtime
from home_scenarios.core.scenario import Scenario
from home_scenarios.core.scheduler import Scheduler
from home_scenarios.utils.expect import UNDEFINED, Expect, expect

__version__ = "0.1.0"

logger = logging.getLogger(__name__)


def build_runtime(
    config: Optional[RuntimeConfig] = None,
    clock: Optional[Clock] = None,
) -> Runtime:
    """
    Build a runtime with every built-in component attached.

    Components are attached in this order: event, variable, time, day,
    expect, device.

    Args:
        config: Runtime configuration (defaults to RuntimeConfig())
        clock: Time source (defaults to SystemClock)

    Returns:
        The ready Runtime
    """
    from home_scenarios.components.device import DeviceComponent
    from home_scenarios.components.event import EventComponent
    from home_scenarios.components.expect import ExpectComponent
    from home_scenarios.components.timing import DayComponent, TimeComponent
    from home_scenarios.components.variable import VariableComponent

    runtime = Runtime(config=config, clock=clock)
    for component in (
        EventComponent(),
        VariableComponent(),
        TimeComponent(),
        DayComponent(),
        ExpectComponent(),
        DeviceComponent(),
    ):
        runtime.add_component(component)

    logger.info(f"Runtime ready with {len(runtime.components())} components")
    return runtime


__all__ = [
    "build_runtime",
    "Runtime",
    "RuntimeConfig",
    "Scenario",
    "EventBus",
    "Scheduler",
    "Clock",
    "SystemClock",
    "ManualClock",
    "Expect",
    "expect",
    "UNDEFINED",
    "HomeScenariosError",
    "ConfigurationError",
    "DuplicateScenarioError",
    "ScenarioOptionError",
    "DuplicateComponentError",
    "VocabularyConflictError",
    "ScheduleParseError",
    "TimeFormatError",
    "DayFormatError",
    "ComponentNotFoundError",
    "DeviceNotFoundError",
]
