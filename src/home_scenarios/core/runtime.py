"""
Runtime context for components and scenarios.

The Runtime owns the component registry, the scenario registry, the Event
Bus, the clock and the scheduler. One is built at process start (see
home_scenarios.build_runtime) and passed to every component and scenario.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from home_scenarios.core.bus import EventBus
from home_scenarios.core.clock import Clock, SystemClock
from home_scenarios.core.config import RuntimeConfig
from home_scenarios.core.errors import (
    ComponentNotFoundError,
    DuplicateComponentError,
    DuplicateScenarioError,
    ScenarioOptionError,
)
from home_scenarios.core.scenario import Scenario
from home_scenarios.core.scheduler import Scheduler

if TYPE_CHECKING:
    from home_scenarios.components.base import Component
    from home_scenarios.components.variable import VariableStore

logger = logging.getLogger(__name__)

SCENARIO_OPTIONS = frozenset({"suppress_for", "only"})


class Runtime:
    """
    Registry and wiring for one automation process.

    Responsibilities:
    - Register and attach components (in order)
    - Create scenarios with unique descriptions
    - Derive test mode across all scenarios
    - Own the Event Bus, clock and scheduler

    Does NOT implement any trigger or constraint itself.
    """

    def __init__(
        self,
        config: Optional[RuntimeConfig] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        """
        Initialize an empty runtime.

        Args:
            config: Runtime configuration (defaults to RuntimeConfig())
            clock: Time source (defaults to SystemClock)
        """
        self.config = config or RuntimeConfig()
        self.clock = clock or SystemClock()
        self.bus = EventBus()
        self.scheduler = Scheduler(self.clock)

        self._components: Dict[str, "Component"] = {}
        self._scenarios: Dict[str, Scenario] = {}
        self._in_test_mode = False

    # =========================================================================
    # Components
    # =========================================================================

    def add_component(self, component: "Component") -> "Component":
        """
        Register and attach a component.

        Args:
            component: The component instance

        Returns:
            The attached component

        Raises:
            DuplicateComponentError: If the id is already registered
        """
        if component.id in self._components:
            raise DuplicateComponentError(f"Component '{component.id}' already registered")

        self._components[component.id] = component
        component.attach(self)
        logger.info(f"Component '{component.id}' attached")
        return component

    def component(self, component_id: str) -> "Component":
        """
        Get a component by id.

        Raises:
            ComponentNotFoundError: If no component has that id
        """
        try:
            return self._components[component_id]
        except KeyError:
            raise ComponentNotFoundError(f"Component '{component_id}' not found") from None

    def has_component(self, component_id: str) -> bool:
        return component_id in self._components

    def components(self) -> List["Component"]:
        """Get all components in registration order."""
        return list(self._components.values())

    def component_config(self, component_id: str) -> Dict[str, Any]:
        """
        Get the effective config for a component.

        User overrides from RuntimeConfig.components are layered over the
        component's default_config().
        """
        component = self._components.get(component_id)
        config = component.default_config() if component else {}
        config.update(self.config.component_config(component_id))
        return config

    @property
    def variables(self) -> "VariableStore":
        """Shortcut to the variable component's store."""
        return self.component("variable").store  # type: ignore[attr-defined]

    # =========================================================================
    # Scenarios
    # =========================================================================

    def scenario(self, description: str, **options: Any) -> Scenario:
        """
        Create a scenario.

        Args:
            description: Unique human-readable description
            **options: suppress_for (ms or duration string), only (bool)

        Returns:
            The new Scenario

        Raises:
            ScenarioOptionError: If the description is empty or an option is
                not recognized
            DuplicateScenarioError: If the description already exists
        """
        if not description:
            raise ScenarioOptionError("Scenario description must be defined")

        unknown = set(options) - SCENARIO_OPTIONS
        if unknown:
            raise ScenarioOptionError(
                f"Unknown scenario option(s) {sorted(unknown)} for '{description}' "
                f"(allowed: {sorted(SCENARIO_OPTIONS)})"
            )

        if description in self._scenarios:
            raise DuplicateScenarioError(f"Scenario with description '{description}' already exists")

        scenario = Scenario(self, description, **options)
        self._scenarios[description] = scenario
        logger.info(f"Scenario '{description}' created")

        self.update_test_mode(scenario if scenario.test_mode else None)
        return scenario

    def only(self, description: str, **options: Any) -> Scenario:
        """Create a scenario in test mode (all others stop running)."""
        options["only"] = True
        return self.scenario(description, **options)

    def get_scenario(self, description: str) -> Optional[Scenario]:
        return self._scenarios.get(description)

    def scenarios(self) -> List[Scenario]:
        """Get all scenarios in creation order."""
        return list(self._scenarios.values())

    @property
    def in_test_mode(self) -> bool:
        """True while at least one scenario is in test mode."""
        return self._in_test_mode

    def update_test_mode(self, scenario: Optional[Scenario] = None) -> None:
        """
        Re-derive test mode across the registry.

        Each scenario's runnable flag follows from this: while any scenario
        is in test mode, only test-mode scenarios are runnable.

        Args:
            scenario: The scenario whose test mode just changed (for logging)
        """
        was_in_test_mode = self._in_test_mode
        self._in_test_mode = any(s.test_mode for s in self._scenarios.values())

        if scenario is not None:
            state = "on" if scenario.test_mode else "off"
            logger.debug(f"Test mode '{state}' for '{scenario.description}'")
        if was_in_test_mode != self._in_test_mode:
            logger.info(f"Runtime test mode {'enabled' if self._in_test_mode else 'disabled'}")

    def reset(self) -> None:
        """
        Forget every scenario.

        Forgotten scenarios are retired: their bus subscriptions stay in place
        but never run again, and their periodic trigger jobs are cancelled.
        Components are left alone.
        """
        for scenario in self._scenarios.values():
            scenario.retired = True
        for job in self.scheduler.jobs():
            if any(job.callback == s.assert_ for s in self._scenarios.values()):
                job.cancel()
        self._scenarios.clear()
        self._in_test_mode = False
        logger.debug("Scenario registry cleared")
