"""
Base classes and protocols for home-scenarios components.

Components are plug-ins that extend every scenario's vocabulary.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional

if TYPE_CHECKING:
    from home_scenarios.core.runtime import Runtime
    from home_scenarios.core.scenario import Scenario
    from home_scenarios.core.vocabulary import Vocabulary

Predicate = Callable[[], Any]


class Component(ABC):
    """
    Base class for components.

    A component:
    - Is attached to the Runtime once, in registration order
    - May contribute trigger words via triggers(scenario)
    - May contribute constraint words via constraints(scenario, constraints)
    - Maintains its own runtime state (devices, variables, tick jobs)

    Trigger factories register a stimulus that calls scenario.assert_() and
    return scenario.triggers. Constraint factories append one predicate to
    the accumulator they were built with and return
    scenario.constraint(constraints); use constrain() for that.
    """

    def __init__(self) -> None:
        self._runtime: Optional["Runtime"] = None
        self._config: Dict[str, Any] = {}

    @property
    @abstractmethod
    def id(self) -> str:
        """Unique identifier for this component."""
        pass

    @property
    def runtime(self) -> "Runtime":
        if self._runtime is None:
            raise RuntimeError(f"Component '{self.id}' is not attached to a runtime")
        return self._runtime

    @property
    def config(self) -> Dict[str, Any]:
        return self._config

    def attach(self, runtime: "Runtime") -> None:
        """
        Attach the component to the runtime.

        Capture references and register any bus subscriptions or scheduled
        jobs here. Override on_attach() rather than this method.

        Args:
            runtime: Runtime instance
        """
        self._runtime = runtime
        self._config = runtime.component_config(self.id)
        self.on_attach()

    def on_attach(self) -> None:
        """Hook called once the runtime and config are available."""
        pass

    def default_config(self) -> Dict[str, Any]:
        """
        Get default configuration for this component.

        Returns:
            Default configuration dict
        """
        return {"version": 1}

    def triggers(self, scenario: "Scenario") -> Optional[Mapping[str, Any]]:
        """
        Contribute trigger words for a scenario.

        Called once every time the scenario (re)builds its trigger vocabulary.

        Returns:
            Mapping of name to factory / nested Vocabulary, or None
        """
        return None

    def constraints(
        self,
        scenario: "Scenario",
        constraints: List[Predicate],
    ) -> Optional[Mapping[str, Any]]:
        """
        Contribute constraint words for one constraint group.

        Called once per scenario.constraint() call with that group's own
        accumulator.

        Returns:
            Mapping of name to factory / nested Vocabulary, or None
        """
        return None

    # Helpers for subclasses

    @staticmethod
    def constrain(
        scenario: "Scenario",
        constraints: List[Predicate],
        predicate: Predicate,
    ) -> "Vocabulary":
        """Append a predicate to the group and continue the chain."""
        constraints.append(predicate)
        return scenario.constraint(constraints)

    def emit(self, topic: str, *args: Any) -> None:
        """Emit on the runtime's Event Bus."""
        self.runtime.bus.emit(topic, *args)
