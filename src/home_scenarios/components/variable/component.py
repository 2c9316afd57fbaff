"""
VariableComponent - scenarios driven by variable values.

    runtime.scenario("Mood lighting")
        .when()
            .variable("light").changes()
        .constraint()
            .variable("light").is_("purple")
            .then(go_purple)
        .else_()
            .then(go_white)
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List

from home_scenarios.components.base import Component, Predicate
from home_scenarios.core.vocabulary import Vocabulary

from .store import VARIABLE_TOPIC, VariableChange, VariableStore

if TYPE_CHECKING:
    from home_scenarios.core.scenario import Scenario

logger = logging.getLogger(__name__)


class VariableComponent(Component):
    """
    Owns the runtime's VariableStore.

    Trigger words:
    - variable(name).is_(value): assert when set to value
    - variable(name).changes() / updated(): assert with the new value on
      every change, including expiry

    Constraint words:
    - variable(name).is_(value) / is_not(value)
    """

    def __init__(self) -> None:
        super().__init__()
        self._store: VariableStore | None = None

    @property
    def id(self) -> str:
        return "variable"

    @property
    def store(self) -> VariableStore:
        if self._store is None:
            raise RuntimeError("VariableComponent is not attached")
        return self._store

    def on_attach(self) -> None:
        self._store = VariableStore(self.runtime.bus, self.runtime.scheduler)

    # Store passthrough

    def set(self, name: str, value: Any, ttl: Any = None) -> None:
        self.store.set(name, value, ttl)

    def get(self, name: str, default: Any = None) -> Any:
        return self.store.get(name, default)

    def remove(self, name: str) -> bool:
        return self.store.remove(name)

    # Vocabulary

    def triggers(self, scenario: "Scenario") -> Dict[str, Any]:
        def variable(name: str) -> Vocabulary:
            def is_(value: Any) -> Vocabulary:
                def handler(change: VariableChange) -> None:
                    if change.name == name and change.value == value:
                        scenario.assert_()

                self.runtime.bus.on(VARIABLE_TOPIC, handler)
                return scenario.triggers

            def changes() -> Vocabulary:
                def handler(change: VariableChange) -> None:
                    if change.name == name:
                        scenario.assert_(change.value)

                self.runtime.bus.on(VARIABLE_TOPIC, handler)
                return scenario.triggers

            return Vocabulary("variable trigger", is_=is_, changes=changes, updated=changes)

        return {"variable": variable}

    def constraints(self, scenario: "Scenario", constraints: List[Predicate]) -> Dict[str, Any]:
        def variable(name: str) -> Vocabulary:
            def is_(value: Any) -> Vocabulary:
                return self.constrain(scenario, constraints, lambda: self.get(name) == value)

            def is_not(value: Any) -> Vocabulary:
                return self.constrain(scenario, constraints, lambda: self.get(name) != value)

            return Vocabulary("variable constraint", is_=is_, is_not=is_not)

        return {"variable": variable}
