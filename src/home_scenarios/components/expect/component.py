"""
ExpectComponent - arbitrary comparisons as constraints.

    runtime.scenario("Warm enough")
        .when()
            .time.every("1 minute")
        .constraint()
            .expect(lambda: sensor.temperature).gte(21)
            .then(open_window)

The value passed to expect() may be a zero-argument producer, which is
re-read every time the constraint is evaluated, or a plain value.
"""

from typing import TYPE_CHECKING, Any, Callable, Dict, List

from home_scenarios.components.base import Component, Predicate
from home_scenarios.core.vocabulary import Vocabulary
from home_scenarios.utils.expect import COMPARATORS, Deferred, Expect, Immediate

if TYPE_CHECKING:
    from home_scenarios.core.scenario import Scenario


class ExpectConstraint:
    """
    Constraint-side view of an Expect.

    Every comparator defined on Expect is available. Calling one appends the
    comparison to the constraint group and returns the constraint
    vocabulary so the chain can continue.
    """

    def __init__(
        self,
        component: "ExpectComponent",
        scenario: "Scenario",
        constraints: List[Predicate],
        expect: Expect,
    ) -> None:
        self._component = component
        self._scenario = scenario
        self._constraints = constraints
        self._expect = expect

    @property
    def not_(self) -> "ExpectConstraint":
        return ExpectConstraint(
            self._component, self._scenario, self._constraints, self._expect.not_
        )

    def __getattr__(self, name: str) -> Callable[..., Vocabulary]:
        if name not in COMPARATORS:
            raise AttributeError(
                f"expect has no comparator '{name}'. Available: {', '.join(sorted(COMPARATORS))}"
            )
        comparator = getattr(self._expect, name)

        def compare(*args: Any) -> Vocabulary:
            evaluator = comparator(*args)
            return self._component.constrain(self._scenario, self._constraints, evaluator)

        return compare

    def __dir__(self) -> List[str]:
        return sorted(COMPARATORS | {"not_"})


class ExpectComponent(Component):
    """Contributes the expect(value) constraint word."""

    @property
    def id(self) -> str:
        return "expect"

    def constraints(self, scenario: "Scenario", constraints: List[Predicate]) -> Dict[str, Any]:
        def expect(value: Any) -> ExpectConstraint:
            # Constraints re-read the value on every assert
            if isinstance(value, (Immediate, Deferred)):
                source = value if isinstance(value, Deferred) else Deferred(value.read)
            elif callable(value):
                source = Deferred(value)
            else:
                source = Deferred(lambda: value)
            return ExpectConstraint(self, scenario, constraints, Expect(source))

        return {"expect": expect}
