"""
Scenario engine - the fluent rule and its evaluation pass.

A scenario is built once with a fluent chain and then stays armed for the
life of the process:

    runtime.scenario("Porch light")
        .when()
            .variable("light").changes()
        .constraint()
            .variable("light").is_("purple")
            .then(set_purple)
        .else_()
            .then(set_default)

Every stimulus registered in when() calls assert_(), which walks the
callback entries in declaration order.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any, Callable, List, Optional

from home_scenarios.core.vocabulary import Vocabulary, merge_contributions
from home_scenarios.utils.durations import DurationLike, to_milliseconds

if TYPE_CHECKING:
    from home_scenarios.core.runtime import Runtime

logger = logging.getLogger(__name__)

Predicate = Callable[[], Any]
ScenarioCallback = Callable[..., Any]


@dataclass
class CallbackEntry:
    """A callback and the constraint group gating it (empty = unconstrained)."""

    callback: ScenarioCallback
    constraints: List[Predicate] = field(default_factory=list)

    @property
    def constrained(self) -> bool:
        return len(self.constraints) > 0

    def matches(self) -> bool:
        """Evaluate the constraint group (AND, short-circuit)."""
        return all(predicate() for predicate in self.constraints)


class Scenario:
    """
    A named automation rule: triggers, constraint groups and callbacks.

    Create scenarios through Runtime.scenario(); the runtime enforces
    unique descriptions and recognized options.
    """

    def __init__(
        self,
        runtime: "Runtime",
        description: str,
        suppress_for: Optional[DurationLike] = None,
        only: bool = False,
    ) -> None:
        self._runtime = runtime
        self.description = description
        self.test_mode = False
        self.retired = False
        self.callbacks: List[CallbackEntry] = []
        self.last_assert_time: Optional[datetime] = None
        self.suppressed_until: Optional[datetime] = None
        self.suppress_time_ms = 0

        if suppress_for is None:
            suppress_for = runtime.config.default_suppress_for
        self.suppress_for(suppress_for)

        self.triggers = self._build_triggers()

        if only:
            self.test_mode = True

    def __repr__(self) -> str:
        return f"<Scenario {self.description!r}>"

    @property
    def runtime(self) -> "Runtime":
        return self._runtime

    @property
    def runnable(self) -> bool:
        """
        False once the runtime has been reset, or while another scenario is
        in test mode and this one is not.
        """
        if self.retired:
            return False
        return self.test_mode or not self._runtime.in_test_mode

    # =========================================================================
    # Vocabulary
    # =========================================================================

    def _build_triggers(self) -> Vocabulary:
        """Merge the built-in trigger words with every component's."""
        builtins = {
            "empty": lambda: self.triggers,
            "constraint": lambda constraints=None: self.constraint(constraints),
            "then": lambda callback: self.then(callback),
        }
        contributions = [
            (component.id, component.triggers(self))
            for component in self._runtime.components()
        ]
        return merge_contributions("trigger vocabulary", builtins, contributions)

    def rebuild(self) -> Vocabulary:
        """Rebuild the trigger vocabulary (e.g. after adding a component)."""
        self.triggers = self._build_triggers()
        return self.triggers

    # =========================================================================
    # Fluent grammar
    # =========================================================================

    def when(self, callback: Optional[Callable[["Scenario"], Any]] = None) -> Any:
        """
        Start declaring triggers.

        Args:
            callback: Optional custom trigger; called with the scenario and
                its return value handed back

        Returns:
            The trigger vocabulary (or the custom trigger's result)
        """
        if callback is not None:
            return callback(self)
        return self.triggers

    def constraint(self, constraints: Optional[List[Predicate]] = None) -> Vocabulary:
        """
        Open a constraint group.

        The constraint vocabulary is rebuilt on every call so each group has
        its own predicate list.

        Args:
            constraints: Accumulator to continue (None opens a new group)

        Returns:
            The constraint vocabulary for this group
        """
        if constraints is None:
            constraints = []

        builtins = {"then": lambda callback: self.then(callback, constraints)}
        contributions = [
            (component.id, component.constraints(self, constraints))
            for component in self._runtime.components()
        ]
        return merge_contributions("constraint vocabulary", builtins, contributions)

    def then(
        self,
        callback: ScenarioCallback,
        constraints: Optional[List[Predicate]] = None,
    ) -> "Scenario":
        """
        Add a callback entry.

        Args:
            callback: Called as callback(scenario, *assert_args)
            constraints: Constraint group (None or empty = unconstrained)

        Returns:
            The scenario, for further chaining
        """
        if not callable(callback):
            raise TypeError(f"then() needs a callable, got {callback!r}")
        self.callbacks.append(CallbackEntry(callback, constraints if constraints else []))
        return self

    def else_(self) -> Vocabulary:
        """Fallback entry: runs only when no constrained entry matched first."""
        return Vocabulary("else vocabulary", then=lambda callback: self.then(callback))

    def test(self, enabled: bool = True) -> "Scenario":
        """
        Put the scenario in (or out of) test mode.

        While any scenario is in test mode only test-mode scenarios run.
        """
        self.test_mode = enabled
        self._runtime.update_test_mode(self)
        return self

    def suppress_for(self, duration: DurationLike) -> "Scenario":
        """
        Set the debounce window.

        Args:
            duration: Milliseconds, timedelta, or a string such as "500",
                "500 ms", "1 minute", "20hours"

        Raises:
            ScheduleParseError: If the duration is malformed
        """
        self.suppress_time_ms = to_milliseconds(duration)
        return self

    # =========================================================================
    # Evaluation
    # =========================================================================

    def is_suppressed(self, now: Optional[datetime] = None) -> bool:
        """Check whether now falls inside the debounce window."""
        if self.suppressed_until is None:
            return False
        if now is None:
            now = self._runtime.clock.now()
        return now < self.suppressed_until

    def assert_(self, *args: Any) -> bool:
        """
        Evaluate the scenario and run matching callbacks.

        Entries are visited in declaration order. Every matching constrained
        entry runs; an unconstrained entry is skipped once a constrained entry
        has run in this pass. Callback and predicate errors propagate.

        Args:
            *args: Passed to each callback after the scenario

        Returns:
            True if at least one callback ran
        """
        if not self.runnable:
            logger.debug(f"Scenario '{self.description}' not runnable (test mode)")
            return False

        now = self._runtime.clock.now()
        if self.is_suppressed(now):
            logger.debug(f"Scenario '{self.description}' suppressed until {self.suppressed_until}")
            return False

        ran = False
        executions_with_constraints = 0

        for entry in list(self.callbacks):
            if not entry.constrained and executions_with_constraints > 0:
                continue

            if not entry.matches():
                continue

            if not ran:
                ran = True
                self._start_window(now)

            entry.callback(self, *args)
            if entry.constrained:
                executions_with_constraints += 1

        if ran:
            logger.debug(f"Scenario '{self.description}' asserted")
        return ran

    def _start_window(self, now: datetime) -> None:
        self.last_assert_time = now
        if self.suppress_time_ms > 0:
            self.suppressed_until = now + timedelta(milliseconds=self.suppress_time_ms)
        else:
            self.suppressed_until = None
