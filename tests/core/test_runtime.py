"""Tests for the Runtime registries and component composition."""

import pytest

from home_scenarios import (
    ComponentNotFoundError,
    DuplicateComponentError,
    Runtime,
    RuntimeConfig,
    VocabularyConflictError,
    build_runtime,
)
from home_scenarios.components import Component
from home_scenarios.core.vocabulary import Vocabulary


class SunComponent(Component):
    """Minimal component contributing one trigger and one constraint."""

    def __init__(self, component_id="sun", word="sun"):
        super().__init__()
        self._id = component_id
        self.word = word
        self.attached = 0
        self.is_up = True

    @property
    def id(self):
        return self._id

    def default_config(self):
        return {"version": 1, "offset": 0}

    def on_attach(self):
        self.attached += 1

    def triggers(self, scenario):
        def rises():
            self.runtime.bus.on("sunrise", lambda: scenario.assert_())
            return scenario.triggers

        return {self.word: Vocabulary("sun trigger", rises=rises)}

    def constraints(self, scenario, constraints):
        return {
            self.word: Vocabulary(
                "sun constraint",
                is_up=lambda: self.constrain(scenario, constraints, lambda: self.is_up),
            )
        }


class TestComponents:
    """Tests for registering components."""

    def test_build_runtime_attaches_builtins(self, runtime):
        """Test the built-in component set and its order."""
        ids = [component.id for component in runtime.components()]

        assert ids == ["event", "variable", "time", "day", "expect", "device"]

    def test_add_component_attaches_once(self, clock):
        """Test that components are attached when added."""
        runtime = Runtime(clock=clock)
        sun = runtime.add_component(SunComponent())

        assert sun.attached == 1
        assert sun.runtime is runtime
        assert runtime.component("sun") is sun
        assert runtime.has_component("sun")

    def test_duplicate_component_fails(self, clock):
        """Test that two components cannot share an id."""
        runtime = Runtime(clock=clock)
        runtime.add_component(SunComponent())

        with pytest.raises(DuplicateComponentError):
            runtime.add_component(SunComponent())

    def test_unknown_component(self, runtime):
        """Test looking up a missing component."""
        with pytest.raises(ComponentNotFoundError):
            runtime.component("weather")

        with pytest.raises(KeyError):
            runtime.component("weather")

    def test_unattached_component_has_no_runtime(self):
        """Test that using a component before attaching fails clearly."""
        with pytest.raises(RuntimeError, match="not attached"):
            SunComponent().runtime

    def test_component_config_merges_overrides(self, clock):
        """Test that user config is layered over default_config()."""
        config = RuntimeConfig(components={"sun": {"offset": 15}})
        runtime = Runtime(config=config, clock=clock)
        sun = runtime.add_component(SunComponent())

        assert sun.config == {"version": 1, "offset": 15}

    def test_variables_shortcut(self, runtime):
        """Test runtime.variables."""
        runtime.variables.set("mode", "away")

        assert runtime.component("variable").get("mode") == "away"


class TestComposition:
    """Tests for merging component vocabularies."""

    def test_component_words_in_vocabularies(self, runtime, recorder, calls):
        """Test that a registered component contributes to every scenario."""
        sun = runtime.add_component(SunComponent())
        scenario = runtime.scenario("Morning")

        scenario.when().sun.rises().constraint().sun.is_up().then(recorder("morning"))
        runtime.bus.emit("sunrise")
        sun.is_up = False
        runtime.bus.emit("sunrise")

        assert calls == [("morning", ())]

    def test_collision_between_components_fails(self, runtime):
        """Test that two components cannot contribute the same word."""
        runtime.add_component(SunComponent("sun"))
        runtime.add_component(SunComponent("sun2"))

        with pytest.raises(VocabularyConflictError, match="sun2"):
            runtime.scenario("Morning")

    def test_collision_with_builtin_fails(self, runtime):
        """Test that a component cannot shadow a built-in word."""
        runtime.add_component(SunComponent("sun", word="then"))

        with pytest.raises(VocabularyConflictError, match="<builtin>"):
            runtime.scenario("Morning")

    def test_collision_in_constraint_vocabulary(self, runtime):
        """Test that collisions are also detected when opening a constraint group."""
        scenario = runtime.scenario("Morning")
        runtime.add_component(SunComponent("sun", word="variable"))

        with pytest.raises(VocabularyConflictError):
            scenario.constraint()

    def test_rebuild_picks_up_new_component(self, runtime):
        """Test that rebuild() refreshes the trigger vocabulary."""
        scenario = runtime.scenario("Morning")
        runtime.add_component(SunComponent())

        assert "sun" not in scenario.triggers
        assert "sun" in scenario.rebuild()


class TestScenarioRegistry:
    """Tests for the scenario registry."""

    def test_scenarios_in_creation_order(self, runtime):
        """Test listing scenarios."""
        a = runtime.scenario("A")
        b = runtime.scenario("B")

        assert runtime.scenarios() == [a, b]
        assert runtime.get_scenario("B") is b
        assert runtime.get_scenario("C") is None

    def test_reset_clears_scenarios(self, runtime):
        """Test that reset() forgets scenarios and test mode."""
        runtime.scenario("A").test()

        runtime.reset()

        assert runtime.scenarios() == []
        assert not runtime.in_test_mode
        runtime.scenario("A")

    def test_reset_retires_old_scenarios(self, runtime, recorder, calls):
        """Test that a scenario declared again after reset() runs only once."""
        runtime.scenario("Porch").when().variable("light").changes().then(recorder("old"))

        runtime.reset()
        runtime.scenario("Porch").when().variable("light").changes().then(recorder("new"))
        runtime.variables.set("light", "on")

        assert calls == [("new", ("on",))]

    def test_reset_cancels_periodic_triggers(self, quiet_runtime, clock, recorder, calls):
        """Test that time.every() jobs of forgotten scenarios stop."""
        old = quiet_runtime.scenario("Poll").when().time.every("2 seconds").then(recorder("poll"))

        quiet_runtime.reset()
        clock.advance(seconds=4)
        quiet_runtime.scheduler.run_pending()

        assert not old.runnable
        assert quiet_runtime.scheduler.jobs() == []
        assert calls == []

    def test_reset_keeps_components(self, runtime):
        """Test that reset() leaves components attached."""
        runtime.reset()

        assert len(runtime.components()) == 6

    def test_default_suppress_for_from_config(self, clock):
        """Test that RuntimeConfig supplies the default debounce window."""
        runtime = build_runtime(RuntimeConfig(default_suppress_for="2 sec"), clock=clock)

        assert runtime.scenario("A").suppress_time_ms == 2000
        assert runtime.scenario("B", suppress_for=0).suppress_time_ms == 0
