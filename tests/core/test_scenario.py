"""Tests for the Scenario engine: grammar, evaluation pass, test mode, debounce."""

import pytest

from home_scenarios import DuplicateScenarioError, ScenarioOptionError, ScheduleParseError
from home_scenarios.core.scenario import CallbackEntry


def always(value=True):
    return lambda: value


class TestScenarioCreation:
    """Tests for creating scenarios through the runtime."""

    def test_duplicate_description_fails(self, runtime):
        """Test that the second scenario with the same description is rejected."""
        runtime.scenario("Porch light")

        with pytest.raises(DuplicateScenarioError, match="Porch light"):
            runtime.scenario("Porch light")

    def test_duplicate_is_a_value_error(self, runtime):
        """Test that configuration errors are also ValueErrors."""
        runtime.scenario("Porch light")

        with pytest.raises(ValueError):
            runtime.scenario("Porch light")

    def test_empty_description_fails(self, runtime):
        """Test that a description is required."""
        with pytest.raises(ScenarioOptionError):
            runtime.scenario("")

    def test_unknown_option_fails(self, runtime):
        """Test that unrecognized option keys are rejected."""
        with pytest.raises(ScenarioOptionError, match="bogus"):
            runtime.scenario("Porch light", bogus=True)

    def test_failed_creation_does_not_register(self, runtime):
        """Test that a rejected scenario leaves the registry untouched."""
        with pytest.raises(ScenarioOptionError):
            runtime.scenario("Porch light", bogus=True)

        assert runtime.get_scenario("Porch light") is None
        runtime.scenario("Porch light")

    def test_malformed_suppress_for_fails(self, runtime):
        """Test that a bad debounce window is rejected at creation."""
        with pytest.raises(ScheduleParseError):
            runtime.scenario("Porch light", suppress_for="soon")

    def test_new_scenario_is_runnable(self, runtime):
        """Test the initial state of a scenario."""
        scenario = runtime.scenario("Porch light")

        assert scenario.runnable
        assert not scenario.test_mode
        assert scenario.callbacks == []
        assert scenario.last_assert_time is None
        assert scenario.suppress_time_ms == 0


class TestGrammar:
    """Tests for the fluent when/constraint/then/else chain."""

    def test_then_returns_scenario(self, runtime, recorder):
        """Test that then() closes the chain on the scenario."""
        scenario = runtime.scenario("Porch light")

        assert scenario.when().then(recorder("a")) is scenario
        assert scenario.callbacks[0].constrained is False

    def test_empty_trigger(self, runtime):
        """Test that empty() registers nothing and returns the vocabulary."""
        scenario = runtime.scenario("Porch light")

        assert scenario.when().empty() is scenario.triggers

    def test_constraint_group_accumulates(self, runtime, recorder):
        """Test that every constraint word adds one predicate to the group."""
        scenario = runtime.scenario("Porch light")
        (
            scenario.when()
            .constraint()
            .expect(lambda: 1).is_(1)
            .expect(lambda: 2).gt(1)
            .then(recorder("a"))
        )

        assert len(scenario.callbacks) == 1
        assert len(scenario.callbacks[0].constraints) == 2

    def test_constraint_groups_are_independent(self, runtime, recorder):
        """Test that each constraint() call opens a fresh group."""
        scenario = runtime.scenario("Porch light")
        scenario.constraint().expect(lambda: 1).is_(1).then(recorder("a"))
        scenario.constraint().expect(lambda: 1).is_(1).expect(lambda: 1).is_(1).then(recorder("b"))

        assert [len(entry.constraints) for entry in scenario.callbacks] == [1, 2]

    def test_else_vocabulary_only_has_then(self, runtime):
        """Test the else vocabulary."""
        scenario = runtime.scenario("Porch light")

        assert scenario.else_().names() == ["then"]

    def test_then_requires_callable(self, runtime):
        """Test that a non-callable callback is rejected."""
        scenario = runtime.scenario("Porch light")

        with pytest.raises(TypeError):
            scenario.then("not a function")

    def test_unknown_word_names_available_entries(self, runtime):
        """Test the error raised for a word no component contributes."""
        scenario = runtime.scenario("Porch light")

        with pytest.raises(AttributeError, match="variable"):
            scenario.when().sunrise()

    def test_custom_trigger_callback(self, runtime):
        """Test that when(callback) hands the scenario to the callback."""
        scenario = runtime.scenario("Porch light")
        seen = []

        result = scenario.when(lambda s: seen.append(s) or "custom")

        assert seen == [scenario]
        assert result == "custom"


class TestAssert:
    """Tests for the evaluation pass."""

    def test_unconstrained_entry_runs_every_time(self, runtime, recorder, calls):
        """Test that a single unconstrained entry runs once per assert."""
        scenario = runtime.scenario("Porch light")
        scenario.then(recorder("a"))

        for _ in range(3):
            assert scenario.assert_() is True

        assert calls == [("a", ())] * 3

    def test_assert_args_passed_to_callback(self, runtime, recorder, calls):
        """Test that assert arguments follow the scenario into the callback."""
        scenario = runtime.scenario("Porch light")
        scenario.then(recorder("a"))

        scenario.assert_("on", 42)

        assert calls == [("a", ("on", 42))]

    def test_callback_receives_scenario(self, runtime):
        """Test that the first callback argument is the scenario itself."""
        scenario = runtime.scenario("Porch light")
        seen = []
        scenario.then(lambda s, *args: seen.append(s))

        scenario.assert_()

        assert seen == [scenario]

    def test_first_group_matches_others_skipped(self, runtime, recorder, calls):
        """Test G1 (match), G2 (no match), else: only G1 runs."""
        scenario = runtime.scenario("Porch light")
        scenario.constraint().expect(lambda: "on").is_("on").then(recorder("g1"))
        scenario.constraint().expect(lambda: "on").is_("off").then(recorder("g2"))
        scenario.else_().then(recorder("else"))

        assert scenario.assert_() is True
        assert calls == [("g1", ())]

    def test_only_else_runs_when_nothing_matches(self, runtime, recorder, calls):
        """Test that the else entry runs when every constrained group fails."""
        scenario = runtime.scenario("Porch light")
        scenario.constraint().expect(lambda: 1).is_(2).then(recorder("g1"))
        scenario.constraint().expect(lambda: 1).is_(3).then(recorder("g2"))
        scenario.else_().then(recorder("else"))

        scenario.assert_()

        assert calls == [("else", ())]

    def test_every_matching_group_runs(self, runtime, recorder, calls):
        """Test that constrained groups are not mutually exclusive."""
        scenario = runtime.scenario("Porch light")
        scenario.constraint().expect(lambda: 1).is_(1).then(recorder("g1"))
        scenario.constraint().expect(lambda: 2).is_(2).then(recorder("g2"))
        scenario.else_().then(recorder("else"))

        scenario.assert_()

        assert calls == [("g1", ()), ("g2", ())]

    def test_unconstrained_before_group_runs(self, runtime, recorder, calls):
        """Test that an unconstrained entry declared first always runs."""
        scenario = runtime.scenario("Porch light")
        scenario.then(recorder("first"))
        scenario.constraint().expect(lambda: 1).is_(1).then(recorder("g1"))
        scenario.else_().then(recorder("else"))

        scenario.assert_()

        assert calls == [("first", ()), ("g1", ())]

    def test_nothing_runs_returns_false(self, runtime, recorder, calls):
        """Test the result of a pass where no group matches and there is no else."""
        scenario = runtime.scenario("Porch light")
        scenario.constraint().expect(lambda: 1).is_(2).then(recorder("g1"))

        assert scenario.assert_() is False
        assert calls == []

    def test_constraint_short_circuits(self, runtime, recorder):
        """Test that a failed predicate stops the rest of its group."""
        scenario = runtime.scenario("Porch light")
        evaluated = []

        def second_check():
            evaluated.append("second_check")
            return True

        scenario.constraint().expect(lambda: 1).is_(2).expect(second_check).is_(True).then(recorder("g1"))
        scenario.assert_()

        assert evaluated == []

    def test_callback_error_propagates(self, runtime):
        """Test that callback errors reach the caller of assert_()."""
        scenario = runtime.scenario("Porch light")

        def broken(s):
            raise RuntimeError("bulb exploded")

        scenario.then(broken)

        with pytest.raises(RuntimeError, match="bulb exploded"):
            scenario.assert_()

    def test_reentrant_assert_of_other_scenario(self, runtime, recorder, calls):
        """Test that a callback may assert another scenario."""
        inner = runtime.scenario("Inner")
        inner.constraint().expect(lambda: 1).is_(1).then(recorder("inner"))
        inner.else_().then(recorder("inner-else"))

        outer = runtime.scenario("Outer")
        outer.constraint().expect(lambda: 1).is_(1).then(lambda s: inner.assert_())
        outer.else_().then(recorder("outer-else"))

        outer.assert_()

        assert calls == [("inner", ())]

    def test_entries_added_during_pass_wait_for_next(self, runtime, recorder, calls):
        """Test that the entry list is snapshotted for each pass."""
        scenario = runtime.scenario("Porch light")
        scenario.then(lambda s: s.then(recorder("late")) if not s.callbacks[1:] else None)

        scenario.assert_()
        assert calls == []

        scenario.assert_()
        assert calls == [("late", ())]


class TestTestMode:
    """Tests for test-mode isolation."""

    def test_test_mode_isolates_scenario(self, runtime):
        """Test that only test-mode scenarios stay runnable."""
        a = runtime.scenario("A")
        b = runtime.scenario("B")

        a.test()

        assert a.runnable
        assert not b.runnable
        assert runtime.in_test_mode

    def test_new_scenario_not_runnable_during_test_mode(self, runtime):
        """Test that scenarios created while another is in test mode are not runnable."""
        a = runtime.scenario("A")
        a.test()

        b = runtime.scenario("B")
        assert not b.runnable

        a.test(False)
        assert b.runnable
        assert a.runnable
        assert not runtime.in_test_mode

    def test_not_runnable_scenario_does_nothing(self, runtime, recorder, calls):
        """Test that assert_() on a non-runnable scenario has no effect."""
        a = runtime.scenario("A")
        b = runtime.scenario("B")
        b.then(recorder("b"))

        a.test()

        assert b.assert_() is False
        assert calls == []
        assert b.last_assert_time is None

    def test_only_option(self, runtime):
        """Test that only=True enables test mode at creation."""
        a = runtime.scenario("A")
        b = runtime.scenario("B", only=True)

        assert b.test_mode
        assert b.runnable
        assert not a.runnable

    def test_only_shortcut(self, runtime):
        """Test runtime.only()."""
        a = runtime.scenario("A")
        b = runtime.only("B")

        assert b.test_mode
        assert not a.runnable

    def test_two_test_mode_scenarios(self, runtime):
        """Test that test mode stays on until every scenario leaves it."""
        a = runtime.scenario("A").test()
        b = runtime.scenario("B").test()
        c = runtime.scenario("C")

        a.test(False)

        assert not a.runnable
        assert b.runnable
        assert not c.runnable


class TestSuppression:
    """Tests for the suppress_for debounce window."""

    def test_default_has_no_window(self, runtime, recorder, calls):
        """Test that scenarios are not debounced by default."""
        scenario = runtime.scenario("Porch light")
        scenario.then(recorder("a"))

        scenario.assert_()
        scenario.assert_()

        assert len(calls) == 2
        assert scenario.suppressed_until is None

    def test_window_blocks_repeat_asserts(self, runtime, clock, recorder, calls):
        """Test that asserts inside the window are ignored."""
        scenario = runtime.scenario("Porch light", suppress_for="1 min")
        scenario.then(recorder("a"))

        assert scenario.assert_() is True
        clock.advance(seconds=59)
        assert scenario.assert_() is False
        clock.advance(seconds=1)
        assert scenario.assert_() is True

        assert len(calls) == 2

    def test_window_in_milliseconds(self, runtime, clock, recorder, calls):
        """Test that a bare number is milliseconds."""
        scenario = runtime.scenario("Porch light", suppress_for=500)
        scenario.then(recorder("a"))

        scenario.assert_()
        clock.advance(milliseconds=499)
        scenario.assert_()
        clock.advance(milliseconds=1)
        scenario.assert_()

        assert len(calls) == 2

    def test_assert_without_callbacks_does_not_open_window(self, runtime, clock, recorder, calls):
        """Test that a pass that runs nothing leaves the window closed."""
        scenario = runtime.scenario("Porch light", suppress_for="1 hour")
        state = {"on": False}
        scenario.constraint().expect(lambda: state["on"]).is_(True).then(recorder("a"))

        scenario.assert_()
        assert scenario.last_assert_time is None

        state["on"] = True
        assert scenario.assert_() is True
        assert scenario.last_assert_time == clock.now()

    def test_self_reassert_inside_callback_is_suppressed(self, runtime, recorder, calls):
        """Test that the window opens before the first callback runs."""
        scenario = runtime.scenario("Porch light", suppress_for="10 sec")
        results = []
        scenario.then(lambda s: results.append(s.assert_()))

        scenario.assert_()

        assert results == [False]

    def test_suppress_for_method(self, runtime):
        """Test changing the window after creation."""
        scenario = runtime.scenario("Porch light")

        assert scenario.suppress_for("20hours") is scenario
        assert scenario.suppress_time_ms == 72000000


class TestCallbackEntry:
    """Tests for CallbackEntry."""

    def test_empty_group_matches(self):
        """Test that an unconstrained entry always matches."""
        entry = CallbackEntry(lambda s: None)

        assert not entry.constrained
        assert entry.matches()

    def test_group_is_and(self):
        """Test that every predicate must hold."""
        entry = CallbackEntry(lambda s: None, [always(True), always(False)])

        assert entry.constrained
        assert not entry.matches()
