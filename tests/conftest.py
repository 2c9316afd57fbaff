"""Shared fixtures: a runtime with every built-in component and a manual clock."""

from datetime import datetime

import pytest

from home_scenarios import ManualClock, RuntimeConfig, build_runtime


@pytest.fixture
def clock():
    """Manual clock starting Wednesday 2025-01-15 12:00:00."""
    return ManualClock(datetime(2025, 1, 15, 12, 0, 0))


@pytest.fixture
def runtime(clock):
    """Runtime with all built-in components attached."""
    return build_runtime(clock=clock)


@pytest.fixture
def quiet_runtime(clock):
    """Runtime without wall-clock tick jobs."""
    return build_runtime(RuntimeConfig(emit_ticks=False), clock=clock)


@pytest.fixture
def calls():
    """Record of callback invocations as (label, args) tuples."""
    return []


@pytest.fixture
def recorder(calls):
    """Build a scenario callback that records its label and assert args."""

    def make(label):
        def callback(scenario, *args):
            calls.append((label, args))

        return callback

    return make
