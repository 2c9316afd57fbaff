"""
Core of the home-scenarios runtime.

This package contains:
- bus: Event Bus implementation
- clock: wall-clock and manual time sources
- scheduler: time-agnostic periodic and one-shot jobs
- scenario: the fluent rule and its evaluation pass
- runtime: component and scenario registries
"""

from home_scenarios.core.bus import EventBus
from home_scenarios.core.clock import Clock, ManualClock, SystemClock
from home_scenarios.core.config import RuntimeConfig
from home_scenarios.core.runtime import Runtime
from home_scenarios.core.scenario import CallbackEntry, Scenario
from home_scenarios.core.scheduler import Job, Scheduler
from home_scenarios.core.vocabulary import Vocabulary

__all__ = [
    "EventBus",
    "Clock",
    "SystemClock",
    "ManualClock",
    "RuntimeConfig",
    "Runtime",
    "Scenario",
    "CallbackEntry",
    "Job",
    "Scheduler",
    "Vocabulary",
]
