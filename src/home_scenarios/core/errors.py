"""
Error taxonomy for home-scenarios.

Configuration errors are raised synchronously while a scenario is being
declared. Runtime errors raised by callbacks or predicates are not wrapped;
they propagate to whatever dispatched the stimulus.
"""


class HomeScenariosError(Exception):
    """Base class for all home-scenarios errors."""


class ConfigurationError(HomeScenariosError, ValueError):
    """A declaration is malformed and was rejected."""


class DuplicateScenarioError(ConfigurationError):
    """A scenario with the same description already exists."""


class ScenarioOptionError(ConfigurationError):
    """Scenario options are missing or not recognized."""


class DuplicateComponentError(ConfigurationError):
    """A component with the same id is already registered."""


class VocabularyConflictError(ConfigurationError):
    """Two contributions claim the same vocabulary name."""


class ScheduleParseError(ConfigurationError):
    """A duration or schedule string could not be parsed."""


class TimeFormatError(ConfigurationError):
    """A time of day is not a valid HH:MM string."""


class DayFormatError(ConfigurationError):
    """A day name or date could not be understood."""


class ComponentNotFoundError(HomeScenariosError, KeyError):
    """No component is registered under the requested id."""


class DeviceNotFoundError(HomeScenariosError, KeyError):
    """No device is registered under the requested name."""
