"""
Runtime configuration.

Configuration is plain data (dicts in, dataclass out). Loading it from
files is the host's job.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Union

from home_scenarios.utils.durations import to_milliseconds


@dataclass
class RuntimeConfig:
    """
    Configuration for a Runtime.

    Attributes:
        version: Config schema version
        default_suppress_for: Debounce window (ms, or duration string) for
            scenarios that do not set suppress_for. 0 disables debouncing.
        emit_ticks: Whether the time component publishes second/minute/hour
            ticks on the Event Bus
        components: Per-component config overrides, keyed by component id
    """

    CURRENT_VERSION = 1

    version: int = CURRENT_VERSION
    default_suppress_for: Union[int, str] = 0
    emit_ticks: bool = True
    components: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @property
    def default_suppress_for_ms(self) -> int:
        return to_milliseconds(self.default_suppress_for)

    def component_config(self, component_id: str) -> Dict[str, Any]:
        """Get the overrides for one component (empty dict if none)."""
        return dict(self.components.get(component_id, {}))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict."""
        return {
            "version": self.version,
            "default_suppress_for": self.default_suppress_for,
            "emit_ticks": self.emit_ticks,
            "components": {key: dict(value) for key, value in self.components.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RuntimeConfig":
        """
        Deserialize from dict.

        Raises:
            ValueError: If the version is newer than this library understands
                or the debounce window is malformed
        """
        version = data.get("version", cls.CURRENT_VERSION)
        if version > cls.CURRENT_VERSION:
            raise ValueError(f"Unsupported config version: {version}")

        config = cls(
            version=version,
            default_suppress_for=data.get("default_suppress_for", 0),
            emit_ticks=data.get("emit_ticks", True),
            components={key: dict(value) for key, value in data.get("components", {}).items()},
        )
        to_milliseconds(config.default_suppress_for)
        return config
