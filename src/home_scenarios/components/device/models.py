"""
Device model.

A Device is a named bag of attributes. update_attribute() publishes the
change on "device.<name>" so scenarios can trigger on it.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from home_scenarios.core.bus import EventBus

logger = logging.getLogger(__name__)

DEVICE_TOPIC_PREFIX = "device."


def device_topic(name: str) -> str:
    return f"{DEVICE_TOPIC_PREFIX}{name}"


@dataclass(frozen=True)
class AttributeChange:
    """
    Payload published when a device attribute changes.

    Attributes:
        name: Attribute name
        value: New value
        previous: Value before the change
    """

    name: str
    value: Any
    previous: Any = None


class Device:
    """
    A device and its attribute values.

    Args:
        name: Unique device name
        attributes: Initial attribute values
        bus: Event Bus to publish changes on (set when added to a
            DeviceComponent)
    """

    def __init__(
        self,
        name: str,
        attributes: Optional[Dict[str, Any]] = None,
        bus: Optional["EventBus"] = None,
    ) -> None:
        if not name:
            raise ValueError("Device name must be defined")
        self.name = name
        self.attributes: Dict[str, Any] = dict(attributes or {})
        self.bus = bus

    def __repr__(self) -> str:
        return f"<Device {self.name!r} {self.attributes!r}>"

    @property
    def topic(self) -> str:
        return device_topic(self.name)

    def get_attribute(self, attribute: str, default: Any = None) -> Any:
        return self.attributes.get(attribute, default)

    def set_attribute(self, attribute: str, value: Any) -> None:
        """Set an attribute without publishing anything."""
        self.attributes[attribute] = value

    def update_attribute(self, attribute: str, value: Any) -> bool:
        """
        Set an attribute and publish the change.

        Nothing is published when the value is unchanged.

        Returns:
            True if the value changed
        """
        previous = self.attributes.get(attribute)
        if attribute in self.attributes and previous == value:
            return False

        self.attributes[attribute] = value
        logger.debug(f"Device '{self.name}' {attribute} = {value!r}")
        if self.bus is not None:
            self.bus.emit(self.topic, AttributeChange(attribute, value, previous))
        return True
