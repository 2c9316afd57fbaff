"""
DeviceComponent - device registry and attribute triggers/constraints.

    runtime.scenario("Hall motion")
        .when()
            .device("hall_sensor").is_("motion")
        .constraint()
            .device("hall_light").attribute("power").is_("off")
            .then(turn_on_hall_light)
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List

from home_scenarios.components.base import Component, Predicate
from home_scenarios.core.errors import ConfigurationError, DeviceNotFoundError
from home_scenarios.core.vocabulary import Vocabulary

from .models import AttributeChange, Device, device_topic

if TYPE_CHECKING:
    from home_scenarios.core.scenario import Scenario

logger = logging.getLogger(__name__)

_ANY = object()


class DeviceComponent(Component):
    """
    Keeps the devices known to the runtime.

    Trigger words:
    - device(name).attribute(attr).is_(value): assert when attr becomes value
    - device(name).attribute(attr).changes(): assert with the new value on
      every change of attr
    - device(name).is_(attr) / is_not(attr): assert when a boolean attribute
      turns on / off

    Constraint words:
    - device(name).attribute(attr).is_(value)

    Triggers can be declared before the device is added. Constraints look the
    device up when evaluated.
    """

    def __init__(self) -> None:
        super().__init__()
        self._devices: Dict[str, Device] = {}

    @property
    def id(self) -> str:
        return "device"

    # =========================================================================
    # Registry
    # =========================================================================

    def add(self, device: Device) -> Device:
        """
        Register a device and connect it to the Event Bus.

        Raises:
            ConfigurationError: If a device with that name already exists
        """
        if device.name in self._devices:
            raise ConfigurationError(f"Device '{device.name}' already exists")

        device.bus = self.runtime.bus
        self._devices[device.name] = device
        logger.info(f"Device '{device.name}' added")
        return device

    def get(self, name: str) -> Device:
        """
        Get a device by name.

        Raises:
            DeviceNotFoundError: If the device is unknown
        """
        try:
            return self._devices[name]
        except KeyError:
            raise DeviceNotFoundError(f"Device '{name}' not found") from None

    def find_by_attribute(self, attribute: str, value: Any = _ANY) -> List[Device]:
        """
        Find devices that have an attribute (optionally with a given value).
        """
        return [
            device
            for device in self._devices.values()
            if attribute in device.attributes
            and (value is _ANY or device.attributes[attribute] == value)
        ]

    def devices(self) -> List[Device]:
        return list(self._devices.values())

    # =========================================================================
    # Vocabulary
    # =========================================================================

    def _subscribe(
        self,
        scenario: "Scenario",
        name: str,
        attribute: str,
        value: Any = _ANY,
        with_value: bool = False,
    ) -> Vocabulary:
        def handler(change: AttributeChange) -> None:
            if change.name != attribute:
                return
            if value is not _ANY and change.value != value:
                return
            if with_value:
                scenario.assert_(change.value)
            else:
                scenario.assert_()

        self.runtime.bus.on(device_topic(name), handler)
        return scenario.triggers

    def triggers(self, scenario: "Scenario") -> Dict[str, Any]:
        def device(name: str) -> Vocabulary:
            def attribute(attr: str) -> Vocabulary:
                return Vocabulary(
                    "device attribute trigger",
                    is_=lambda value: self._subscribe(scenario, name, attr, value),
                    changes=lambda: self._subscribe(scenario, name, attr, with_value=True),
                )

            return Vocabulary(
                "device trigger",
                attribute=attribute,
                is_=lambda attr: self._subscribe(scenario, name, attr, True),
                is_not=lambda attr: self._subscribe(scenario, name, attr, False),
            )

        return {"device": device}

    def constraints(self, scenario: "Scenario", constraints: List[Predicate]) -> Dict[str, Any]:
        def device(name: str) -> Vocabulary:
            def attribute(attr: str) -> Vocabulary:
                def is_(value: Any) -> Vocabulary:
                    return self.constrain(
                        scenario,
                        constraints,
                        lambda: self.get(name).get_attribute(attr) == value,
                    )

                return Vocabulary("device attribute constraint", is_=is_)

            return Vocabulary("device constraint", attribute=attribute)

        return {"device": device}
