"""
EventComponent - scenarios triggered by emitted events.

    runtime.scenario("Doorbell")
        .when()
            .event("doorbell").on()
        .then(ring)
"""

import logging
from typing import TYPE_CHECKING, Any, Dict

from home_scenarios.components.base import Component
from home_scenarios.core.vocabulary import Vocabulary

if TYPE_CHECKING:
    from home_scenarios.core.scenario import Scenario

logger = logging.getLogger(__name__)

_ANY = object()


class EventComponent(Component):
    """
    Exposes the Event Bus to scenarios.

    Trigger words:
    - event(topic).on(): assert with every emission's arguments
    - event(topic).on(value): only when the first argument equals value
    """

    @property
    def id(self) -> str:
        return "event"

    def on(self, topic: str, handler: Any) -> None:
        """Subscribe to a topic on the runtime bus."""
        self.runtime.bus.on(topic, handler)

    def triggers(self, scenario: "Scenario") -> Dict[str, Any]:
        def event(topic: str) -> Vocabulary:
            def on(value: Any = _ANY) -> Vocabulary:
                def handler(*args: Any) -> None:
                    if value is not _ANY and (not args or args[0] != value):
                        return
                    scenario.assert_(*args)

                self.on(topic, handler)
                logger.debug(f"'{scenario.description}' listens for '{topic}'")
                return scenario.triggers

            return Vocabulary("event trigger", on=on)

        return {"event": event}
