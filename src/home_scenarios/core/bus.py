"""
Event Bus implementation for topic-based event routing.

The Event Bus is a simple, synchronous dispatcher: handlers run in
subscription order and any exception propagates to the emitter.
"""

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


EventHandler = Callable[..., Any]


class EventBus:
    """
    Simple, synchronous event bus keyed by topic name.

    Topics need no declaration. Emitting a topic nobody listens to is a no-op.
    Handlers are NOT isolated from each other: isolation is the job of
    whoever generates the stimulus (e.g. the scheduler).
    """

    def __init__(self) -> None:
        """Initialize the event bus."""
        self._handlers: Dict[str, List[EventHandler]] = {}

    def on(self, topic: str, handler: EventHandler) -> None:
        """
        Subscribe to a topic.

        Args:
            topic: Topic name (e.g., "variable", "minute", "device.lamp")
            handler: Callable receiving the emitted arguments
        """
        self._handlers.setdefault(topic, []).append(handler)
        logger.debug(f"Subscribed {_name_of(handler)} to '{topic}'")

    def emit(self, topic: str, *args: Any) -> None:
        """
        Emit a topic to all its subscribers.

        Handlers are called synchronously, in subscription order, with all
        emitted arguments. Handlers added while emitting are not called for
        this emission.

        Args:
            topic: Topic name
            *args: Arguments passed through to every handler
        """
        handlers = self._handlers.get(topic)
        if not handlers:
            return

        logger.debug(f"Emitting '{topic}' to {len(handlers)} handler(s)")
        for handler in list(handlers):
            handler(*args)

    def off(self, topic: str, handler: EventHandler) -> bool:
        """
        Unsubscribe a handler from a topic.

        Args:
            topic: Topic name
            handler: The handler to unsubscribe

        Returns:
            True if the handler was subscribed
        """
        handlers = self._handlers.get(topic, [])
        if handler not in handlers:
            return False

        handlers.remove(handler)
        logger.debug(f"Unsubscribed {_name_of(handler)} from '{topic}'")
        return True

    def listeners(self, topic: str) -> List[EventHandler]:
        """Get the handlers subscribed to a topic, in invocation order."""
        return list(self._handlers.get(topic, []))

    def topics(self) -> List[str]:
        """Get every topic that has at least one subscriber."""
        return [topic for topic, handlers in self._handlers.items() if handlers]


def _name_of(handler: EventHandler) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)
