"""
Event component.

Lets scenarios react to any topic published on the Event Bus.
"""

from .component import EventComponent

__all__ = ["EventComponent"]
