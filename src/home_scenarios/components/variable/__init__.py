"""
Variable component.

Named in-memory values with optional expiry, published on the "variable"
topic so scenarios can react to them.
"""

from .component import VariableComponent
from .store import (
    VARIABLE_REMOVE_TOPIC,
    VARIABLE_TOPIC,
    StoredVariable,
    VariableChange,
    VariableStore,
)

__all__ = [
    "VariableComponent",
    "VariableStore",
    "VariableChange",
    "StoredVariable",
    "VARIABLE_TOPIC",
    "VARIABLE_REMOVE_TOPIC",
]
