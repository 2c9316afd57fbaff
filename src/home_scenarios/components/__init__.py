"""
Components package for home-scenarios.

Components are plug-ins that add trigger and constraint words to every
scenario.
"""

from home_scenarios.components.base import Component

__all__ = ["Component"]
