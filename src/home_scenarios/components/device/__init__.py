"""
Device component.

Devices carry named attributes. Attribute updates are published on
"device.<name>" so scenarios can trigger on them.
"""

from .component import DeviceComponent
from .models import DEVICE_TOPIC_PREFIX, AttributeChange, Device, device_topic

__all__ = [
    "DeviceComponent",
    "Device",
    "AttributeChange",
    "DEVICE_TOPIC_PREFIX",
    "device_topic",
]
