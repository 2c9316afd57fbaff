#!/usr/bin/env python3
"""
Quick example demonstrating home-scenarios basic usage.

Run with: PYTHONPATH=src python3 example.py
"""

from datetime import datetime

from home_scenarios import ManualClock, build_runtime
from home_scenarios.components.device import Device

print("=" * 60)
print("home-scenarios Example")
print("=" * 60)

# 1. Runtime
print("\n1. Building the runtime...")
clock = ManualClock(datetime(2025, 1, 14, 18, 29, 0))
runtime = build_runtime(clock=clock)
print(f"   ✓ Components: {[c.id for c in runtime.components()]}")

# 2. Devices
print("\n2. Adding devices...")
devices = runtime.component("device")
lamp = devices.add(Device("living_room_lamp", {"power": "off"}))
sensor = devices.add(Device("hall_sensor", {"motion": False}))
print(f"   ✓ Added {lamp.name} and {sensor.name}")


def set_lamp(power):
    def callback(scenario, *args):
        lamp.update_attribute("power", power)
        print(f"   → [{scenario.description}] lamp {power}")

    return callback


# 3. Scenarios
print("\n3. Declaring scenarios...")
(
    runtime.scenario("Mood lighting")
    .when()
    .variable("mood").changes()
    .constraint()
    .variable("mood").is_("cosy")
    .then(set_lamp("on"))
    .else_()
    .then(set_lamp("off"))
)

(
    runtime.scenario("Evening lights")
    .when()
    .time.is_("18:30")
    .constraint()
    .day.is_("weekday")
    .device("living_room_lamp").attribute("power").is_("off")
    .then(set_lamp("on"))
)

(
    runtime.scenario("Hall motion", suppress_for="1 min")
    .when()
    .device("hall_sensor").is_("motion")
    .then(lambda scenario: print(f"   → [{scenario.description}] motion in the hall"))
)
print(f"   ✓ Scenarios: {[s.description for s in runtime.scenarios()]}")

# 4. Drive the scenarios
print("\n4. Setting variables...")
runtime.variables.set("mood", "cosy")
runtime.variables.set("mood", "bright")

print("\n5. Advancing the clock past 18:30...")
runtime.scheduler.advance_to(datetime(2025, 1, 14, 18, 31, 0))

print("\n6. Motion, twice within the debounce window...")
sensor.update_attribute("motion", True)
sensor.update_attribute("motion", False)
sensor.update_attribute("motion", True)

print("\n" + "=" * 60)
print(f"Example complete! Lamp is {lamp.get_attribute('power')}.")
print("=" * 60)
