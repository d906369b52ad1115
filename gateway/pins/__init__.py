"""Actuator output pins: drivers and the handle cache."""

from gateway.pins.cache import PinCache
from gateway.pins.driver import (
    GpiodPinDriver,
    PinDriver,
    PinHandle,
    SimulatedPinDriver,
)

__all__ = [
    "GpiodPinDriver",
    "PinCache",
    "PinDriver",
    "PinHandle",
    "SimulatedPinDriver",
]
