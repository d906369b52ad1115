"""Sensor reading types, wire-format parsing, and the upstream HTTP client."""

from gateway.reading.client import SensorClient
from gateway.reading.parser import parse_reading, reading_to_dict
from gateway.reading.types import FusedAngles, RawMotion, SensorReading

__all__ = [
    "FusedAngles",
    "RawMotion",
    "SensorClient",
    "SensorReading",
    "parse_reading",
    "reading_to_dict",
]
