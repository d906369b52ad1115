"""JSON formatting utilities for sensor data."""

import json

from gateway.reading import SensorReading, reading_to_dict

__all__ = ["format_reading_message"]


def format_reading_message(reading: SensorReading) -> str:
    """Serialize a reading into a ``sensor_data`` event for WebSocket clients."""
    return json.dumps({"type": "sensor_data", **reading_to_dict(reading)})
