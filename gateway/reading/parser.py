"""Conversion between the upstream JSON wire shape and SensorReading.

Canonical payload::

    {
        "timestamp": 1712,
        "distance_cm": 42.5,
        "raw_data": {"accel_x": 0.01, "accel_y": -0.02, "accel_z": 0.98,
                     "gyro_x": 0.1, "gyro_y": 0.0, "gyro_z": -0.3},
        "fused_data": {"angle_x_deg": 1.25, "angle_y_deg": -0.5}
    }

Payloads without ``"timestamp"`` come from the older upstream daemon. They
are still accepted, but the field is deprecated and they parse with
``source_timestamp=None``.
"""

import math
from typing import Any

from gateway.errors import ReadingFormatError
from gateway.reading.types import FusedAngles, RawMotion, SensorReading

__all__ = ["parse_reading", "reading_to_dict"]

_RAW_FIELDS = ("accel_x", "accel_y", "accel_z", "gyro_x", "gyro_y", "gyro_z")
_FUSED_FIELDS = ("angle_x_deg", "angle_y_deg")


def _parse_float(obj: dict[str, Any], key: str) -> float:
    value = obj.get(key)
    # bool is an int subclass but never a valid measurement
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ReadingFormatError(f"Field {key!r} must be a number, got {value!r}.")
    result = float(value)
    if not math.isfinite(result):
        raise ReadingFormatError(f"Field {key!r} is not finite.")
    return result


def _parse_object(payload: dict[str, Any], key: str) -> dict[str, Any]:
    value = payload.get(key)
    if not isinstance(value, dict):
        raise ReadingFormatError(f"Field {key!r} must be an object.")
    return value


def _parse_timestamp(payload: dict[str, Any]) -> int | None:
    value = payload.get("timestamp")
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ReadingFormatError(f"Field 'timestamp' must be an integer, got {value!r}.")
    return value


def parse_reading(payload: Any) -> SensorReading:
    """Build a SensorReading from a decoded JSON payload.

    Args:
        payload: The decoded response body of the sensor endpoint.

    Returns:
        The parsed reading. ``source_timestamp`` is ``None`` when the
        payload uses the deprecated variant without ``"timestamp"``.

    Raises:
        ReadingFormatError: If a required field is missing or has the wrong
            type.
    """
    if not isinstance(payload, dict):
        raise ReadingFormatError("Sensor payload must be a JSON object.")

    raw = _parse_object(payload, "raw_data")
    fused = _parse_object(payload, "fused_data")
    return SensorReading(
        source_timestamp=_parse_timestamp(payload),
        distance_cm=_parse_float(payload, "distance_cm"),
        raw_motion=RawMotion(*(_parse_float(raw, name) for name in _RAW_FIELDS)),
        fused_angles=FusedAngles(
            *(_parse_float(fused, name) for name in _FUSED_FIELDS)
        ),
    )


def reading_to_dict(reading: SensorReading) -> dict[str, Any]:
    """Return the reading in its wire shape, ready for ``json.dumps``."""
    raw = reading.raw_motion
    angles = reading.fused_angles
    return {
        "timestamp": reading.source_timestamp,
        "distance_cm": reading.distance_cm,
        "raw_data": {
            "accel_x": raw.accel_x,
            "accel_y": raw.accel_y,
            "accel_z": raw.accel_z,
            "gyro_x": raw.gyro_x,
            "gyro_y": raw.gyro_y,
            "gyro_z": raw.gyro_z,
        },
        "fused_data": {
            "angle_x_deg": angles.angle_x_deg,
            "angle_y_deg": angles.angle_y_deg,
        },
    }
