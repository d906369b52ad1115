"""Helper factories shared by gateway and server tests."""

from typing import Any

from gateway.reading import FusedAngles, RawMotion, SensorReading


def make_reading(
    source_timestamp: int | None = 1,
    angle_x: float = 0.0,
    angle_y: float = 0.0,
    distance_cm: float = 42.5,
) -> SensorReading:
    return SensorReading(
        source_timestamp=source_timestamp,
        distance_cm=distance_cm,
        raw_motion=RawMotion(
            accel_x=0.01,
            accel_y=-0.02,
            accel_z=0.98,
            gyro_x=0.1,
            gyro_y=0.0,
            gyro_z=-0.3,
        ),
        fused_angles=FusedAngles(angle_x_deg=angle_x, angle_y_deg=angle_y),
    )


def make_payload(with_timestamp: bool = True) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "distance_cm": 42.5,
        "raw_data": {
            "accel_x": 0.01,
            "accel_y": -0.02,
            "accel_z": 0.98,
            "gyro_x": 0.1,
            "gyro_y": 0.0,
            "gyro_z": -0.3,
        },
        "fused_data": {"angle_x_deg": 1.25, "angle_y_deg": -0.5},
    }
    if with_timestamp:
        payload["timestamp"] = 1712
    return payload
