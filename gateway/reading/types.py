"""Sensor reading types produced by the upstream fusion service."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RawMotion:
    """Raw inertial sample as reported by the upstream service.

    Attributes:
        accel_x: Acceleration along X-axis.
        accel_y: Acceleration along Y-axis.
        accel_z: Acceleration along Z-axis.

        gyro_x: Angular rate around X-axis.
        gyro_y: Angular rate around Y-axis.
        gyro_z: Angular rate around Z-axis.
    """

    accel_x: float
    accel_y: float
    accel_z: float
    gyro_x: float
    gyro_y: float
    gyro_z: float


@dataclass(frozen=True)
class FusedAngles:
    """Tilt angles computed by the upstream sensor-fusion filter, in degrees."""

    angle_x_deg: float
    angle_y_deg: float


@dataclass(frozen=True)
class SensorReading:
    """One snapshot of distance, raw inertial data, and fused tilt angles.

    Attributes:
        source_timestamp: Sample counter or timestamp assigned by the
            upstream service. ``None`` for the deprecated payload variant
            that carries no timestamp.
        distance_cm: Range finder distance in centimetres.
        raw_motion: Accelerometer and gyroscope values.
        fused_angles: Tilt angles around X and Y.

    Example:
        >>> with SensorClient("http://localhost:9090/sensors") as client:
        ...     reading = client.fetch()
        >>> reading.fused_angles.angle_x_deg  # board tilted 10 degrees around X
        10.0
        >>> reading.source_timestamp is None  # legacy upstream
        False
    """

    source_timestamp: int | None
    distance_cm: float
    raw_motion: RawMotion
    fused_angles: FusedAngles
