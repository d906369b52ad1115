"""Core of the sensor gateway: readings, actuator pins, and remote logging."""

from gateway.errors import (
    ActuatorError,
    ConfigError,
    GatewayError,
    LogSinkError,
    MalformedControlRequest,
    ReadingFormatError,
    UpstreamFetchError,
)
from gateway.pins import GpiodPinDriver, PinCache, SimulatedPinDriver
from gateway.reading import SensorClient, SensorReading, parse_reading
from gateway.remote_log import LogGate, LogSink, LogThrottleState

__all__ = [
    "ActuatorError",
    "ConfigError",
    "GatewayError",
    "GpiodPinDriver",
    "LogGate",
    "LogSink",
    "LogSinkError",
    "LogThrottleState",
    "MalformedControlRequest",
    "PinCache",
    "ReadingFormatError",
    "SensorClient",
    "SensorReading",
    "SimulatedPinDriver",
    "UpstreamFetchError",
    "parse_reading",
]
