"""Exception hierarchy for the gateway core.

Every error is handled where it is detected. None of them is allowed to
reach the poll loop or the WebSocket accept loop.
"""

__all__ = [
    "ActuatorError",
    "ConfigError",
    "GatewayError",
    "LogSinkError",
    "MalformedControlRequest",
    "ReadingFormatError",
    "UpstreamFetchError",
]


class GatewayError(Exception):
    """Base class for all gateway errors."""


class UpstreamFetchError(GatewayError):
    """The sensor endpoint failed, timed out, or returned an unusable body."""


class ReadingFormatError(GatewayError):
    """A sensor payload does not match the expected wire shape."""


class ActuatorError(GatewayError):
    """An output line could not be opened or written."""


class LogSinkError(GatewayError):
    """The remote log endpoint rejected or failed a dispatch."""


class MalformedControlRequest(GatewayError):
    """A control message is not a valid pin write."""


class ConfigError(GatewayError, ValueError):
    """A configuration value is missing or out of range."""
