"""Gateway configuration loaded from environment variables."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from gateway.errors import ConfigError

__all__ = ["GatewayConfig"]

_PIN_BACKENDS = ("gpiod", "simulated")


def _get_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}.") from exc


def _get_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}.") from exc


@dataclass(frozen=True)
class GatewayConfig:
    host: str = "0.0.0.0"
    port: int = 8000
    sensor_url: str = "http://localhost:9090/sensors"
    poll_interval_ms: int = 100
    fetch_timeout_ms: int = 80  # must be shorter than poll_interval_ms
    log_endpoint_url: str | None = None  # remote logging disabled when unset
    log_interval_ms: int = 5000
    log_angle_threshold_deg: float = 1.0
    log_auth_token: str = ""
    pin_backend: str = "gpiod"
    gpio_chip: str = "/dev/gpiochip0"
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not 0 < self.port < 65536:
            raise ConfigError(f"Port {self.port} is out of range.")
        if self.poll_interval_ms <= 0:
            raise ConfigError("Poll interval must be positive.")
        if not 0 < self.fetch_timeout_ms < self.poll_interval_ms:
            raise ConfigError(
                f"Fetch timeout ({self.fetch_timeout_ms} ms) must be positive and "
                f"shorter than the poll interval ({self.poll_interval_ms} ms)."
            )
        if self.log_interval_ms <= 0:
            raise ConfigError("Log interval must be positive.")
        if self.log_angle_threshold_deg < 0:
            raise ConfigError("Angle threshold must not be negative.")
        if self.pin_backend not in _PIN_BACKENDS:
            raise ConfigError(
                f"Pin backend must be one of {_PIN_BACKENDS}, got {self.pin_backend!r}."
            )

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "GatewayConfig":
        """Build a config from ``GATEWAY_*`` variables, falling back to defaults.

        ``PORT`` is honoured when ``GATEWAY_PORT`` is unset.

        Raises:
            ConfigError: If a value cannot be parsed or is out of range.
        """
        env = os.environ if env is None else env
        defaults = cls.__dataclass_fields__
        port_default = _get_int(env, "PORT", defaults["port"].default)
        return cls(
            host=env.get("GATEWAY_HOST", defaults["host"].default),
            port=_get_int(env, "GATEWAY_PORT", port_default),
            sensor_url=env.get("GATEWAY_SENSOR_URL", defaults["sensor_url"].default),
            poll_interval_ms=_get_int(
                env, "GATEWAY_POLL_INTERVAL_MS", defaults["poll_interval_ms"].default
            ),
            fetch_timeout_ms=_get_int(
                env, "GATEWAY_FETCH_TIMEOUT_MS", defaults["fetch_timeout_ms"].default
            ),
            log_endpoint_url=env.get("GATEWAY_LOG_ENDPOINT_URL") or None,
            log_interval_ms=_get_int(
                env, "GATEWAY_LOG_INTERVAL_MS", defaults["log_interval_ms"].default
            ),
            log_angle_threshold_deg=_get_float(
                env,
                "GATEWAY_LOG_ANGLE_THRESHOLD_DEG",
                defaults["log_angle_threshold_deg"].default,
            ),
            log_auth_token=env.get("GATEWAY_LOG_AUTH_TOKEN", ""),
            pin_backend=env.get("GATEWAY_PIN_BACKEND", defaults["pin_backend"].default),
            gpio_chip=env.get("GATEWAY_GPIO_CHIP", defaults["gpio_chip"].default),
            log_level=env.get("GATEWAY_LOG_LEVEL", defaults["log_level"].default).upper(),
        )
