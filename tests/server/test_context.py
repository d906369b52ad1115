"""Tests for gateway context wiring."""

from gateway.pins import SimulatedPinDriver
from server.config import GatewayConfig
from server.context import build_context


def test_remote_logging_disabled_without_endpoint() -> None:
    context = build_context(GatewayConfig(pin_backend="simulated"))
    try:
        assert context.log_gate is None
        assert context.log_sink is None
    finally:
        context.close()


def test_remote_logging_wired_with_endpoint() -> None:
    config = GatewayConfig(
        pin_backend="simulated",
        log_endpoint_url="http://logs.test/ingest",
        log_auth_token="token",
        log_interval_ms=2000,
    )
    context = build_context(config)
    try:
        assert context.log_gate is not None
        assert context.log_sink is not None
    finally:
        context.close()


def test_simulated_backend_writes_pins() -> None:
    context = build_context(GatewayConfig(pin_backend="simulated"))
    try:
        context.pins.write(21, 1)
        handle = context.pins.get_or_create(21)
        assert isinstance(context.pins._driver, SimulatedPinDriver)
        assert handle.level == 1  # type: ignore[attr-defined]
    finally:
        context.close()
