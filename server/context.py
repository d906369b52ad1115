"""Owned runtime state of one gateway instance."""

import logging
from dataclasses import dataclass

from gateway.pins import GpiodPinDriver, PinCache, PinDriver, SimulatedPinDriver
from gateway.reading import SensorClient
from gateway.remote_log import LogGate, LogSink
from server.broadcaster import Broadcaster
from server.config import GatewayConfig
from server.poller import SensorPoller

__all__ = ["GatewayContext", "build_context"]

logger = logging.getLogger(__name__)


@dataclass
class GatewayContext:
    """Everything the transport layer needs, in one place.

    The pin cache, the poller's last reading, and the log throttle state all
    live on the components held here, each behind its own lock.
    """

    config: GatewayConfig
    pins: PinCache
    broadcaster: Broadcaster
    poller: SensorPoller
    sensor_client: SensorClient | None = None
    log_gate: LogGate | None = None
    log_sink: LogSink | None = None

    def close(self) -> None:
        """Release pins, stop the log sink, and close the upstream session."""
        self.pins.close()
        if self.log_sink is not None:
            self.log_sink.close()
        if self.sensor_client is not None:
            self.sensor_client.close()


def _make_pin_driver(config: GatewayConfig) -> PinDriver:
    if config.pin_backend == "simulated":
        return SimulatedPinDriver()
    return GpiodPinDriver(config.gpio_chip)


def build_context(config: GatewayConfig) -> GatewayContext:
    """Wire the real components for *config*."""
    broadcaster = Broadcaster()
    client = SensorClient(config.sensor_url, timeout=config.fetch_timeout_ms / 1000)

    log_sink = None
    log_gate = None
    if config.log_endpoint_url:
        log_sink = LogSink(config.log_endpoint_url, config.log_auth_token)
        log_gate = LogGate(
            log_sink.submit,
            interval=config.log_interval_ms / 1000,
            angle_threshold_deg=config.log_angle_threshold_deg,
        )
    else:
        logger.info("Remote logging disabled: no log endpoint configured.")

    poller = SensorPoller(
        client,
        broadcaster.publish,
        log_gate.evaluate if log_gate is not None else None,
        interval=config.poll_interval_ms / 1000,
    )
    return GatewayContext(
        config=config,
        pins=PinCache(_make_pin_driver(config)),
        broadcaster=broadcaster,
        poller=poller,
        sensor_client=client,
        log_gate=log_gate,
        log_sink=log_sink,
    )
