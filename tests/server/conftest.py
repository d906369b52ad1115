"""Pytest fixtures for server module testing."""

import queue
import threading
from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from gateway.errors import ActuatorError, UpstreamFetchError
from gateway.pins import PinCache
from gateway.reading import SensorReading
from server.broadcaster import Broadcaster
from server.config import GatewayConfig
from server.context import GatewayContext
from server.main import create_app
from server.poller import SensorPoller


class ControlledSensorSource:
    """Upstream stand-in fed from a queue; an empty queue is a failed fetch."""

    def __init__(self) -> None:
        self.message_queue: queue.Queue[SensorReading | Exception] = queue.Queue()
        self.fetch_count = 0

    def fetch(self, timeout: float = 0.01) -> SensorReading:
        self.fetch_count += 1
        try:
            item = self.message_queue.get(timeout=timeout)
        except queue.Empty as exc:
            raise UpstreamFetchError("no reading") from exc
        if isinstance(item, Exception):
            raise item
        return item


class EventPin:
    def __init__(self, pin_id: int) -> None:
        self.pin_id = pin_id
        self.writes: list[int] = []
        self.written = threading.Event()

    def write(self, level: int) -> None:
        self.writes.append(level)
        self.written.set()

    def close(self) -> None:
        pass


class ControlledPinDriver:
    def __init__(self) -> None:
        self.pins: dict[int, EventPin] = {}
        self.open_calls: list[int] = []
        self.attempted = threading.Event()
        self.closed = False

    def open(self, pin_id: int) -> EventPin:
        self.open_calls.append(pin_id)
        if pin_id == 13:
            self.attempted.set()
            raise ActuatorError("line 13 is reserved")
        pin = EventPin(pin_id)
        self.pins[pin_id] = pin
        self.attempted.set()
        return pin

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def sensor_source() -> ControlledSensorSource:
    return ControlledSensorSource()


@pytest.fixture
def pin_driver() -> ControlledPinDriver:
    return ControlledPinDriver()


@pytest.fixture
def gateway_context(
    sensor_source: ControlledSensorSource,
    pin_driver: ControlledPinDriver,
) -> GatewayContext:
    broadcaster = Broadcaster()
    poller = SensorPoller(sensor_source, broadcaster.publish, interval=0.005)
    return GatewayContext(
        config=GatewayConfig(pin_backend="simulated"),
        pins=PinCache(pin_driver),
        broadcaster=broadcaster,
        poller=poller,
    )


@pytest.fixture
def app(gateway_context: GatewayContext) -> FastAPI:
    return create_app(lambda: gateway_context)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client
