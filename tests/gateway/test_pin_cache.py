"""Tests for the actuator pin handle cache."""

import threading
import time

import pytest

from gateway.errors import ActuatorError
from gateway.pins import PinCache


class RecordingPin:
    def __init__(self, pin_id, fail_writes=False):
        self.pin_id = pin_id
        self.fail_writes = fail_writes
        self.writes = []
        self.closed = False

    def write(self, level):
        if self.fail_writes:
            raise ActuatorError("bus error")
        self.writes.append(level)

    def close(self):
        self.closed = True


class RecordingDriver:
    def __init__(self, open_delay=0.0):
        self.opened = []
        self.fail_open = set()
        self.fail_writes = set()
        self.open_delay = open_delay
        self.closed = False

    def open(self, pin_id):
        time.sleep(self.open_delay)
        if pin_id in self.fail_open:
            raise ActuatorError(f"invalid pin {pin_id}")
        pin = RecordingPin(pin_id, fail_writes=pin_id in self.fail_writes)
        self.opened.append(pin)
        return pin

    def close(self):
        self.closed = True


@pytest.fixture
def driver():
    return RecordingDriver()


@pytest.fixture
def cache(driver):
    return PinCache(driver)


class TestGetOrCreate:
    def test_returns_same_handle_twice(self, cache):
        assert cache.get_or_create(17) is cache.get_or_create(17)

    def test_distinct_pins_get_distinct_handles(self, cache, driver):
        assert cache.get_or_create(17) is not cache.get_or_create(18)
        assert len(driver.opened) == 2
        assert len(cache) == 2

    def test_failed_open_is_not_cached(self, cache, driver):
        driver.fail_open.add(99)
        with pytest.raises(ActuatorError):
            cache.get_or_create(99)
        assert 99 not in cache

        driver.fail_open.clear()
        handle = cache.get_or_create(99)
        assert handle.pin_id == 99
        assert 99 in cache

    def test_concurrent_requests_open_one_handle(self):
        driver = RecordingDriver(open_delay=0.01)
        cache = PinCache(driver)
        handles = []

        def _worker():
            handles.append(cache.get_or_create(5))

        threads = [threading.Thread(target=_worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(driver.opened) == 1
        assert all(handle is handles[0] for handle in handles)


class TestWrite:
    def test_unknown_pin_written_twice_opens_once(self, cache, driver):
        cache.write(17, 1)
        cache.write(17, 0)
        assert len(driver.opened) == 1
        assert driver.opened[0].writes == [1, 0]

    def test_write_failure_keeps_handle_cached(self, cache, driver):
        driver.fail_writes.add(4)
        with pytest.raises(ActuatorError):
            cache.write(4, 1)
        assert 4 in cache

        with pytest.raises(ActuatorError):
            cache.write(4, 0)
        assert len(driver.opened) == 1

    def test_set_level_on_cached_handle(self, cache):
        handle = cache.get_or_create(3)
        cache.set_level(handle, 1)
        assert handle.writes == [1]


def test_close_releases_all_handles_and_driver(cache, driver):
    cache.write(1, 1)
    cache.write(2, 1)
    cache.close()
    assert all(pin.closed for pin in driver.opened)
    assert driver.closed
    assert len(cache) == 0
