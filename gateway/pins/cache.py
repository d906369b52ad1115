"""Process-wide cache of actuator pin handles.

Handles are created on first use and kept until ``close``. There is no
per-entry eviction. A pin whose write fails stays cached and the next write
reuses the same handle.
"""

import logging
import threading

from gateway.errors import ActuatorError
from gateway.pins.driver import PinDriver, PinHandle

__all__ = ["PinCache"]

logger = logging.getLogger(__name__)


class PinCache:
    """Maps pin identifiers to lazily opened handles, at most one per pin.

    All public methods are thread-safe. ``get_or_create`` holds the cache lock
    while the driver opens a line, so two concurrent requests for the same
    pin cannot open two handles.

    Args:
        driver: Hardware collaborator that opens output lines.
    """

    def __init__(self, driver: PinDriver) -> None:
        self._driver = driver
        self._handles: dict[int, PinHandle] = {}
        self._lock = threading.Lock()

    def __contains__(self, pin_id: int) -> bool:
        with self._lock:
            return pin_id in self._handles

    def __len__(self) -> int:
        with self._lock:
            return len(self._handles)

    def get_or_create(self, pin_id: int) -> PinHandle:
        """Return the cached handle for *pin_id*, opening it on first use.

        A failed open is not cached, so the next call tries again.

        Raises:
            ActuatorError: If the driver cannot open the line.
        """
        with self._lock:
            handle = self._handles.get(pin_id)
            if handle is None:
                handle = self._driver.open(pin_id)
                self._handles[pin_id] = handle
                logger.info("[GPIO] Pin %d initialized.", pin_id)
            return handle

    def set_level(self, handle: PinHandle, level: int) -> None:
        """Drive *handle* to *level*. The handle stays cached on failure.

        Raises:
            ActuatorError: If the driver rejects the write.
        """
        handle.write(level)
        logger.debug("[GPIO] Pin %d set to %d", handle.pin_id, level)

    def write(self, pin_id: int, level: int) -> None:
        """Open *pin_id* if needed and drive it to *level*.

        Raises:
            ActuatorError: If opening or writing the line fails.
        """
        self.set_level(self.get_or_create(pin_id), level)

    def close(self) -> None:
        """Release every cached handle, then the driver."""
        with self._lock:
            handles = list(self._handles.values())
            self._handles.clear()
        for handle in handles:
            try:
                handle.close()
            except (ActuatorError, OSError) as exc:
                logger.warning("[GPIO] Failed to release pin %d: %s", handle.pin_id, exc)
        self._driver.close()
        logger.info("[GPIO] Released %d pin(s).", len(handles))
