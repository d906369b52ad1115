"""Fixed-period sensor polling loop."""

import logging
import threading
import time
from collections.abc import Callable
from typing import Protocol

from gateway.errors import UpstreamFetchError
from gateway.reading import SensorReading

__all__ = ["SensorPoller", "SensorSource"]

logger = logging.getLogger(__name__)

_POLL_INTERVAL = 0.1  # seconds


class SensorSource(Protocol):
    def fetch(self) -> SensorReading: ...


class SensorPoller:
    """Fetches the latest reading on a fixed period and fans it out.

    Ticks run one after another on the calling thread, so a slow fetch
    delays the next tick instead of overlapping it. When a tick overruns the
    period, the next one starts immediately and the schedule is re-anchored
    rather than firing a burst of catch-up ticks.

    Args:
        source: Upstream reading source, normally a ``SensorClient``.
        publish: Called with every successfully fetched reading.
        evaluate: Called after ``publish``, normally ``LogGate.evaluate``.
            ``None`` when remote logging is disabled.
        interval: Poll period in seconds.
        clock: Monotonic clock used for scheduling.
    """

    def __init__(
        self,
        source: SensorSource,
        publish: Callable[[SensorReading], None],
        evaluate: Callable[[SensorReading], object] | None = None,
        interval: float = _POLL_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._source = source
        self._publish = publish
        self._evaluate = evaluate
        self._interval = interval
        self._clock = clock
        self._lock = threading.Lock()
        self._last_reading: SensorReading | None = None

    @property
    def last_reading(self) -> SensorReading | None:
        """Most recent successfully fetched reading, or ``None``."""
        with self._lock:
            return self._last_reading

    def tick(self) -> bool:
        """Run one poll cycle.

        Returns:
            ``True`` if a reading was fetched and published, ``False`` if the
            fetch failed and the tick was skipped.
        """
        try:
            reading = self._source.fetch()
        except UpstreamFetchError as exc:
            logger.debug("[Polling] Skipping tick: %s", exc)
            return False

        with self._lock:
            self._last_reading = reading
        self._publish(reading)
        if self._evaluate is not None:
            self._evaluate(reading)
        return True

    def _safe_tick(self) -> None:
        try:
            self.tick()
        except Exception:
            logger.exception("[Polling] Unexpected error during tick.")

    def run(self, stop: threading.Event) -> None:
        """Poll until *stop* is set.

        Intended to run on a worker thread. Returns within one poll period
        (plus any in-flight fetch) after *stop* is set.
        """
        logger.info("[Polling] Started with a %.0f ms period.", self._interval * 1000)
        next_tick = self._clock()
        while not stop.is_set():
            self._safe_tick()
            next_tick += self._interval
            delay = next_tick - self._clock()
            if delay < 0:
                next_tick = self._clock()
                delay = 0.0
            if stop.wait(delay):
                break
        logger.info("[Polling] Stopped.")
