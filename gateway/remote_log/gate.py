"""Throttle and dedup policy for remote logging of sensor readings.

A reading is sent to the log sink when it is new and either enough time has
passed or the tilt has changed noticeably::

    data_has_updated   = ts is None or ts != last_source_timestamp
    time_elapsed       = now - last_log_time > interval
    significant_change = |dx| > threshold or |dy| > threshold

    dispatch = data_has_updated and (time_elapsed or significant_change)

Readings without a source timestamp always count as new. The throttle state
advances before the sink runs, so a slow or failing sink cannot cause a
burst of repeated dispatches on the following ticks.
"""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from gateway.reading.types import SensorReading

__all__ = ["LogGate", "LogThrottleState"]

logger = logging.getLogger(__name__)

_LOG_INTERVAL = 5.0  # seconds
_ANGLE_THRESHOLD_DEG = 1.0


@dataclass
class LogThrottleState:
    """What the gate remembers about the last dispatch.

    Attributes:
        last_log_time: Monotonic seconds of the last dispatch attempt, or
            ``None`` if nothing has been dispatched yet.
        last_angle_x: Fused X angle of the last dispatched reading.
        last_angle_y: Fused Y angle of the last dispatched reading.
        last_source_timestamp: Source timestamp of the last dispatched
            reading, or ``None`` if none carried one.
    """

    last_log_time: float | None = None
    last_angle_x: float = 0.0
    last_angle_y: float = 0.0
    last_source_timestamp: int | None = None


class LogGate:
    """Decides which readings are forwarded to the remote log sink.

    Args:
        sink: Called as ``sink(reading, logged_at_ms)`` for each dispatch. It
            must not block; ``LogSink.submit`` hands the POST to a worker
            thread.
        interval: Seconds after which an unchanged reading is logged again.
        angle_threshold_deg: Tilt change that triggers an early dispatch.
        monotonic: Clock used for the throttle interval.
        wall_clock: Clock used for the dispatch timestamp, in epoch seconds.
    """

    def __init__(
        self,
        sink: Callable[[SensorReading, int], object],
        interval: float = _LOG_INTERVAL,
        angle_threshold_deg: float = _ANGLE_THRESHOLD_DEG,
        monotonic: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], float] = time.time,
    ) -> None:
        self._sink = sink
        self._interval = interval
        self._threshold = angle_threshold_deg
        self._monotonic = monotonic
        self._wall_clock = wall_clock
        self._lock = threading.Lock()
        self.state = LogThrottleState()

    def _should_dispatch(self, reading: SensorReading, now: float) -> bool:
        state = self.state
        timestamp = reading.source_timestamp
        data_has_updated = timestamp is None or timestamp != state.last_source_timestamp
        if not data_has_updated:
            return False

        time_elapsed = (
            state.last_log_time is None or now - state.last_log_time > self._interval
        )
        angles = reading.fused_angles
        significant_change = (
            abs(angles.angle_x_deg - state.last_angle_x) > self._threshold
            or abs(angles.angle_y_deg - state.last_angle_y) > self._threshold
        )
        return time_elapsed or significant_change

    def evaluate(self, reading: SensorReading) -> bool:
        """Dispatch *reading* to the sink if the throttle policy allows it.

        Returns:
            ``True`` if the reading was handed to the sink.
        """
        with self._lock:
            now = self._monotonic()
            if not self._should_dispatch(reading, now):
                return False
            state = self.state
            state.last_log_time = now
            state.last_angle_x = reading.fused_angles.angle_x_deg
            state.last_angle_y = reading.fused_angles.angle_y_deg
            if reading.source_timestamp is not None:
                state.last_source_timestamp = reading.source_timestamp

        logged_at_ms = int(self._wall_clock() * 1000)
        logger.debug("Dispatching reading %s to log sink.", reading.source_timestamp)
        self._sink(reading, logged_at_ms)
        return True
