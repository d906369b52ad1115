"""Manages active WebSocket subscriber queues and message broadcasting."""

import asyncio
import threading

from gateway.reading import SensorReading
from server.formatters import format_reading_message

__all__ = ["Broadcaster"]

_QUEUE_MAX_SIZE = 10


def _enqueue_message(queue: asyncio.Queue[str], message: str) -> None:
    if queue.full():
        queue.get_nowait()
    queue.put_nowait(message)


class Broadcaster:
    """Fans out readings to every connected subscriber queue.

    ``publish`` may be called from any thread. Messages are handed to the
    event loop with ``call_soon_threadsafe``, which runs callbacks in FIFO
    order, so subscribers see readings in the order they were published.
    A full queue drops its oldest message so a slow client never stalls the
    poller.
    """

    def __init__(self, queue_max_size: int = _QUEUE_MAX_SIZE) -> None:
        self._queue_max_size = queue_max_size
        self._subscribers: list[asyncio.Queue[str]] = []
        self._lock = threading.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None

    def bind(self, loop: asyncio.AbstractEventLoop) -> None:
        """Attach the event loop that owns the subscriber queues."""
        self._loop = loop

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def add_subscriber(self) -> asyncio.Queue[str]:
        """Create and register a queue that receives future messages only."""
        queue: asyncio.Queue[str] = asyncio.Queue(maxsize=self._queue_max_size)
        with self._lock:
            self._subscribers.append(queue)
        return queue

    def remove_subscriber(self, queue: asyncio.Queue[str]) -> None:
        """Stop delivering to *queue*. Unknown queues are ignored."""
        with self._lock:
            if queue in self._subscribers:
                self._subscribers.remove(queue)

    def broadcast_message(self, message: str) -> None:
        """Dispatch a preformatted message to all active subscriber queues."""
        if self._loop is None:
            raise RuntimeError("Broadcaster.bind() must be called before publishing.")
        with self._lock:
            subscribers = list(self._subscribers)
        for queue in subscribers:
            self._loop.call_soon_threadsafe(_enqueue_message, queue, message)

    def publish(self, reading: SensorReading) -> None:
        """Format *reading* once and broadcast it."""
        self.broadcast_message(format_reading_message(reading))
