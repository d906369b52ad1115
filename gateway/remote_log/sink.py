"""Fire-and-forget client for the remote logging endpoint."""

import json
import logging
from concurrent.futures import Future, ThreadPoolExecutor

import requests

from gateway.errors import LogSinkError
from gateway.reading.parser import reading_to_dict
from gateway.reading.types import SensorReading

__all__ = ["LogSink", "build_log_payload"]

logger = logging.getLogger(__name__)

_TIMEOUT = 5.0
_MAX_WORKERS = 2


def build_log_payload(reading: SensorReading, logged_at_ms: int) -> str:
    """Serialize a reading plus its dispatch timestamp as the log body."""
    body = reading_to_dict(reading)
    body["logged_at"] = logged_at_ms
    return json.dumps(body)


class LogSink:
    """Posts readings to the log endpoint from a small worker pool.

    Each dispatch is a single multipart ``POST`` carrying the bearer token in
    the ``token`` field and the JSON body in the ``data`` field. Failures are
    logged and dropped. There is no retry and no backlog.

    Args:
        endpoint_url: URL of the remote log endpoint.
        token: Opaque bearer token expected by the endpoint.
        timeout: Per-request timeout in seconds.
        session: Optional pre-configured session, mainly for tests.
    """

    def __init__(
        self,
        endpoint_url: str,
        token: str,
        timeout: float = _TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self._endpoint_url = endpoint_url
        self._token = token
        self._timeout = timeout
        self._session = session if session is not None else requests.Session()
        self._executor = ThreadPoolExecutor(
            max_workers=_MAX_WORKERS, thread_name_prefix="log-sink"
        )

    def post(self, payload: str) -> None:
        """Send one log entry synchronously.

        Raises:
            LogSinkError: On network error, timeout, or a non-2xx status.
        """
        files = {
            "token": (None, self._token),
            "data": (None, payload, "application/json"),
        }
        try:
            response = self._session.post(
                self._endpoint_url, files=files, timeout=self._timeout
            )
        except requests.RequestException as exc:
            raise LogSinkError(f"POST {self._endpoint_url} failed: {exc}") from exc
        if not 200 <= response.status_code < 300:
            raise LogSinkError(
                f"POST {self._endpoint_url} returned status {response.status_code}."
            )

    def _post_logged(self, payload: str) -> bool:
        try:
            self.post(payload)
        except LogSinkError as exc:
            logger.warning("[Log] Dispatch dropped: %s", exc)
            return False
        return True

    def submit(self, reading: SensorReading, logged_at_ms: int) -> Future[bool] | None:
        """Queue a POST for *reading* and return immediately.

        Returns:
            A future resolving to ``True`` on success and ``False`` on a
            logged failure, or ``None`` if the sink is already closed.
        """
        payload = build_log_payload(reading, logged_at_ms)
        try:
            return self._executor.submit(self._post_logged, payload)
        except RuntimeError:
            logger.warning("[Log] Sink is closed; dropping entry.")
            return None

    def close(self) -> None:
        """Stop accepting entries and close the session without waiting."""
        self._executor.shutdown(wait=False, cancel_futures=True)
        self._session.close()
