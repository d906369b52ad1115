"""HTTP client for the upstream sensor-fusion service.

The upstream daemon serves the latest fused reading on a single ``GET``
endpoint. The client does not retry. A failed request is reported as
``UpstreamFetchError`` and the caller simply tries again on its next tick.
"""

import logging
from types import TracebackType

import requests

from gateway.errors import ReadingFormatError, UpstreamFetchError
from gateway.reading.parser import parse_reading
from gateway.reading.types import SensorReading

__all__ = ["SensorClient"]

logger = logging.getLogger(__name__)

_SENSOR_URL = "http://localhost:9090/sensors"
_TIMEOUT = 0.08  # seconds; must stay below the poll period


class SensorClient:
    """Fetches SensorReading values from the upstream sensor endpoint.

    Can be used directly or as a context manager that closes the underlying
    ``requests.Session`` on exit::

        with SensorClient("http://localhost:9090/sensors") as client:
            reading = client.fetch()

    Args:
        url: Sensor endpoint URL.
        timeout: Per-request timeout in seconds, applied to both connect and
            read.
        session: Optional pre-configured session, mainly for tests.
    """

    def __init__(
        self,
        url: str = _SENSOR_URL,
        timeout: float = _TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._session = session if session is not None else requests.Session()
        self._warned_legacy = False

    @property
    def url(self) -> str:
        return self._url

    def __enter__(self) -> "SensorClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP session."""
        self._session.close()

    def fetch(self) -> SensorReading:
        """Issue one GET request and parse the body.

        Returns:
            The latest reading published by the upstream service.

        Raises:
            UpstreamFetchError: On network error, timeout, non-2xx status,
                invalid JSON, or a body that does not match the wire shape.
        """
        try:
            response = self._session.get(self._url, timeout=self._timeout)
        except requests.RequestException as exc:
            raise UpstreamFetchError(f"GET {self._url} failed: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise UpstreamFetchError(
                f"GET {self._url} returned status {response.status_code}."
            )

        try:
            reading = parse_reading(response.json())
        except ValueError as exc:
            raise UpstreamFetchError(f"Invalid JSON from {self._url}: {exc}") from exc
        except ReadingFormatError as exc:
            raise UpstreamFetchError(f"Malformed reading from {self._url}: {exc}") from exc

        if reading.source_timestamp is None and not self._warned_legacy:
            self._warned_legacy = True
            logger.warning(
                "Sensor service at %s sends readings without 'timestamp'; "
                "this payload variant is deprecated.",
                self._url,
            )
        return reading
