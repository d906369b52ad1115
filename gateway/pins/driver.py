"""Digital output drivers for actuator pins.

Two drivers implement the same small interface:

    ``GpiodPinDriver``
        Requests each pin as an output line through libgpiod v2. The pin
        identifier is the line offset on the configured chip.
    ``SimulatedPinDriver``
        Keeps pin levels in memory. Used on machines without GPIO hardware.

A driver opens one handle per call to ``open``. Caching and reuse of those
handles is the job of ``PinCache``, not the driver.
"""

import logging
from typing import Protocol

import gpiod
from gpiod.line import Direction, Value

from gateway.errors import ActuatorError

__all__ = [
    "GpiodPin",
    "GpiodPinDriver",
    "PinDriver",
    "PinHandle",
    "SimulatedPin",
    "SimulatedPinDriver",
]

logger = logging.getLogger(__name__)

# --- Hardware defaults -------------------------------------------------------

_GPIO_CHIP = "/dev/gpiochip0"
_CONSUMER = "sensor-gateway"

_PIN_MIN = 0
_PIN_MAX = 255


def _check_level(level: int) -> Value:
    if level not in (0, 1):
        raise ActuatorError(f"Output level must be 0 or 1, got {level!r}.")
    return Value.ACTIVE if level == 1 else Value.INACTIVE


# --- Interfaces --------------------------------------------------------------


class PinHandle(Protocol):
    """An opened output line."""

    pin_id: int

    def write(self, level: int) -> None: ...

    def close(self) -> None: ...


class PinDriver(Protocol):
    """Factory for output line handles."""

    def open(self, pin_id: int) -> PinHandle: ...

    def close(self) -> None: ...


# --- libgpiod ----------------------------------------------------------------


class GpiodPin:
    """A single output line held by a gpiod ``LineRequest``."""

    def __init__(self, request: gpiod.LineRequest, pin_id: int) -> None:
        self.pin_id = pin_id
        self._request: gpiod.LineRequest | None = request

    def write(self, level: int) -> None:
        """Drive the line to *level*.

        Raises:
            ActuatorError: If the level is not 0 or 1, the handle was
                released, or the kernel rejects the write.
        """
        value = _check_level(level)
        if self._request is None:
            raise ActuatorError(f"Pin {self.pin_id} has been released.")
        try:
            self._request.set_value(self.pin_id, value)
        except OSError as exc:
            raise ActuatorError(f"Failed to write pin {self.pin_id}: {exc}") from exc

    def close(self) -> None:
        """Release the line back to the kernel."""
        if self._request is not None:
            self._request.release()
            self._request = None


class GpiodPinDriver:
    """Opens output lines on one GPIO chip via libgpiod.

    The chip is opened on the first ``open`` call and closed by ``close``.
    Callers serialize ``open`` calls (``PinCache`` holds its lock around it).

    Args:
        gpio_chip: Path to the GPIO chip device (default: ``/dev/gpiochip0``).
        consumer: Consumer label shown by ``gpioinfo`` for requested lines.
    """

    def __init__(self, gpio_chip: str = _GPIO_CHIP, consumer: str = _CONSUMER) -> None:
        self._gpio_chip = gpio_chip
        self._consumer = consumer
        self._chip: gpiod.Chip | None = None

    def open(self, pin_id: int) -> GpiodPin:
        """Request *pin_id* as an output line, initially inactive.

        Raises:
            ActuatorError: If the identifier is outside 0-255, the chip cannot
                be opened, or the line is invalid or busy.
        """
        if not _PIN_MIN <= pin_id <= _PIN_MAX:
            raise ActuatorError(f"Pin {pin_id} is outside {_PIN_MIN}-{_PIN_MAX}.")
        settings = gpiod.LineSettings(
            direction=Direction.OUTPUT,
            output_value=Value.INACTIVE,
        )
        try:
            if self._chip is None:
                self._chip = gpiod.Chip(self._gpio_chip)
            request = self._chip.request_lines(
                consumer=self._consumer,
                config={pin_id: settings},
            )
        except (OSError, ValueError) as exc:
            raise ActuatorError(f"Failed to open pin {pin_id}: {exc}") from exc
        return GpiodPin(request, pin_id)

    def close(self) -> None:
        """Close the chip. Handles must be released first."""
        if self._chip is not None:
            self._chip.close()
            self._chip = None


# --- Simulation --------------------------------------------------------------


class SimulatedPin:
    """In-memory stand-in for an output line."""

    def __init__(self, pin_id: int) -> None:
        self.pin_id = pin_id
        self.level = 0
        self.closed = False

    def write(self, level: int) -> None:
        _check_level(level)
        if self.closed:
            raise ActuatorError(f"Pin {self.pin_id} has been released.")
        self.level = level
        logger.info("[sim] Pin %d -> %d", self.pin_id, level)

    def close(self) -> None:
        self.closed = True


class SimulatedPinDriver:
    """Driver that accepts any identifier in 0-255 and records levels."""

    def __init__(self) -> None:
        self.pins: dict[int, SimulatedPin] = {}

    def open(self, pin_id: int) -> SimulatedPin:
        if not _PIN_MIN <= pin_id <= _PIN_MAX:
            raise ActuatorError(f"Pin {pin_id} is outside {_PIN_MIN}-{_PIN_MAX}.")
        pin = SimulatedPin(pin_id)
        self.pins[pin_id] = pin
        return pin

    def close(self) -> None:
        pass
