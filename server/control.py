"""Inbound actuator control messages.

Clients send pin writes over the same WebSocket they receive readings on::

    {"type": "gpio_write", "pin": 17, "value": 1}

Malformed messages are rejected before the pin cache is touched. Actuator
failures are only logged. The client gets no error reply.
"""

import logging
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError

from gateway.errors import ActuatorError, MalformedControlRequest
from gateway.pins import PinCache

__all__ = [
    "PinWriteRequest",
    "apply_pin_write",
    "handle_control_message",
    "parse_control_message",
]

logger = logging.getLogger(__name__)


class PinWriteRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["gpio_write"] = "gpio_write"
    pin: StrictInt = Field(ge=0, le=255)
    value: StrictInt = Field(ge=0, le=1)


def parse_control_message(text: str) -> PinWriteRequest:
    """Validate a raw WebSocket text frame as a pin write.

    Raises:
        MalformedControlRequest: If the text is not JSON or does not match
            ``PinWriteRequest``.
    """
    try:
        return PinWriteRequest.model_validate_json(text)
    except ValidationError as exc:
        errors = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'body'}: {error['msg']}"
            for error in exc.errors()
        )
        raise MalformedControlRequest(errors) from exc


def apply_pin_write(pins: PinCache, request: PinWriteRequest) -> bool:
    """Drive the requested pin, logging rather than raising on failure.

    Returns:
        ``True`` if the level was written.
    """
    try:
        pins.write(request.pin, request.value)
    except ActuatorError as exc:
        logger.warning("[GPIO] Failed to write to pin %d: %s", request.pin, exc)
        return False
    logger.info("[GPIO] Pin %d set to %d", request.pin, request.value)
    return True


def handle_control_message(pins: PinCache, text: str) -> bool:
    """Parse and apply one control message. Never raises."""
    try:
        request = parse_control_message(text)
    except MalformedControlRequest as exc:
        logger.warning("[Control] Rejected message: %s", exc)
        return False
    return apply_pin_write(pins, request)
