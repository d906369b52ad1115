"""FastAPI application gateway for sensor streaming and pin control.

Start with::

    uvicorn server.main:app --host 0.0.0.0 --port 8000

or ``python main.py``, which reads the same ``GATEWAY_*`` settings.

WebSocket clients connect to ``ws://<host>:8000/ws``. They receive one
``type="sensor_data"`` JSON message per successful upstream poll (about
10 Hz), and may send ``{"type": "gpio_write", "pin": N, "value": 0|1}``
messages on the same socket to drive output pins.
"""

import asyncio
import logging
import threading
from collections.abc import AsyncIterator, Callable
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import APIRouter, FastAPI, HTTPException, Request, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from starlette.requests import HTTPConnection

from gateway.pins import PinCache
from gateway.reading import reading_to_dict
from server.config import GatewayConfig
from server.context import GatewayContext, build_context
from server.control import handle_control_message

__all__ = ["app", "create_app"]

logger = logging.getLogger(__name__)

_STATIC_DIR = Path(__file__).parent / "static"
_INDEX_FILE = _STATIC_DIR / "index.html"

router = APIRouter()


def _gateway(connection: HTTPConnection) -> GatewayContext:
    return connection.app.state.gateway


def _describe_client(websocket: WebSocket) -> str:
    if websocket.client is None:
        return "unknown"
    return f"{websocket.client.host}:{websocket.client.port}"


async def _send_messages_until_disconnect(
    queue: asyncio.Queue[str],
    websocket: WebSocket,
) -> None:
    try:
        while True:
            message = await queue.get()
            await websocket.send_text(message)
    except WebSocketDisconnect:
        pass


async def _receive_control_messages(websocket: WebSocket, pins: PinCache) -> None:
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return
        text = message.get("text")
        if text is None:
            logger.warning("[Control] Ignoring binary frame.")
            continue
        handle_control_message(pins, text)


@router.get("/")
async def index() -> FileResponse:
    """Serve the dashboard page."""
    return FileResponse(_INDEX_FILE)


@router.get("/api/sensors/latest")
async def latest_reading(request: Request) -> dict:
    """Return the most recent reading fetched from the sensor service.

    Responds with 503 until the first successful poll.
    """
    reading = _gateway(request).poller.last_reading
    if reading is None:
        raise HTTPException(status_code=503, detail="No sensor reading available yet.")
    return reading_to_dict(reading)


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    """Stream readings to a client and accept its pin writes.

    Each client gets its own bounded queue. The oldest message is dropped
    when the queue is full so slow clients do not stall the poller. During an
    upstream outage the client simply receives nothing until polling
    recovers.

    Args:
        websocket: The incoming WebSocket connection.
    """
    context = _gateway(websocket)
    await websocket.accept()
    client = _describe_client(websocket)
    logger.info("[WebSocket] Client connected: %s", client)

    queue = context.broadcaster.add_subscriber()
    sender = asyncio.create_task(_send_messages_until_disconnect(queue, websocket))
    try:
        await _receive_control_messages(websocket, context.pins)
    finally:
        context.broadcaster.remove_subscriber(queue)
        sender.cancel()
        await asyncio.gather(sender, return_exceptions=True)
        logger.info("[WebSocket] Client disconnected: %s", client)


def _default_context() -> GatewayContext:
    return build_context(GatewayConfig.from_env())


def create_app(
    context_factory: Callable[[], GatewayContext] = _default_context,
) -> FastAPI:
    """Build the gateway application.

    The context is created when the application starts, not at import time,
    so importing this module never touches hardware or the network.

    Args:
        context_factory: Builds the gateway context on startup.
    """

    @asynccontextmanager
    async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
        context = context_factory()
        loop = asyncio.get_running_loop()
        context.broadcaster.bind(loop)
        application.state.gateway = context

        stop = threading.Event()
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="poller")
        polling = loop.run_in_executor(executor, context.poller.run, stop)
        logger.info("[Gateway] Polling %s", context.config.sensor_url)
        try:
            yield
        finally:
            logger.info("[Gateway] Shutting down; releasing all active pins.")
            stop.set()
            await polling
            executor.shutdown(wait=False)
            context.close()

    application = FastAPI(lifespan=_lifespan)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
    )
    application.include_router(router)
    return application


app = create_app()
