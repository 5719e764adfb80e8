"""FastAPI service bridging NMEA sentences to XGPS multicast.

Start with::

    XGPS_GPSD_ENABLED=1 uvicorn server.main:app --host 0.0.0.0 --port 8000

Settings come from ``XGPS_*`` environment variables (see
``server.config.BridgeSettings``). The service owns one multicast
forwarder. Sentences reach it two ways:

* from gpsd, when ``XGPS_GPSD_ENABLED`` is set, in a background thread;
* from clients connected to ``ws://<host>:8000/ws/nmea``, each sending
  text frames of one or more NMEA sentences (one per line). Every
  connection has its own accumulator and receives back the XGPS messages
  its sentences produced.

``GET /status`` reports the forwarder counters.
"""

import asyncio
import contextlib
import dataclasses
import logging
from collections.abc import AsyncIterator
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect

from gnssbridge.fix import FixAccumulator
from gnssbridge.forwarder import UdpForwarder
from gnssbridge.gpsd import NmeaReader
from server.config import BridgeSettings
from server.ingest import forward_sentences, run_gpsd_loop

logger = logging.getLogger(__name__)


async def _receive_until_disconnect(
    websocket: WebSocket,
    accumulator: FixAccumulator,
    forwarder: UdpForwarder,
) -> None:
    try:
        while True:
            text = await websocket.receive_text()
            for message in forward_sentences(
                text.splitlines(), accumulator, forwarder
            ):
                await websocket.send_text(message)
    except WebSocketDisconnect:
        pass


@contextlib.asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    settings = BridgeSettings.from_env()
    loop = asyncio.get_running_loop()

    with contextlib.ExitStack() as stack:
        forwarder = stack.enter_context(
            UdpForwarder(
                settings.group,
                settings.port,
                interface_selector=settings.make_interface_selector(),
            )
        )
        application.state.settings = settings
        application.state.forwarder = forwarder

        if settings.gpsd_enabled:
            reader = stack.enter_context(
                NmeaReader(settings.gpsd_host, settings.gpsd_port)
            )
            executor = ThreadPoolExecutor(max_workers=1)
            # Unwound in reverse: cancel the read, wait for the thread, close
            stack.callback(executor.shutdown, wait=True)
            stack.callback(reader.cancel)
            accumulator = FixAccumulator(settings.make_policy())
            loop.run_in_executor(
                executor, run_gpsd_loop, reader, accumulator, forwarder
            )
            logger.info(
                "Reading NMEA from gpsd at %s:%d",
                settings.gpsd_host,
                settings.gpsd_port,
            )

        yield


app = FastAPI(lifespan=_lifespan)


@app.get("/status")
async def status(request: Request) -> dict[str, Any]:
    """Return the destination and counters of the multicast forwarder."""
    settings: BridgeSettings = request.app.state.settings
    forwarder: UdpForwarder = request.app.state.forwarder
    return {
        "group": settings.group,
        "port": settings.port,
        "policy": settings.policy,
        "running": forwarder.is_running,
        **dataclasses.asdict(forwarder.stats),
    }


@app.websocket("/ws/nmea")
async def nmea_endpoint(websocket: WebSocket) -> None:
    """Accept NMEA sentences from a client and forward the resulting fixes.

    Each connection is one client session with its own ``FixAccumulator``,
    so sentences from different clients are never merged. Every XGPS
    message produced is queued for multicast and echoed to the client.

    Args:
        websocket: The incoming WebSocket connection.
    """
    await websocket.accept()
    settings: BridgeSettings = websocket.app.state.settings
    accumulator = FixAccumulator(settings.make_policy())
    await _receive_until_disconnect(
        websocket, accumulator, websocket.app.state.forwarder
    )
