"""Real-time event stream over WebSocket.

Each connection first receives ``current-state`` and then every
``new-gossip``, ``gossip-display`` and ``countdown`` event as
``{"event": ..., "data": ...}`` JSON messages.  Anything the client sends is
ignored.
"""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from gossipcast.broadcast import Subscription
from gossipcast.state import AppState

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


async def _forward(websocket: WebSocket, sub: Subscription) -> None:
    while True:
        message = await sub.receive()
        await websocket.send_json(message)
        if sub.closed and sub.queue.empty():
            return


async def _wait_for_disconnect(websocket: WebSocket) -> None:
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return


@router.websocket("/ws")
async def events(websocket: WebSocket):
    state: AppState = websocket.app.state.gossip
    await websocket.accept()
    sub = state.gateway.connect(state.scheduler.current_state())

    tasks = {
        asyncio.create_task(_forward(websocket, sub)),
        asyncio.create_task(_wait_for_disconnect(websocket)),
    }
    try:
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for task in done:
            exc = task.exception()
            if exc is not None and not isinstance(exc, WebSocketDisconnect):
                logger.warning("Observer %d stream ended with error: %s", sub.id, exc)
    finally:
        # Also reached when the handler itself is cancelled (server shutdown).
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        state.gateway.disconnect(sub)
