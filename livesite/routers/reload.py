import asyncio
import logging

from fastapi import APIRouter, Depends, WebSocket

from livesite import dependencies as deps
from livesite.services.broadcaster import ReloadBroadcaster

logger = logging.getLogger(__name__)

router = APIRouter()

RELOAD_MESSAGE = "reload"


@router.websocket("/ws")
async def reload_subscription(
    websocket: WebSocket,
    broadcaster: ReloadBroadcaster = Depends(deps.get_broadcaster),
):
    """
    Wait for the next reload signal, send "reload" once, then close.

    Subscribing happens before the handshake completes, so a signal
    published after the client is connected is never missed.
    """
    subscription = broadcaster.subscribe()
    try:
        await websocket.accept()

        signal = asyncio.create_task(broadcaster.wait(subscription))
        disconnect = asyncio.create_task(_wait_for_disconnect(websocket))
        done, pending = await asyncio.wait(
            {signal, disconnect}, return_when=asyncio.FIRST_COMPLETED
        )
        for task in pending:
            task.cancel()

        if signal not in done:
            logger.debug("Reload subscriber disconnected")
            return

        try:
            await websocket.send_text(RELOAD_MESSAGE)
            await websocket.close()
        except Exception as e:
            logger.debug(f"Client disconnected before reload message could be sent: {e}")
    finally:
        broadcaster.unsubscribe(subscription)


async def _wait_for_disconnect(websocket: WebSocket) -> None:
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return
