# /teacherboard/routers/subscriptions.py

"""Bridges store subscriptions, which call back on the writer's thread, onto a WebSocket."""

import asyncio
import logging
from typing import Any, Callable

from fastapi import WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)


async def stream_snapshots(
    websocket: WebSocket,
    subscribe: Callable[[Callable[[Any], None]], Callable[[], None]],
    message_type: str,
    transform: Callable[[Any], Any] = lambda snapshot: snapshot,
) -> None:
    """
    Sends `{"type": message_type, "payload": ...}` for the initial snapshot and
    for every change after it, until the client disconnects.
    """
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    def on_snapshot(snapshot):
        loop.call_soon_threadsafe(queue.put_nowait, transform(snapshot))

    # Subscribing reads the initial snapshot from the database.
    unsubscribe = await asyncio.to_thread(subscribe, on_snapshot)
    receiver = asyncio.ensure_future(websocket.receive_text())
    try:
        while True:
            getter = asyncio.ensure_future(queue.get())
            done, _ = await asyncio.wait({getter, receiver}, return_when=asyncio.FIRST_COMPLETED)
            if receiver in done:
                getter.cancel()
                # Raises WebSocketDisconnect when the client has gone away.
                receiver.result()
                receiver = asyncio.ensure_future(websocket.receive_text())
                continue
            await websocket.send_json({"type": message_type, "payload": getter.result()})
    except WebSocketDisconnect:
        logger.info("%s subscriber disconnected", message_type)
    finally:
        receiver.cancel()
        unsubscribe()
