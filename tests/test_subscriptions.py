# /tests/test_subscriptions.py

import asyncio
import threading
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import WebSocketDisconnect

from teacherboard.routers.subscriptions import stream_snapshots


@pytest.mark.asyncio
async def test_subscribe_runs_off_the_event_loop_thread():
    loop_thread = threading.get_ident()
    subscribe_threads = []
    unsubscribe = MagicMock()
    client_gone = asyncio.Event()

    def subscribe(callback):
        subscribe_threads.append(threading.get_ident())
        callback(["운동회", "소풍"])
        return unsubscribe

    async def receive_text():
        await client_gone.wait()
        raise WebSocketDisconnect(code=1000)

    async def send_json(_message):
        client_gone.set()

    websocket = MagicMock()
    websocket.receive_text = receive_text
    websocket.send_json = AsyncMock(side_effect=send_json)

    await asyncio.wait_for(stream_snapshots(websocket, subscribe, "notices", len), timeout=5)

    assert subscribe_threads and subscribe_threads[0] != loop_thread
    websocket.send_json.assert_awaited_once_with({"type": "notices", "payload": 2})
    unsubscribe.assert_called_once_with()
