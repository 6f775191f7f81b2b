import asyncio
import json
from typing import Any, Iterable, Optional

from fastapi import WebSocket
from fastapi.websockets import WebSocketDisconnect, WebSocketState

from constants import OUTBOUND_QUEUE_SIZE
from logging_config import get_logger

logger = get_logger(__name__)


class PeerConnection:
    """Outbound side of one WebSocket.

    Frames are queued by send() and written by a single drain task, so
    broadcasts coming from several handlers never interleave on the socket
    and arrive in submission order. send() never blocks.
    """

    def __init__(self, websocket: WebSocket, max_queue: int = OUTBOUND_QUEUE_SIZE):
        self.websocket = websocket
        self.closed = False
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=max_queue)
        self._writer: Optional[asyncio.Task] = None
        self._abort: Optional[asyncio.Task] = None

    def start(self):
        if self._writer is None:
            self._writer = asyncio.create_task(self._drain())
        return self

    def send(self, message_type: str, data: Any) -> bool:
        if self.closed:
            return False
        try:
            self._queue.put_nowait(json.dumps({"type": message_type, "data": data}))
        except asyncio.QueueFull:
            logger.warning(f"Outbound queue full ({self._queue.maxsize}), disconnecting slow peer")
            self.closed = True
            self._abort = asyncio.create_task(self._shutdown(code=1013))
            return False
        return True

    async def _drain(self):
        while True:
            text = await self._queue.get()
            try:
                await self.websocket.send_text(text)
            except (WebSocketDisconnect, RuntimeError, OSError) as e:
                logger.debug(f"Stopped writing to closed websocket: {e}")
                self.closed = True
                return

    async def _shutdown(self, code: int = 1000):
        if self._writer is not None:
            self._writer.cancel()
        if (
            self.websocket.application_state == WebSocketState.CONNECTED
            and self.websocket.client_state == WebSocketState.CONNECTED
        ):
            try:
                await self.websocket.close(code=code)
            except Exception as e:
                logger.debug(f"Error closing WebSocket: {e}")

    async def close(self, code: int = 1000):
        self.closed = True
        await self._shutdown(code=code)


def broadcast(connections: Iterable[PeerConnection], message_type: str, data: Any) -> int:
    """Queue the same frame on every connection; returns how many accepted it."""
    sent = 0
    for connection in connections:
        if connection.send(message_type, data):
            sent += 1
    return sent
