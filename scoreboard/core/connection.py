"""
Connection handle over an accepted WebSocket

The core only ever sees this wrapper: receive() yields raw frames, send()
writes a text frame, close() releases the transport exactly once.
"""
import itertools
import logging
from typing import Union

from fastapi import WebSocket, WebSocketDisconnect
from fastapi.websockets import WebSocketState

from scoreboard.core.exceptions import ConnectionClosed


logger = logging.getLogger(__name__)

_ids = itertools.count(1)


class WebSocketConnection:
    """One live client channel"""

    def __init__(self, websocket: WebSocket):
        self.websocket = websocket
        self.id = next(_ids)
        self.closed = False

    def __repr__(self) -> str:
        return f"<WebSocketConnection #{self.id}>"

    async def receive(self) -> Union[str, bytes]:
        """
        Block until the next frame arrives

        Raises:
            ConnectionClosed: Peer disconnected
        """
        try:
            message = await self.websocket.receive()
        except WebSocketDisconnect as exc:
            raise ConnectionClosed(exc.code) from exc

        if message["type"] == "websocket.disconnect":
            raise ConnectionClosed(message.get("code", 1000))

        if message.get("text") is not None:
            return message["text"]
        return message.get("bytes") or b""

    async def send(self, payload: str) -> None:
        await self.websocket.send_text(payload)

    async def close(self) -> None:
        """Close the transport; calling it again is a no-op"""
        if self.closed:
            return
        self.closed = True

        if (self.websocket.application_state == WebSocketState.DISCONNECTED
                or self.websocket.client_state == WebSocketState.DISCONNECTED):
            return
        try:
            await self.websocket.close()
        except RuntimeError as e:
            # Peer went away between the state check and the close frame
            logger.debug(f"Close on {self!r} ignored: {e}")
