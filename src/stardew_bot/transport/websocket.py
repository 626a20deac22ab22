"""WebSocket transport to the game mod's server."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Any

import websockets

from .base import GameTransport

logger = logging.getLogger(__name__)


class WebSocketTransport(GameTransport):
    """Transport over a single WebSocket connection.

    Wire format: one JSON object per text message. Keep-alive is done at
    the application level with {"type": "ping"} frames, so protocol-level
    pings are disabled.
    """

    def __init__(self, open_timeout: float = 10.0):
        super().__init__()
        self._open_timeout = open_timeout
        self._ws: Any = None  # websockets client connection

    async def _do_connect(self, endpoint: str) -> None:
        """Open the WebSocket."""
        self._ws = await websockets.connect(
            endpoint,
            open_timeout=self._open_timeout,
            ping_interval=None,
        )

    async def _do_send(self, raw: str) -> None:
        """Send one text message."""
        if not self._ws:
            raise ConnectionError("WebSocket not connected")
        await self._ws.send(raw)

    async def _do_close(self) -> None:
        """Start the closing handshake."""
        if self._ws:
            await self._ws.close()

    async def _receive_frames(self) -> AsyncIterator[str | bytes]:
        """Yield messages until the socket closes.

        A clean close ends the iteration; an abnormal close raises
        ConnectionClosedError, which the read loop reports as an error.
        """
        ws = self._ws
        if not ws:
            raise ConnectionError("WebSocket not connected")

        try:
            async for data in ws:
                yield data
        finally:
            if self._ws is ws:
                self._ws = None
