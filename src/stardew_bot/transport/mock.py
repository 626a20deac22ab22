"""In-memory transport for tests.

Records outbound frames and lets tests push inbound frames, simulate
drops and refuse connection attempts. No actual I/O.

Usage:
    transport = MockTransport()
    transport.auto_reply = lambda frame: {"type": "response", "id": frame["id"], "message": "ok"}

    session = GameSession(config, transport=transport)
    await session.start()
    reply = await session.send_command("interact")

    assert transport.sent_frames[0]["action"] == "interact"
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator, Callable
from typing import Any

from .base import GameTransport

# Queue marker for "the other side closed the connection"
_CLOSE = object()


class MockTransport(GameTransport):
    """Transport backed by an asyncio.Queue."""

    def __init__(self) -> None:
        super().__init__()
        self._inbound: asyncio.Queue[Any] | None = None
        self._sent: list[str] = []
        self._refuse_connects = 0
        self.connect_attempts = 0
        # Called with each outbound frame; a returned dict is fed back as a reply
        self.auto_reply: Callable[[dict[str, Any]], dict[str, Any] | None] | None = None

    @property
    def sent_raw(self) -> list[str]:
        """Outbound frames exactly as written."""
        return self._sent.copy()

    @property
    def sent_frames(self) -> list[dict[str, Any]]:
        """Outbound frames, decoded."""
        return [json.loads(raw) for raw in self._sent]

    def sent_commands(self) -> list[dict[str, Any]]:
        """Outbound command frames only (pings excluded)."""
        return [frame for frame in self.sent_frames if frame.get("type") == "command"]

    def fail_connects(self, count: int = 1) -> None:
        """Refuse the next `count` connection attempts."""
        self._refuse_connects += count

    def feed(self, frame: dict[str, Any] | str | bytes) -> None:
        """Deliver an inbound frame (dicts are JSON encoded)."""
        if self._inbound is None:
            raise RuntimeError("MockTransport is not connected")
        raw = json.dumps(frame) if isinstance(frame, dict) else frame
        self._inbound.put_nowait(raw)

    def drop(self, error: str | None = None) -> None:
        """Simulate the game closing the connection.

        With `error`, the connection breaks abnormally (read loop error
        followed by closed); without, it closes cleanly.
        """
        if self._inbound is None:
            raise RuntimeError("MockTransport is not connected")
        self._inbound.put_nowait(ConnectionResetError(error) if error else _CLOSE)

    async def _do_connect(self, endpoint: str) -> None:
        self.connect_attempts += 1
        if self._refuse_connects > 0:
            self._refuse_connects -= 1
            raise ConnectionRefusedError(f"Connection refused: {endpoint}")
        self._inbound = asyncio.Queue()

    async def _do_send(self, raw: str) -> None:
        self._sent.append(raw)
        if self.auto_reply is not None:
            reply = self.auto_reply(json.loads(raw))
            if reply is not None:
                self.feed(reply)

    async def _do_close(self) -> None:
        if self._inbound is not None:
            self._inbound.put_nowait(_CLOSE)

    async def _receive_frames(self) -> AsyncIterator[Any]:
        inbound = self._inbound
        if inbound is None:
            raise ConnectionError("MockTransport is not connected")

        while True:
            item = await inbound.get()
            if item is _CLOSE:
                return
            if isinstance(item, Exception):
                raise item
            yield item


def create_mock_transport() -> MockTransport:
    """Create a mock transport for testing."""
    return MockTransport()
