"""Transport abstraction for the game channel.

A transport owns exactly one duplex connection and reports what happens
to it through four event channels:
- opened: the connection is up
- closed: the connection is down (after a previous opened)
- error(detail): the open failed, or the connection broke
- message(raw): one inbound frame, in receipt order

Subclasses implement the wire-level hooks (_do_connect, _do_send,
_do_close, _receive_frames); the base class handles state, the
background reader and event emission.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from enum import Enum
from typing import Any

from ..bus import EventChannels
from ..errors import GameConnectionError

logger = logging.getLogger(__name__)


class TransportState(str, Enum):
    """Connection state machine."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class GameTransport(ABC):
    """Base class for game transports."""

    EVENTS = ("opened", "closed", "error", "message")

    def __init__(self) -> None:
        self._state = TransportState.DISCONNECTED
        self._endpoint: str | None = None
        self._reader_task: asyncio.Task[None] | None = None
        self._opening: asyncio.Future[None] | None = None
        self.channels = EventChannels(self.EVENTS)

    @property
    def state(self) -> TransportState:
        """Current connection state."""
        return self._state

    @property
    def is_connected(self) -> bool:
        """Check if transport is connected."""
        return self._state == TransportState.CONNECTED

    @property
    def endpoint(self) -> str | None:
        """Endpoint of the current or last connection."""
        return self._endpoint

    async def connect(self, endpoint: str) -> None:
        """Open the channel and return once it is open.

        No-op if a connection is already open. If one is being opened,
        waits for that attempt and shares its outcome.

        Raises:
            GameConnectionError: If the underlying open fails
        """
        if self._state == TransportState.CONNECTED:
            return
        if self._state == TransportState.CONNECTING and self._opening is not None:
            await asyncio.shield(self._opening)
            return

        self._state = TransportState.CONNECTING
        opening = self._opening = asyncio.get_running_loop().create_future()
        try:
            await self._do_connect(endpoint)
        except asyncio.CancelledError:
            self._state = TransportState.DISCONNECTED
            self._settle_opening(opening, GameConnectionError(f"Connect to {endpoint} cancelled"))
            raise
        except Exception as e:
            self._state = TransportState.DISCONNECTED
            error = GameConnectionError(f"Failed to connect to {endpoint}: {e}")
            self._settle_opening(opening, error)
            await self.channels.emit("error", str(e))
            raise error from e

        self._endpoint = endpoint
        self._state = TransportState.CONNECTED
        self._reader_task = asyncio.create_task(self._read_loop())
        logger.info(f"{self.__class__.__name__} connected to {endpoint}")
        self._settle_opening(opening)
        await self.channels.emit("opened")

    def _settle_opening(self, opening: asyncio.Future[None], error: Exception | None = None) -> None:
        if self._opening is opening:
            self._opening = None
        if error is None:
            opening.set_result(None)
        else:
            opening.set_exception(error)
            # Mark retrieved so an attempt nobody else waited on is not reported
            opening.exception()

    async def send(self, raw: str) -> None:
        """Write one frame if connected; otherwise drop it.

        Frames are never queued for later delivery. Write failures are
        logged; the reader notices the broken connection.
        """
        if self._state != TransportState.CONNECTED:
            logger.debug("Dropping outbound frame: transport not connected")
            return

        try:
            await self._do_send(raw)
        except Exception as e:
            logger.warning(f"Failed to send frame: {e}")

    async def close(self) -> None:
        """Close the channel; returns once the closure is confirmed."""
        if self._state == TransportState.DISCONNECTED:
            return

        reader = self._reader_task
        try:
            await self._do_close()
        except Exception as e:
            logger.warning(f"Error while closing transport: {e}")

        if reader is not None and reader is not asyncio.current_task():
            with contextlib.suppress(asyncio.CancelledError):
                await reader

        await self._mark_closed()

    async def _read_loop(self) -> None:
        """Background task forwarding inbound frames until the channel ends."""
        try:
            async for raw in self._receive_frames():
                await self.channels.emit("message", raw)
        except asyncio.CancelledError:
            await self._mark_closed()
            raise
        except Exception as e:
            logger.error(f"Read loop error: {e}")
            await self.channels.emit("error", str(e))

        await self._mark_closed()

    async def _mark_closed(self) -> None:
        # Edge-triggered: only the first caller after a connection emits
        if self._state == TransportState.DISCONNECTED:
            return

        self._state = TransportState.DISCONNECTED
        self._reader_task = None
        logger.info(f"{self.__class__.__name__} disconnected from {self._endpoint}")
        await self.channels.emit("closed")

    # Abstract methods for subclasses
    @abstractmethod
    async def _do_connect(self, endpoint: str) -> None:
        """Implementation-specific connection logic."""
        ...

    @abstractmethod
    async def _do_send(self, raw: str) -> None:
        """Implementation-specific send logic."""
        ...

    @abstractmethod
    async def _do_close(self) -> None:
        """Implementation-specific close logic. Must end _receive_frames."""
        ...

    @abstractmethod
    def _receive_frames(self) -> AsyncIterator[Any]:
        """Implementation-specific receive logic. Must be an async generator."""
        ...
