"""Reconnection and keep-alive for a session's transport.

The game is a long-lived local companion process, so a dropped connection
is retried forever at a fixed delay until it succeeds or the session is
stopped. While connected, a ping frame is sent at a fixed interval so
half-open connections get noticed.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from enum import Enum

from .bus import EventChannels
from .correlator import Correlator
from .errors import GameConnectionError
from .protocol.commands import PingFrame
from .transport.base import GameTransport

logger = logging.getLogger(__name__)


class SupervisorState(str, Enum):
    """Supervisor state machine."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPING = "stopping"


class ReconnectSupervisor:
    """Watches transport lifecycle events and keeps the connection up.

    On opened: start the keep-alive task.
    On closed/error: fail in-flight commands, then schedule one reconnect
    task if the run flag is still set.
    """

    def __init__(
        self,
        transport: GameTransport,
        correlator: Correlator,
        endpoint: str,
        *,
        reconnect_delay: float = 5.0,
        keepalive_interval: float = 15.0,
        auto_reconnect: bool = True,
        events: EventChannels | None = None,
    ):
        self._transport = transport
        self._correlator = correlator
        self._endpoint = endpoint
        self._reconnect_delay = reconnect_delay
        self._keepalive_interval = keepalive_interval
        self._auto_reconnect = auto_reconnect
        self._events = events

        self._state = SupervisorState.IDLE
        self._run_flag = False
        self._attempts = 0
        self._reconnect_task: asyncio.Task[None] | None = None
        self._keepalive_task: asyncio.Task[None] | None = None

        transport.channels.subscribe("opened", self._on_opened)
        transport.channels.subscribe("closed", self._on_closed)
        transport.channels.subscribe("error", self._on_error)

    @property
    def state(self) -> SupervisorState:
        """Current supervisor state."""
        return self._state

    @property
    def running(self) -> bool:
        """Whether reconnection should continue after a drop."""
        return self._run_flag

    @property
    def reconnect_pending(self) -> bool:
        """Whether a reconnect task is scheduled or in progress."""
        return self._reconnect_task is not None and not self._reconnect_task.done()

    def arm(self) -> None:
        """Set the run flag."""
        self._run_flag = True

    def disarm(self) -> None:
        """Clear the run flag without touching the connection."""
        self._run_flag = False

    async def stop(self) -> None:
        """Stop reconnecting, fail in-flight commands and close the transport."""
        self._run_flag = False
        self._state = SupervisorState.STOPPING

        tasks = [
            task
            for task in (self._reconnect_task, self._keepalive_task)
            if task is not None and task is not asyncio.current_task()
        ]
        self._reconnect_task = None
        self._keepalive_task = None
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task

        self._correlator.flush_all("session stopped")
        await self._transport.close()
        self._state = SupervisorState.IDLE

    async def _on_opened(self) -> None:
        self._state = SupervisorState.RUNNING
        self._attempts = 0
        self._start_keepalive()

    async def _on_closed(self) -> None:
        await self._on_connection_lost("connection closed")

    async def _on_error(self, detail: str) -> None:
        await self._on_connection_lost(f"connection error: {detail}")

    async def _on_connection_lost(self, reason: str) -> None:
        if self._state != SupervisorState.RUNNING:
            return

        self._cancel_keepalive()
        self._correlator.flush_all(reason)

        # A read error is followed by closed; reconnect once the socket is down
        if self._transport.is_connected:
            return

        if self._run_flag and self._auto_reconnect:
            self._schedule_reconnect()
        else:
            self._state = SupervisorState.IDLE

    def _schedule_reconnect(self) -> None:
        if self.reconnect_pending:
            return

        logger.info(f"Attempting to reconnect in {self._reconnect_delay:g} seconds...")
        self._reconnect_task = asyncio.create_task(self._reconnect_loop())

    async def _reconnect_loop(self) -> None:
        while self._run_flag:
            await asyncio.sleep(self._reconnect_delay)
            if not self._run_flag:
                break

            self._attempts += 1
            attempt = self._attempts
            if self._events is not None:
                await self._events.emit("reconnecting", attempt)

            try:
                await self._transport.connect(self._endpoint)
            except GameConnectionError as e:
                logger.warning(
                    f"Reconnection attempt {attempt} failed: {e}; "
                    f"retrying in {self._reconnect_delay:g} seconds"
                )
                continue

            # Dropped again while the opened handlers ran; that loss found
            # this task still pending, so the retry is ours
            if not self._transport.is_connected:
                logger.warning(
                    f"Connection lost right after reconnection attempt {attempt}; "
                    f"retrying in {self._reconnect_delay:g} seconds"
                )
                continue

            logger.info(f"Reconnected after {attempt} attempt(s)")
            return

    def _start_keepalive(self) -> None:
        self._cancel_keepalive()
        self._keepalive_task = asyncio.create_task(self._keepalive_loop())

    def _cancel_keepalive(self) -> None:
        if self._keepalive_task is not None:
            self._keepalive_task.cancel()
            self._keepalive_task = None

    async def _keepalive_loop(self) -> None:
        ping = PingFrame().to_json()
        while True:
            await asyncio.sleep(self._keepalive_interval)
            if self._transport.is_connected:
                logger.debug("Sending keep-alive ping")
                await self._transport.send(ping)
