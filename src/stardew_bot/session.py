"""Game session - the caller-facing handle.

Bundles one transport, one correlator, one state cache and one reconnect
supervisor. Callers use it through four operations:

    session = GameSession(SessionConfig(game_url="ws://localhost:8765/game"))
    await session.start()
    reply = await session.send_command("move_to", {"x": 5, "y": 10})
    state = session.get_latest_state()
    await session.stop()

Lifecycle changes and pushed frames are also published on `session.events`:
- connected / disconnected
- reconnecting(attempt)
- game_error(message)
- state(snapshot)
- response(frame)
"""

from __future__ import annotations

import logging
from typing import Any

from .bus import EventChannels
from .config import SessionConfig
from .correlator import Correlator
from .errors import GameConnectionError, MalformedMessageError, NotConnectedError
from .protocol.commands import CommandFrame
from .protocol.events import ErrorFrame, ResponseFrame, StateFrame, decode_frame
from .state_cache import StateCache, StateSnapshot
from .supervisor import ReconnectSupervisor
from .tools import GameTools
from .transport.base import GameTransport, TransportState
from .transport.websocket import WebSocketTransport

logger = logging.getLogger(__name__)


class GameSession:
    """Connection to one running game."""

    EVENTS = ("connected", "disconnected", "reconnecting", "game_error", "state", "response")

    def __init__(
        self,
        config: SessionConfig | None = None,
        transport: GameTransport | None = None,
    ):
        self.config = config or SessionConfig()
        self.events = EventChannels(self.EVENTS)

        self._transport = transport or WebSocketTransport(open_timeout=self.config.open_timeout)
        self._correlator = Correlator(default_timeout=self.config.command_timeout)
        self._state_cache = StateCache()
        self._supervisor = ReconnectSupervisor(
            self._transport,
            self._correlator,
            self.config.game_url,
            reconnect_delay=self.config.reconnect_delay,
            keepalive_interval=self.config.keepalive_interval,
            auto_reconnect=self.config.auto_reconnect,
            events=self.events,
        )
        self._stopped = False
        self._tools = GameTools(_session=self)

        self._transport.channels.subscribe("opened", self._on_opened)
        self._transport.channels.subscribe("closed", self._on_closed)
        self._transport.channels.subscribe("message", self._on_message)

    @property
    def endpoint(self) -> str:
        """Game URL this session connects to."""
        return self.config.game_url

    @property
    def status(self) -> TransportState:
        """Current connection status."""
        return self._transport.state

    @property
    def is_connected(self) -> bool:
        """Check if the session can accept commands."""
        return not self._stopped and self._transport.is_connected

    @property
    def running(self) -> bool:
        """Whether the session reconnects after a drop."""
        return self._supervisor.running

    @property
    def pending_commands(self) -> int:
        """Number of commands awaiting a reply."""
        return len(self._correlator)

    @property
    def tools(self) -> GameTools:
        """Typed game commands."""
        return self._tools

    async def start(self) -> None:
        """Connect to the game.

        Returns once the connection is open. Later drops are handled by the
        reconnect supervisor.

        Raises:
            GameConnectionError: If the first connection attempt fails
        """
        logger.info(f"Connecting to {self.endpoint}...")
        self._stopped = False
        was_running = self._supervisor.running
        self._supervisor.arm()
        try:
            await self._transport.connect(self.endpoint)
        except GameConnectionError:
            # A failed reconnect attempt this call joined keeps retrying
            if not was_running:
                self._supervisor.disarm()
            raise

    async def stop(self) -> None:
        """Disconnect and stop reconnecting.

        Commands still in flight fail with ConnectionLostError; later
        send_command calls fail with NotConnectedError.
        """
        self._stopped = True
        await self._supervisor.stop()

    async def send_command(
        self,
        action: str,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> ResponseFrame:
        """Send a command and wait for its reply.

        Args:
            action: Command name (e.g. "move_to")
            params: Command parameters
            timeout: Seconds to wait for the reply (config.command_timeout if None)

        Returns:
            The reply frame carrying this command's id

        Raises:
            NotConnectedError: Not connected, or the session was stopped
            CommandTimeoutError: No reply before the deadline
            ConnectionLostError: The connection dropped before the reply
        """
        if not self.is_connected:
            raise NotConnectedError("Not connected to game")

        frame = CommandFrame.create(action, params)
        future = self._correlator.register(frame.id, timeout)
        await self._transport.send(frame.to_json())
        return await future

    def get_latest_state(self) -> StateSnapshot | None:
        """Most recent state pushed by the game, or None before the first push."""
        return self._state_cache.latest()

    async def _on_opened(self) -> None:
        logger.info("Connected to Stardew Valley")
        await self.events.emit("connected")

    async def _on_closed(self) -> None:
        logger.info("Disconnected from Stardew Valley")
        await self.events.emit("disconnected")

    async def _on_message(self, raw: str | bytes) -> None:
        try:
            frame = decode_frame(raw)
        except MalformedMessageError as e:
            logger.warning(f"Dropping malformed frame: {e}")
            return

        if isinstance(frame, ResponseFrame):
            self._correlator.resolve(frame.id, frame)
            await self.events.emit("response", frame)
        elif isinstance(frame, StateFrame):
            self._state_cache.update(frame.data)
            await self.events.emit("state", frame.data)
        elif isinstance(frame, ErrorFrame):
            logger.error(f"Game error: {frame.message}")
            await self.events.emit("game_error", frame.message)

    async def __aenter__(self) -> GameSession:
        await self.start()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.stop()
