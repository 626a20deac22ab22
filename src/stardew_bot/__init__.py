"""Stardew Bot - remote-control client for Stardew Valley.

Connects to the game mod's WebSocket server, multiplexes commands over the
one connection, matches replies by id, keeps the latest pushed game state
and reconnects after drops.

Usage:
    from stardew_bot import GameSession, SessionConfig

    async with GameSession(SessionConfig.from_env()) as session:
        print(await session.tools.move_to(5, 10))
        print(session.get_latest_state())
"""

from .bus import EventChannels
from .config import SessionConfig
from .correlator import Correlator, PendingCommand
from .errors import (
    CommandTimeoutError,
    ConnectionLostError,
    GameClientError,
    GameConnectionError,
    MalformedMessageError,
    NotConnectedError,
)
from .protocol import CommandFrame, ErrorFrame, PingFrame, ResponseFrame, StateFrame
from .session import GameSession
from .state_cache import StateCache
from .supervisor import ReconnectSupervisor, SupervisorState
from .tools import GameTools
from .transport import GameTransport, MockTransport, TransportState, WebSocketTransport

__all__ = [
    # Session
    "GameSession",
    "SessionConfig",
    "GameTools",
    # Core components
    "Correlator",
    "PendingCommand",
    "StateCache",
    "ReconnectSupervisor",
    "SupervisorState",
    "EventChannels",
    # Transports
    "GameTransport",
    "TransportState",
    "WebSocketTransport",
    "MockTransport",
    # Frames
    "CommandFrame",
    "PingFrame",
    "ResponseFrame",
    "StateFrame",
    "ErrorFrame",
    # Errors
    "GameClientError",
    "GameConnectionError",
    "NotConnectedError",
    "CommandTimeoutError",
    "ConnectionLostError",
    "MalformedMessageError",
]
