"""Client-side exceptions.

Everything raised by stardew_bot derives from GameClientError so callers can
catch one base class. Several also derive from the matching builtin
(ConnectionError, TimeoutError, ValueError) for callers that only know those.
"""

from __future__ import annotations


class GameClientError(Exception):
    """Base class for all game client failures."""


class GameConnectionError(GameClientError, ConnectionError):
    """Raised when the channel to the game cannot be opened."""


class NotConnectedError(GameClientError):
    """Raised when a command is issued while the session is not connected."""


class CommandTimeoutError(GameClientError, TimeoutError):
    """Raised when no reply arrives for a command before its deadline."""

    def __init__(self, command_id: str, timeout: float):
        super().__init__(f"Command {command_id} timed out after {timeout:g}s")
        self.command_id = command_id
        self.timeout = timeout


class ConnectionLostError(GameClientError):
    """Raised for commands still in flight when the connection drops."""

    def __init__(self, reason: str = "connection lost"):
        super().__init__(reason)
        self.reason = reason


class MalformedMessageError(GameClientError, ValueError):
    """Raised by the decoder for frames that are not valid protocol messages.

    Never surfaced to command callers; the session logs and drops the frame.
    """


__all__ = [
    "GameClientError",
    "GameConnectionError",
    "NotConnectedError",
    "CommandTimeoutError",
    "ConnectionLostError",
    "MalformedMessageError",
]
