"""Outbound frames: commands and keep-alive pings.

Commands are requests that expect exactly one reply frame carrying the
same `id`. Pings carry no id and are never answered through correlation.
"""

from __future__ import annotations

import time
import uuid
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field


class OutboundType(str, Enum):
    """Frame types sent to the game."""

    COMMAND = "command"
    PING = "ping"


def new_command_id() -> str:
    """Generate a command identifier.

    Millisecond timestamp prefix plus a full uuid4 suffix (122 random bits),
    so ids are unique for the life of the process in practice.
    """
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex}"


class CommandFrame(BaseModel):
    """A command sent to the game.

    Example:
        {
            "id": "1718000000000-3f2a...",
            "type": "command",
            "action": "move_to",
            "params": {"x": 5, "y": 10}
        }
    """

    id: str = Field(default_factory=new_command_id)
    type: Literal["command"] = "command"
    action: str
    params: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def create(
        cls,
        action: str,
        params: dict[str, Any] | None = None,
        command_id: str | None = None,
    ) -> CommandFrame:
        """Factory method for creating command frames."""
        return cls(
            id=command_id or new_command_id(),
            action=action,
            params=params or {},
        )

    def to_json(self) -> str:
        """Serialize to a wire frame."""
        return self.model_dump_json()


class PingFrame(BaseModel):
    """Keep-alive frame: {"type": "ping"}."""

    type: Literal["ping"] = "ping"

    def to_json(self) -> str:
        """Serialize to a wire frame."""
        return self.model_dump_json()
