"""Inbound frames from the game.

Three kinds of frames arrive on the channel:
- response: reply to one command, matched by `id`
- state: full state snapshot pushed by the game, not tied to any command
- error: game-side error notice, not tied to any command

Example (response):
    {"type": "response", "id": "1718000000000-3f2a...", "message": "Moved"}

Example (state):
    {"type": "state", "data": {"player": {"location": "Farm", "money": 500}}}

Example (error):
    {"type": "error", "message": "No tool selected"}
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import MalformedMessageError

logger = logging.getLogger(__name__)


class FrameType(str, Enum):
    """Frame types received from the game."""

    RESPONSE = "response"
    STATE = "state"
    ERROR = "error"


class ResponseFrame(BaseModel):
    """Reply to a command."""

    # Mods attach extra fields (e.g. "success"); keep them rather than fail
    model_config = ConfigDict(extra="allow")

    type: Literal["response"] = "response"
    id: str
    message: str | None = None
    data: Any = None


class StateFrame(BaseModel):
    """Full state snapshot pushed by the game."""

    type: Literal["state"] = "state"
    data: dict[str, Any] = Field(default_factory=dict)


class ErrorFrame(BaseModel):
    """Game-side error notice."""

    type: Literal["error"] = "error"
    message: str = "Unknown error"


InboundFrame = ResponseFrame | StateFrame | ErrorFrame

_FRAME_MODELS: dict[str, type[BaseModel]] = {
    FrameType.RESPONSE.value: ResponseFrame,
    FrameType.STATE.value: StateFrame,
    FrameType.ERROR.value: ErrorFrame,
}


def decode_frame(raw: str | bytes) -> InboundFrame | None:
    """Decode one inbound frame.

    Returns:
        The parsed frame, or None for well-formed frames of a type the
        client does not handle (e.g. "pong").

    Raises:
        MalformedMessageError: Invalid encoding, JSON or frame shape
    """
    try:
        text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
        data = json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MalformedMessageError(f"Invalid frame encoding: {e}") from e

    if not isinstance(data, dict):
        raise MalformedMessageError(f"Frame must be a JSON object, got {type(data).__name__}")

    frame_type = data.get("type")
    model = _FRAME_MODELS.get(frame_type) if isinstance(frame_type, str) else None
    if model is None:
        if frame_type is None:
            raise MalformedMessageError("Frame has no type")
        logger.debug(f"Ignoring frame of unhandled type: {frame_type!r}")
        return None

    try:
        return model.model_validate(data)  # type: ignore[return-value]
    except ValidationError as e:
        raise MalformedMessageError(f"Invalid {frame_type} frame: {e}") from e
