"""Wire protocol for the game channel.

JSON text frames in both directions:
- Commands (client -> game): request with an id, answered by one response
- Pings (client -> game): keep-alive, never answered through correlation
- Responses, state pushes and error notices (game -> client)
"""

from .commands import CommandFrame, OutboundType, PingFrame, new_command_id
from .events import ErrorFrame, FrameType, InboundFrame, ResponseFrame, StateFrame, decode_frame

__all__ = [
    "CommandFrame",
    "PingFrame",
    "OutboundType",
    "new_command_id",
    "ResponseFrame",
    "StateFrame",
    "ErrorFrame",
    "FrameType",
    "InboundFrame",
    "decode_frame",
]
