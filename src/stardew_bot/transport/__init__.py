"""Transport layer.

One persistent duplex channel per session:
- WebSocket - the game mod's server (default ws://localhost:8765/game)
- Mock - in-memory, for tests
"""

from .base import GameTransport, TransportState
from .mock import MockTransport, create_mock_transport
from .websocket import WebSocketTransport

__all__ = [
    "GameTransport",
    "TransportState",
    "WebSocketTransport",
    "MockTransport",
    "create_mock_transport",
]
