"""Session configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_GAME_URL = "ws://localhost:8765/game"


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}") from None


@dataclass
class SessionConfig:
    """Configuration for a game session.

    All durations are in seconds.
    """

    # Connection
    game_url: str = DEFAULT_GAME_URL
    open_timeout: float = 10.0

    # Commands
    command_timeout: float = 15.0

    # Liveness and reconnection
    keepalive_interval: float = 15.0
    auto_reconnect: bool = True
    reconnect_delay: float = 5.0

    @classmethod
    def from_env(cls) -> SessionConfig:
        """Build a config from STARDEW_* environment variables.

        Unset variables fall back to the dataclass defaults.
        """
        defaults = cls()
        auto_reconnect = os.getenv("STARDEW_AUTO_RECONNECT")
        return cls(
            game_url=os.getenv("STARDEW_GAME_URL") or defaults.game_url,
            open_timeout=_env_float("STARDEW_OPEN_TIMEOUT", defaults.open_timeout),
            command_timeout=_env_float("STARDEW_COMMAND_TIMEOUT", defaults.command_timeout),
            keepalive_interval=_env_float(
                "STARDEW_KEEPALIVE_INTERVAL", defaults.keepalive_interval
            ),
            auto_reconnect=(
                auto_reconnect.lower() in ("1", "true", "yes")
                if auto_reconnect
                else defaults.auto_reconnect
            ),
            reconnect_delay=_env_float("STARDEW_RECONNECT_DELAY", defaults.reconnect_delay),
        )
