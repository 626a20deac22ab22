"""Latest game state pushed by the game."""

from __future__ import annotations

from typing import Any

StateSnapshot = dict[str, Any]


class StateCache:
    """Single slot holding the most recent state snapshot.

    Each update replaces the previous snapshot wholesale. The contents are
    opaque here; they are whatever the game pushed.
    """

    def __init__(self) -> None:
        self._snapshot: StateSnapshot | None = None

    def update(self, snapshot: StateSnapshot) -> None:
        """Replace the cached snapshot."""
        self._snapshot = snapshot

    def latest(self) -> StateSnapshot | None:
        """Most recent snapshot, or None before the first push."""
        return self._snapshot
