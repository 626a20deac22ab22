"""Event channels - small pub/sub for lifecycle and message notifications.

Each publisher owns its own EventChannels instance with a fixed set of
channel names. There is no process-wide registry: two sessions never see
each other's events.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

logger = logging.getLogger(__name__)

# Handlers may be plain functions or coroutine functions
EventHandler = Callable[..., Awaitable[None] | None]


class EventChannels:
    """Named event channels with subscribe/emit.

    Usage:
        channels = EventChannels(["opened", "closed"])
        unsubscribe = channels.subscribe("opened", on_opened)
        await channels.emit("opened")
    """

    def __init__(self, names: Iterable[str]):
        self._handlers: dict[str, list[EventHandler]] = {name: [] for name in names}

    @property
    def names(self) -> tuple[str, ...]:
        """Channel names accepted by this instance."""
        return tuple(self._handlers)

    def subscribe(self, name: str, handler: EventHandler) -> Callable[[], None]:
        """Register a handler on a channel.

        Args:
            name: Channel name (must be one of the names given at construction)
            handler: Called with the emitted arguments; may be async

        Returns:
            Unsubscribe function
        """
        handlers = self._channel(name)
        handlers.append(handler)

        def unsubscribe() -> None:
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    async def emit(self, name: str, *args: Any) -> None:
        """Deliver an event to every handler of a channel, in subscription order.

        Handler failures are logged and never propagate to the emitter.
        """
        # Copy so handlers can unsubscribe while we iterate
        for handler in list(self._channel(name)):
            try:
                result = handler(*args)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(f"Error in handler for {name!r}")

    def clear(self) -> None:
        """Drop all handlers (channel names are kept)."""
        for handlers in self._handlers.values():
            handlers.clear()

    def _channel(self, name: str) -> list[EventHandler]:
        try:
            return self._handlers[name]
        except KeyError:
            raise ValueError(f"Unknown event channel: {name}") from None
