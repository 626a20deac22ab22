"""Command/reply correlation.

Every command in flight has one PendingCommand in the table, keyed by the
command id. An entry leaves the table in exactly one of four ways:
- resolve: the matching reply arrived
- expire: the per-command timer fired first
- flush_all: the connection dropped
- the caller stopped awaiting (its future was cancelled)

All mutation happens on the event loop thread, so the table needs no lock.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from .errors import CommandTimeoutError, ConnectionLostError

logger = logging.getLogger(__name__)

DEFAULT_COMMAND_TIMEOUT = 15.0


@dataclass
class PendingCommand:
    """One command awaiting its reply."""

    command_id: str
    future: asyncio.Future[Any]
    timeout: float
    deadline: float  # event loop time
    timer: asyncio.TimerHandle | None = None


class Correlator:
    """Matches command ids to their pending futures."""

    def __init__(self, default_timeout: float = DEFAULT_COMMAND_TIMEOUT):
        self.default_timeout = default_timeout
        self._pending: dict[str, PendingCommand] = {}

    def __len__(self) -> int:
        return len(self._pending)

    def __contains__(self, command_id: object) -> bool:
        return command_id in self._pending

    def pending_ids(self) -> list[str]:
        """Ids of all commands currently in flight."""
        return list(self._pending)

    def register(self, command_id: str, timeout: float | None = None) -> asyncio.Future[Any]:
        """Start tracking a command and its timeout.

        Args:
            command_id: Identifier carried by the command frame
            timeout: Seconds to wait for the reply (default_timeout if None)

        Returns:
            Future completed with the reply payload, or failed with
            CommandTimeoutError / ConnectionLostError

        Raises:
            ValueError: If the id is already pending
        """
        if command_id in self._pending:
            raise ValueError(f"Command id already pending: {command_id}")

        loop = asyncio.get_running_loop()
        timeout = self.default_timeout if timeout is None else timeout
        future: asyncio.Future[Any] = loop.create_future()
        entry = PendingCommand(
            command_id=command_id,
            future=future,
            timeout=timeout,
            deadline=loop.time() + timeout,
        )
        entry.timer = loop.call_later(timeout, self.expire, command_id)
        self._pending[command_id] = entry
        future.add_done_callback(lambda f: self._on_future_done(command_id, f))
        return future

    def resolve(self, command_id: str, payload: Any) -> bool:
        """Complete a pending command with its reply.

        Unknown, already settled or late ids are ignored.

        Returns:
            True if a pending command was completed
        """
        entry = self._take(command_id)
        if entry is None:
            logger.debug(f"Ignoring reply for unknown or settled command {command_id}")
            return False

        entry.future.set_result(payload)
        return True

    def expire(self, command_id: str) -> bool:
        """Fail a pending command with CommandTimeoutError.

        Called by the per-command timer. No-op if the reply won the race.

        Returns:
            True if a pending command was timed out
        """
        entry = self._take(command_id)
        if entry is None:
            return False

        logger.warning(f"Command {command_id} timed out after {entry.timeout:g}s")
        entry.future.set_exception(CommandTimeoutError(command_id, entry.timeout))
        return True

    def flush_all(self, reason: str = "connection lost") -> int:
        """Fail every pending command with ConnectionLostError and clear the table.

        Returns:
            Number of commands failed
        """
        entries = list(self._pending.values())
        self._pending.clear()

        flushed = 0
        for entry in entries:
            if entry.timer is not None:
                entry.timer.cancel()
            if not entry.future.done():
                entry.future.set_exception(ConnectionLostError(reason))
                flushed += 1

        if flushed:
            logger.info(f"Failed {flushed} pending command(s): {reason}")
        return flushed

    def _take(self, command_id: str) -> PendingCommand | None:
        """Remove an entry and stop its timer; None if absent or already settled."""
        entry = self._pending.pop(command_id, None)
        if entry is None:
            return None
        if entry.timer is not None:
            entry.timer.cancel()
        if entry.future.done():
            return None
        return entry

    def _on_future_done(self, command_id: str, future: asyncio.Future[Any]) -> None:
        # Only cancellation by the caller reaches here with the entry still present
        entry = self._pending.get(command_id)
        if entry is not None and entry.future is future:
            self._take(command_id)
