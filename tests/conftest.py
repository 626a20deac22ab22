"""Pytest configuration and shared fixtures."""

import asyncio

import pytest

from stardew_bot import SessionConfig
from stardew_bot.transport import MockTransport, create_mock_transport


@pytest.fixture
def fast_config() -> SessionConfig:
    """Session config with sub-second timers."""
    return SessionConfig(
        game_url="ws://localhost:8765/game",
        command_timeout=0.5,
        keepalive_interval=0.05,
        reconnect_delay=0.05,
    )


@pytest.fixture
def transport() -> MockTransport:
    """Fresh in-memory transport."""
    return create_mock_transport()


@pytest.fixture
def wait_until():
    """Poll a condition on the event loop until it holds (or fail)."""

    async def _wait_until(predicate, timeout: float = 1.0) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not predicate():
            if loop.time() > deadline:
                raise AssertionError("Condition not met before timeout")
            await asyncio.sleep(0.005)

    return _wait_until


class GatedTransport(MockTransport):
    """MockTransport whose open blocks until the test sets `gate`."""

    def __init__(self) -> None:
        super().__init__()
        self.gate = asyncio.Event()

    async def _do_connect(self, endpoint: str) -> None:
        await self.gate.wait()
        await super()._do_connect(endpoint)


@pytest.fixture
def gated_transport() -> GatedTransport:
    """Mock transport that holds each open until released."""
    return GatedTransport()
