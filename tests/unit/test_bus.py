"""Unit tests for EventChannels."""

import logging

import pytest

from stardew_bot.bus import EventChannels


class TestSubscribe:
    """Test handler registration."""

    def test_names(self) -> None:
        """Channels are fixed at construction."""
        channels = EventChannels(["opened", "closed"])

        assert channels.names == ("opened", "closed")

    def test_unknown_channel_rejected(self) -> None:
        """Subscribing to an unknown channel raises."""
        channels = EventChannels(["opened"])

        with pytest.raises(ValueError, match="Unknown event channel"):
            channels.subscribe("bogus", lambda: None)

    @pytest.mark.asyncio
    async def test_unsubscribe(self) -> None:
        """Unsubscribed handlers are not called."""
        channels = EventChannels(["opened"])
        calls = []
        unsubscribe = channels.subscribe("opened", lambda: calls.append(1))

        unsubscribe()
        unsubscribe()  # idempotent
        await channels.emit("opened")

        assert calls == []


class TestEmit:
    """Test event delivery."""

    @pytest.mark.asyncio
    async def test_handlers_called_in_order_with_args(self) -> None:
        """Sync and async handlers both receive the emitted args."""
        channels = EventChannels(["message"])
        received = []

        def first(raw):
            received.append(("first", raw))

        async def second(raw):
            received.append(("second", raw))

        channels.subscribe("message", first)
        channels.subscribe("message", second)
        await channels.emit("message", "hello")

        assert received == [("first", "hello"), ("second", "hello")]

    @pytest.mark.asyncio
    async def test_emit_only_reaches_named_channel(self) -> None:
        """Handlers on other channels are not called."""
        channels = EventChannels(["opened", "closed"])
        calls = []
        channels.subscribe("closed", lambda: calls.append("closed"))

        await channels.emit("opened")

        assert calls == []

    @pytest.mark.asyncio
    async def test_failing_handler_is_contained(self, caplog) -> None:
        """A raising handler is logged and later handlers still run."""
        channels = EventChannels(["opened"])
        calls = []

        def broken():
            raise RuntimeError("boom")

        channels.subscribe("opened", broken)
        channels.subscribe("opened", lambda: calls.append("ok"))

        with caplog.at_level(logging.ERROR, logger="stardew_bot.bus"):
            await channels.emit("opened")

        assert calls == ["ok"]
        assert "Error in handler for 'opened'" in caplog.text

    @pytest.mark.asyncio
    async def test_instances_are_isolated(self) -> None:
        """Two instances never share handlers."""
        a = EventChannels(["opened"])
        b = EventChannels(["opened"])
        calls = []
        a.subscribe("opened", lambda: calls.append("a"))

        await b.emit("opened")

        assert calls == []

    @pytest.mark.asyncio
    async def test_clear(self) -> None:
        """clear() drops every handler."""
        channels = EventChannels(["opened"])
        calls = []
        channels.subscribe("opened", lambda: calls.append(1))

        channels.clear()
        await channels.emit("opened")

        assert calls == []
