"""Unit tests for GameTools command wrappers."""

import pytest

from stardew_bot import GameSession


def make_session(fast_config, transport, message=None, data=None) -> GameSession:
    """Session whose mock game answers every command with the given reply."""

    def auto_reply(frame):
        if frame["type"] != "command":
            return None
        response = {"type": "response", "id": frame["id"]}
        if message is not None:
            response["message"] = message
        if data is not None:
            response["data"] = data
        return response

    transport.auto_reply = auto_reply
    return GameSession(fast_config, transport=transport)


class TestGameTools:
    """Tests for argument marshaling and reply handling."""

    @pytest.mark.asyncio
    async def test_move_to(self, fast_config, transport) -> None:
        """move_to sends x/y and returns the reply message."""
        session = make_session(fast_config, transport, message="Moved to (5, 10)")
        await session.start()

        result = await session.tools.move_to(5, 10)

        assert result == "Moved to (5, 10)"
        command = transport.sent_commands()[0]
        assert command["action"] == "move_to"
        assert command["params"] == {"x": 5, "y": 10}
        await session.stop()

    @pytest.mark.asyncio
    async def test_default_message(self, fast_config, transport) -> None:
        """Replies without a message fall back to a confirmation."""
        session = make_session(fast_config, transport)
        await session.start()

        assert await session.tools.move_to(1, 2) == "Moved"
        assert await session.tools.interact() == "Interacted"
        assert await session.tools.cheat_set_money(5000) == "Money set"
        await session.stop()

    @pytest.mark.asyncio
    async def test_params(self, fast_config, transport) -> None:
        """Each wrapper marshals its arguments into params."""
        session = make_session(fast_config, transport, message="ok")
        await session.start()

        await session.tools.use_tool_repeat(3)
        await session.tools.switch_tool("Hoe")
        await session.tools.cheat_warp("Town")
        await session.tools.select_item(2)

        assert [(c["action"], c["params"]) for c in transport.sent_commands()] == [
            ("use_tool_repeat", {"count": 3, "direction": 0}),
            ("switch_tool", {"tool": "Hoe"}),
            ("cheat_warp", {"location": "Town"}),
            ("select_item", {"slot": 2}),
        ]
        await session.stop()

    @pytest.mark.asyncio
    async def test_get_surroundings_returns_data(self, fast_config, transport) -> None:
        """get_surroundings returns the reply data."""
        session = make_session(fast_config, transport, data={"tiles": [[0, 1]]})
        await session.start()

        assert await session.tools.get_surroundings() == {"tiles": [[0, 1]]}
        await session.stop()

    @pytest.mark.asyncio
    async def test_get_state_reads_cache(self, fast_config, transport, wait_until) -> None:
        """get_state reads the cached snapshot without sending anything."""
        session = make_session(fast_config, transport)
        await session.start()
        transport.feed({"type": "state", "data": {"time": {"timeOfDay": 600}}})
        await wait_until(lambda: session.get_latest_state() is not None)

        assert session.tools.get_state() == {"time": {"timeOfDay": 600}}
        assert transport.sent_commands() == []
        await session.stop()
