"""Typed game commands on top of GameSession.send_command.

Each method marshals its arguments into a command and returns the reply's
`message` (falling back to a short confirmation) or its `data`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .session import GameSession
    from .state_cache import StateSnapshot


@dataclass
class GameTools:
    """Game commands bound to a session."""

    _session: GameSession

    async def _message(
        self, action: str, default: str, params: dict[str, Any] | None = None
    ) -> str:
        response = await self._session.send_command(action, params)
        return response.message or default

    # Core

    def get_state(self) -> StateSnapshot | None:
        """Latest state pushed by the game."""
        return self._session.get_latest_state()

    async def get_surroundings(self) -> Any:
        """Tiles, objects and characters around the player."""
        response = await self._session.send_command("get_surroundings")
        return response.data

    async def move_to(self, x: int, y: int) -> str:
        """Walk to a tile on the current map."""
        return await self._message("move_to", "Moved", {"x": x, "y": y})

    async def interact(self) -> str:
        return await self._message("interact", "Interacted")

    async def use_tool(self) -> str:
        return await self._message("use_tool", "Tool used")

    async def use_tool_repeat(self, count: int, direction: int = 0) -> str:
        """Use the current tool `count` times facing `direction` (0-3: up, right, down, left)."""
        return await self._message(
            "use_tool_repeat", "Tools used", {"count": count, "direction": direction}
        )

    async def switch_tool(self, tool: str) -> str:
        return await self._message("switch_tool", "Tool switched", {"tool": tool})

    async def face_direction(self, direction: int) -> str:
        return await self._message("face_direction", "Direction changed", {"direction": direction})

    async def select_item(self, slot: int) -> str:
        return await self._message("select_item", "Item selected", {"slot": slot})

    async def eat_item(self, slot: int) -> str:
        return await self._message("eat_item", "Item eaten", {"slot": slot})

    async def enter_door(self) -> str:
        return await self._message("enter_door", "Door entered")

    async def warp_to_location(self, location: str) -> str:
        return await self._message("warp_to_location", "Warped", {"location": location})

    # Cheats (the mod must have cheat mode enabled)

    async def cheat_mode_enable(self) -> str:
        return await self._message("cheat_mode_enable", "Cheat mode enabled")

    async def cheat_warp(self, location: str) -> str:
        return await self._message("cheat_warp", "Warped", {"location": location})

    async def cheat_set_money(self, amount: int) -> str:
        return await self._message("cheat_set_money", "Money set", {"amount": amount})

    async def cheat_grow_crops(self) -> str:
        return await self._message("cheat_grow_crops", "Crops grown")

    async def cheat_harvest_all(self) -> str:
        return await self._message("cheat_harvest_all", "Harvested")

    async def cheat_clear_debris(self) -> str:
        return await self._message("cheat_clear_debris", "Debris cleared")

    async def cheat_hoe_all(self) -> str:
        return await self._message("cheat_hoe_all", "All hoed")
