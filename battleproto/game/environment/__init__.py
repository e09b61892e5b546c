"""Battle rooms and the reducer that applies protocol lines to battle state."""

from battleproto.game.environment.battle_handler import BattleHandler
from battleproto.game.environment.battle_room import BattleRoom, RoomRouter

__all__ = ["BattleHandler", "BattleRoom", "RoomRouter"]
