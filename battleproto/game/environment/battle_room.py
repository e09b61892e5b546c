"""Battle rooms and the router that feeds them raw protocol batches."""

from typing import Dict, List, Optional

from absl import logging

from battleproto.game.data.dex import DEFAULT_GEN, Dex
from battleproto.game.environment.battle_handler import BattleHandler
from battleproto.game.events.battle_event import BattleLine
from battleproto.game.protocol.battle_stream import handle, parse_room_id
from battleproto.game.protocol.compat import DEFAULT_ACTIVATE_RULES, ActivateRules
from battleproto.game.schema.battle_state import Battle


class BattleRoom:
    """One battle room: a Battle and the handler that keeps it current.

    Example usage:
        ```python
        room = BattleRoom("battle-gen9ou-12345", player="Alice")
        room.receive(">battle-gen9ou-12345\\n|turn|1")
        print(room.battle.turn)
        ```

    Attributes:
        room_id: Room id from the `>ROOMID` batch header
        battle: The state this room maintains
        handler: Reducer applying decoded lines to `battle`
        history: Every decoded line, in arrival order (if tracking enabled)
    """

    def __init__(
        self,
        room_id: str,
        player: Optional[str] = None,
        gen: int = DEFAULT_GEN,
        dex: Optional[Dex] = None,
        rules: ActivateRules = DEFAULT_ACTIVATE_RULES,
        track_history: bool = False,
    ) -> None:
        """Initialize the room.

        Args:
            room_id: Battle room id (e.g., "battle-gen9ou-12345")
            player: User name of the viewing player, if any
            gen: Generation assumed until a `|gen|` line arrives
            dex: Game data lookup; defaults to an empty Dex
            rules: `-activate` reclassification tables for decoding
            track_history: Whether to keep every decoded line
        """
        self.room_id = room_id
        self.battle = Battle(gen=gen, dex=dex)
        self.handler = BattleHandler(self.battle, player)
        self._rules = rules
        self._track_history = track_history
        self.history: List[BattleLine] = []

    def receive(self, data: str) -> int:
        """Decode a batch and apply its lines in order.

        A line that fails to decode or apply is logged and skipped; the rest of
        the batch is still applied.

        Args:
            data: Raw batch text, with or without a `>ROOMID` header

        Returns:
            Number of lines applied successfully
        """
        applied = 0
        for _, line in handle(data, self._rules):
            if self._track_history:
                self.history.append(line)
            try:
                if self.handler.apply(line):
                    applied += 1
            except Exception as e:
                logging.error(
                    f"[{self.room_id}] Error applying {line.to_line()}: {e}",
                    exc_info=True,
                )
        return applied

    @property
    def ended(self) -> bool:
        return self.battle.ended


class RoomRouter:
    """Routes raw batches to the BattleRoom registered for their room id.

    Batches without a room id (lobby traffic such as PMs and challenges) are
    kept in a lobby list. Battle rooms are created on demand the first time a
    batch for them arrives, unless `auto_create` is disabled.
    """

    def __init__(
        self,
        player: Optional[str] = None,
        gen: int = DEFAULT_GEN,
        dex: Optional[Dex] = None,
        auto_create: bool = True,
    ) -> None:
        self._player = player
        self._gen = gen
        self._dex = dex
        self._auto_create = auto_create
        self._rooms: Dict[str, BattleRoom] = {}
        self._lobby: List[str] = []

    def register_room(self, room: BattleRoom) -> None:
        """Register a battle room to receive batches.

        Args:
            room: Room to register under its room_id
        """
        self._rooms[room.room_id] = room
        logging.info(f"[RoomRouter] Registered room: {room.room_id}")

    def unregister_room(self, room_id: str) -> Optional[BattleRoom]:
        """Unregister a battle room when it completes.

        Args:
            room_id: Room id to remove

        Returns:
            The removed room, or None if it was not registered
        """
        room = self._rooms.pop(room_id, None)
        if room is not None:
            logging.info(f"[RoomRouter] Unregistered room: {room_id}")
        return room

    def get_room(self, room_id: str) -> Optional[BattleRoom]:
        return self._rooms.get(room_id)

    @property
    def lobby(self) -> List[str]:
        """Batches that carried no room id, in arrival order."""
        return self._lobby

    def route(self, data: str) -> Optional[BattleRoom]:
        """Deliver a raw batch to its room.

        Args:
            data: Raw batch text from the server

        Returns:
            The room that received the batch, or None if it went to the lobby
            or was dropped
        """
        if not data.strip():
            return None
        room_id = parse_room_id(data)
        if not room_id:
            self._lobby.append(data)
            logging.debug("[RoomRouter] Routed batch to lobby")
            return None

        room = self._rooms.get(room_id)
        if room is None:
            if not self._auto_create:
                logging.warning(
                    f"[RoomRouter] No room registered for {room_id}, batch dropped"
                )
                return None
            room = BattleRoom(
                room_id, player=self._player, gen=self._gen, dex=self._dex
            )
            self.register_room(room)
        room.receive(data)
        return room
