"""Battle state representation maintained from protocol events."""

import json
from typing import Any, Dict, Iterator, List, Optional, Union

from battleproto.game.data.dex import DEFAULT_GEN, Dex
from battleproto.game.exceptions import MissingReferentError
from battleproto.game.protocol.field_parsers import parse_int, parse_pokemon_ident
from battleproto.game.protocol.json_payloads import Request
from battleproto.game.schema.enums import TIMER_OFF, GameType, Status
from battleproto.game.schema.field_state import Field
from battleproto.game.schema.pokemon_state import Pokemon
from battleproto.game.schema.side_state import SLOT_LETTERS, Side

PLAYER_IDS = ("p1", "p2", "p3", "p4")
# Identifiers the server uses for "no Pokemon".
NULL_IDENTS = ("", "??", "null", "false")


class Battle:
    """Mutable client-side model of one battle room.

    Built empty and filled in by BattleHandler as protocol lines arrive. p1 and
    p2 always exist; p3 and p4 are created when a four-player battle names
    them.
    """

    def __init__(self, gen: int = DEFAULT_GEN, dex: Optional[Dex] = None) -> None:
        self.gen = gen
        self.dex = (dex or Dex()).mod(gen)
        self.tier = ""
        self.game_type = GameType.SINGLES
        self.species_clause = False
        self.rated: Union[bool, str] = False
        self.rules: List[str] = []
        self.turn = 0
        self.started = False
        self.ended = False
        self.winner = ""
        self.tied = False
        self.kicking_inactive: Union[int, str] = TIMER_OFF
        self.total_time_left = 0
        self.grace_time_left = 0
        self.team_preview_count = 0
        self.request: Optional[Request] = None
        self.field = Field()
        self.sides: Dict[str, Side] = {
            "p1": Side(self, "p1"),
            "p2": Side(self, "p2"),
        }

    @property
    def p1(self) -> Side:
        return self.sides["p1"]

    @property
    def p2(self) -> Side:
        return self.sides["p2"]

    def all_sides(self) -> Iterator[Side]:
        return iter(list(self.sides.values()))

    def set_gen(self, gen: int) -> None:
        self.gen = gen
        self.dex = self.dex.mod(gen)

    def set_game_type(self, game_type: GameType) -> None:
        self.game_type = game_type
        for side in self.sides.values():
            side.set_active_slots(game_type.active_slots)

    def get_side(self, sid: str) -> Side:
        """Get a side by player id.

        Args:
            sid: Player id ("p1".."p4"); anything after the first two
                characters (a slot letter or ": name") is ignored

        Returns:
            The Side, created on demand for p3 and p4

        Raises:
            MissingReferentError: If the id does not name a player
        """
        player = sid.strip()[:2] if isinstance(sid, str) else ""
        if player not in PLAYER_IDS:
            raise MissingReferentError(str(sid))
        side = self.sides.get(player)
        if side is None:
            side = Side(self, player, self.game_type.active_slots)
            self.sides[player] = side
        return side

    def get_pokemon(self, ident: Any, details: str = "") -> Optional[Pokemon]:
        """Resolve a Pokemon identifier against the current state.

        An identifier with a slot letter resolves to that slot's occupant when
        the names agree; otherwise the roster is searched by name.

        Args:
            ident: Identifier such as "p1a: Pikachu"
            details: Optional details used to pick between same-named entries

        Returns:
            The Pokemon, or None if nothing matches
        """
        if not isinstance(ident, str) or ident in NULL_IDENTS:
            return None
        parts = parse_pokemon_ident(ident)
        try:
            side = self.get_side(parts.player)
        except MissingReferentError:
            return None
        if parts.position is not None and parts.position in SLOT_LETTERS:
            slot = SLOT_LETTERS.index(parts.position)
            if slot < len(side.active):
                occupant = side.active[slot]
                if occupant is not None and occupant.name == parts.name:
                    return occupant
        return side.find_pokemon(parts.name, details)

    def get_switched_pokemon(self, ident: str, details: str) -> Pokemon:
        """Find or create the roster entry for a Pokemon entering the field.

        Matches a revealed, inactive Pokemon with the same identity first, then
        an anonymous team preview entry with compatible details. Failing
        both, a new roster entry is created.

        Args:
            ident: Identifier with slot letter, e.g. "p1a: Pikachu"
            details: Details field of the switch line

        Returns:
            The Pokemon, with its slot set from the identifier

        Raises:
            MissingReferentError: If the identifier names no player
        """
        if ident in NULL_IDENTS:
            raise MissingReferentError(ident)
        parts = parse_pokemon_ident(ident)
        side = self.get_side(parts.player)
        slot = -1
        if parts.position is not None and parts.position in SLOT_LETTERS:
            slot = SLOT_LETTERS.index(parts.position)
        base_ident = f"{parts.player}: {parts.name}"
        searchid = f"{base_ident}|{details}"

        found: Optional[Pokemon] = None
        for index, pokemon in enumerate(side.pokemon):
            if pokemon.fainted or pokemon.is_active():
                continue
            if pokemon.searchid == searchid:
                found = pokemon
                break
            if not pokemon.searchid and pokemon.check_details(details):
                found = side.add_pokemon(parts.name, base_ident, details, index)
                break
        if found is None:
            found = side.add_pokemon(parts.name, base_ident, details)
        if slot >= 0:
            found.slot = slot
        return found

    def remember_team_preview_pokemon(self, sid: str, details: str) -> Pokemon:
        return self.get_side(sid).add_pokemon("", "", details)

    def check_active(self, pokemon: Pokemon) -> bool:
        """Check whether an event about `pokemon` is stale.

        An empty slot adopts the Pokemon (a replay joined mid-battle).

        Returns:
            True if a different Pokemon occupies the slot, so the event
            should be ignored
        """
        side = pokemon.side
        if pokemon.slot >= len(side.active):
            return True
        occupant = side.active[pokemon.slot]
        if occupant is None:
            side.replace(pokemon)
            return False
        return occupant is not pokemon

    def active_pokemon(self) -> Iterator[Pokemon]:
        for side in self.all_sides():
            for pokemon in side.active:
                if pokemon is not None:
                    yield pokemon

    def set_turn(self, turn: Any) -> None:
        parsed = parse_int(str(turn))
        if parsed is None:
            return
        self.turn = parsed
        for pokemon in self.active_pokemon():
            pokemon.clear_turnstatuses()

    def update_toxic_turns(self) -> None:
        for pokemon in self.active_pokemon():
            if pokemon.status == Status.TOXIC:
                pokemon.toxic_turns += 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert battle state to a JSON-serializable dictionary."""
        return {
            "gen": self.gen,
            "tier": self.tier,
            "game_type": self.game_type.value,
            "turn": self.turn,
            "rated": self.rated,
            "species_clause": self.species_clause,
            "kicking_inactive": self.kicking_inactive,
            "winner": self.winner,
            "field": self.field.to_dict(),
            "sides": {sid: side.to_dict() for sid, side in self.sides.items()},
        }

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), indent=2)
