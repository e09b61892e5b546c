"""Side (player) state: active slots, roster and side conditions."""

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from absl import logging

from battleproto.game.schema.enums import CONDITION_DURATIONS
from battleproto.game.schema.object_name_normalizer import to_id
from battleproto.game.schema.pokemon_state import FORM_VOLATILES, Pokemon

if TYPE_CHECKING:
    from battleproto.game.schema.battle_state import Battle

SLOT_LETTERS = "abc"
BATON_PASS_MOVES = ("batonpass", "zbatonpass", "shedtail")
STACKING_CONDITIONS = ("spikes", "toxicspikes")
MAX_FAINT_COUNT = 100


@dataclass
class SideCondition:
    """A condition on one side of the field, e.g. Reflect or Spikes."""

    name: str
    level: int = 1
    min_turns_left: int = 0
    max_turns_left: int = 0


class Side:
    """One player's half of the battle.

    Sides are numbered by player ("p1".."p4"). p1 and p3 are allies, as are p2
    and p4.
    """

    def __init__(self, battle: "Battle", sid: str, active_slots: int = 1) -> None:
        self.battle = battle
        self.sid = sid
        self.n = int(sid[1:]) - 1
        self.name = ""
        self.avatar = ""
        self.rating = ""
        self.total_pokemon = 6
        self.active: List[Optional[Pokemon]] = [None] * active_slots
        self.pokemon: List[Pokemon] = []
        self.last_pokemon: Optional[Pokemon] = None
        self.faint_counter = 0
        self.side_conditions: Dict[str, SideCondition] = {}

    @property
    def ally(self) -> Optional["Side"]:
        return self.battle.sides.get(f"p{(self.n ^ 2) + 1}")

    @property
    def foe(self) -> Optional["Side"]:
        return self.battle.sides.get(f"p{(self.n ^ 1) + 1}")

    def set_name(self, name: str) -> None:
        self.name = name

    def set_avatar(self, avatar: str) -> None:
        self.avatar = avatar

    def set_active_slots(self, count: int) -> None:
        self.active = [None] * count

    def clear_pokemon(self) -> None:
        self.pokemon = []
        self.active = [None] * len(self.active)
        self.last_pokemon = None

    def add_pokemon(
        self, name: str, ident: str, details: str, replace_index: int = -1
    ) -> Pokemon:
        """Add a Pokemon to the roster.

        Args:
            name: Nickname; empty for team preview entries
            ident: Identifier without slot letter
            details: Details field
            replace_index: Roster index of a team preview entry to overwrite

        Returns:
            The new Pokemon
        """
        old: Optional[Pokemon] = None
        if 0 <= replace_index < len(self.pokemon):
            old = self.pokemon[replace_index]
        pokemon = Pokemon.from_details(self, name, ident, details)
        if old is not None:
            if old.item and not pokemon.item:
                pokemon.item = old.item
            self.pokemon[replace_index] = pokemon
        else:
            self.pokemon.append(pokemon)
        if len(self.pokemon) > self.total_pokemon:
            self.total_pokemon = len(self.pokemon)
        return pokemon

    def find_pokemon(self, name: str, details: str = "") -> Optional[Pokemon]:
        """Roster entry with this nickname, preferring matching details."""
        candidates = [p for p in self.pokemon if p.name == name]
        if details:
            for pokemon in candidates:
                if pokemon.check_details(details):
                    return pokemon
        return candidates[0] if candidates else None

    def _resolve_slot(self, pokemon: Pokemon, slot: Optional[int]) -> int:
        if slot is None:
            slot = pokemon.slot
        if slot >= len(self.active):
            self.active.extend([None] * (slot + 1 - len(self.active)))
        return slot

    def switch_in(self, pokemon: Pokemon, slot: Optional[int] = None) -> None:
        """Place a Pokemon into an active slot.

        Boosts and volatiles are inherited when the previous occupant used
        Baton Pass (or a move like it).
        """
        slot = self._resolve_slot(pokemon, slot)
        self.active[slot] = pokemon
        pokemon.slot = slot
        pokemon.clear_turnstatuses()
        pokemon.clear_movestatuses()
        if self.last_pokemon is not None and self.last_pokemon.last_move in BATON_PASS_MOVES:
            pokemon.copy_volatile_from(self.last_pokemon)
        logging.debug("[%s] %s switched in to slot %d", self.sid, pokemon.name, slot)

    def switch_out(self, pokemon: Pokemon) -> None:
        if pokemon.last_move in BATON_PASS_MOVES:
            for volatile in FORM_VOLATILES:
                pokemon.remove_volatile(volatile)
        else:
            pokemon.clear_volatiles()
        pokemon.clear_turnstatuses()
        pokemon.clear_movestatuses()
        self.last_pokemon = pokemon
        if pokemon.slot < len(self.active) and self.active[pokemon.slot] is pokemon:
            self.active[pokemon.slot] = None

    def drag_in(self, pokemon: Pokemon, slot: Optional[int] = None) -> None:
        """Force a Pokemon in (Roar, Dragon Tail); nothing is passed on."""
        slot = self._resolve_slot(pokemon, slot)
        old = self.active[slot]
        if old is pokemon:
            return
        self.last_pokemon = old
        if old is not None:
            old.clear_volatiles()
        pokemon.clear_volatiles()
        self.active[slot] = pokemon
        pokemon.slot = slot

    def replace(self, pokemon: Pokemon, slot: Optional[int] = None) -> None:
        """Swap the identity of a slot's occupant in place (illusion ending).

        The revealed Pokemon inherits the battle history of the disguised
        one. The disguise is moved back to the roster unharmed.
        """
        slot = self._resolve_slot(pokemon, slot)
        old = self.active[slot]
        if old is pokemon:
            return
        self.last_pokemon = old
        if old is not None:
            pokemon.last_move = old.last_move
            pokemon.copy_volatile_from(old, copy_all=True)
            pokemon.toxic_turns = old.toxic_turns
            pokemon.sleep_turns = old.sleep_turns
            old.clear_volatiles()
            old.fainted = False
            old.hp = old.maxhp
        self.active[slot] = pokemon
        pokemon.slot = slot

    def swap_to(self, pokemon: Pokemon, slot: int) -> None:
        """Move an active Pokemon to another slot, exchanging with its occupant."""
        if pokemon.slot == slot:
            return
        slot = self._resolve_slot(pokemon, slot)
        target = self.active[slot]
        old_slot = pokemon.slot
        pokemon.slot = slot
        if target is not None:
            target.slot = old_slot
        self.active[slot] = pokemon
        self.active[old_slot] = target

    def swap_with(self, pokemon: Pokemon, target: Pokemon) -> None:
        if pokemon is target:
            return
        old_slot = pokemon.slot
        pokemon.slot = target.slot
        target.slot = old_slot
        self.active[pokemon.slot] = pokemon
        self.active[target.slot] = target

    def faint(self, pokemon: Pokemon, slot: Optional[int] = None) -> None:
        slot = self._resolve_slot(pokemon, slot)
        pokemon.clear_volatiles()
        self.last_pokemon = pokemon
        if self.active[slot] is pokemon:
            self.active[slot] = None
        pokemon.fainted = True
        pokemon.hp = 0
        if self.faint_counter < MAX_FAINT_COUNT:
            self.faint_counter += 1

    def add_side_condition(self, name: str) -> None:
        """Start (or stack another layer of) a side condition."""
        condition_id = to_id(name)
        existing = self.side_conditions.get(condition_id)
        if existing is not None:
            if condition_id in STACKING_CONDITIONS:
                existing.level += 1
            return
        min_turns, max_turns = CONDITION_DURATIONS.get(condition_id, (0, 0))
        self.side_conditions[condition_id] = SideCondition(
            name=name, min_turns_left=min_turns, max_turns_left=max_turns
        )

    def remove_side_condition(self, name: str) -> None:
        self.side_conditions.pop(to_id(name), None)

    def update_side_conditions_left(self) -> None:
        for condition in self.side_conditions.values():
            if condition.min_turns_left:
                condition.min_turns_left -= 1
            if condition.max_turns_left:
                condition.max_turns_left -= 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.sid,
            "name": self.name,
            "active": [p.name if p else None for p in self.active],
            "pokemon": [p.to_dict() for p in self.pokemon],
            "side_conditions": {
                k: {"level": v.level, "min_turns_left": v.min_turns_left}
                for k, v in self.side_conditions.items()
            },
            "faint_counter": self.faint_counter,
        }

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), indent=2)
