"""Pokemon state tracked from protocol events."""

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Mapping, Optional, Tuple

from battleproto.game.data.base import Effect
from battleproto.game.protocol.field_parsers import (
    PokemonHealth,
    parse_details,
    parse_health,
)
from battleproto.game.schema.enums import Stat, Status
from battleproto.game.schema.object_name_normalizer import to_id

if TYPE_CHECKING:
    from battleproto.game.schema.side_state import Side

# Volatiles that Baton Pass and illusion replacement do not carry over.
UNCOPYABLE_VOLATILES = frozenset(
    {
        "airballoon",
        "attract",
        "autotomize",
        "disable",
        "encore",
        "foresight",
        "gmaxchistrike",
        "imprison",
        "laserfocus",
        "mimic",
        "miracleeye",
        "nightmare",
        "saltcure",
        "smackdown",
        "stockpile1",
        "stockpile2",
        "stockpile3",
        "syrupbomb",
        "torment",
        "typeadd",
        "typechange",
        "yawn",
    }
)

# Volatiles tied to the Pokemon's own form; never inherited and dropped by a
# Baton Pass switch-out.
FORM_VOLATILES = ("transform", "formechange")


class BoostTable:
    """Stat stage modifiers. Stats at stage 0 are not stored."""

    def __init__(self, stages: Optional[Mapping[Stat, int]] = None) -> None:
        self._stages: Dict[Stat, int] = {}
        for stat, value in (stages or {}).items():
            self.set(stat, value)

    def get(self, stat: Stat) -> int:
        return self._stages.get(stat, 0)

    def set(self, stat: Stat, value: int) -> None:
        if value:
            self._stages[stat] = value
        else:
            self._stages.pop(stat, None)

    def add(self, stat: Stat, delta: int) -> None:
        self.set(stat, self.get(stat) + delta)

    def remove(self, stat: Stat) -> None:
        self._stages.pop(stat, None)

    def clear(self) -> None:
        self._stages.clear()

    def copy(self) -> "BoostTable":
        return BoostTable(self._stages)

    def items(self) -> List[Tuple[Stat, int]]:
        return list(self._stages.items())

    def to_dict(self) -> Dict[str, int]:
        return {stat.value: value for stat, value in self._stages.items()}

    def __contains__(self, stat: object) -> bool:
        return stat in self._stages

    def __iter__(self) -> Iterator[Stat]:
        return iter(list(self._stages))

    def __len__(self) -> int:
        return len(self._stages)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, BoostTable):
            return self._stages == other._stages
        if isinstance(other, dict):
            return self._stages == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"BoostTable({self.to_dict()})"


@dataclass(eq=False)
class Pokemon:
    """Client-side knowledge about one Pokemon.

    Instances are owned by a Side and mutated in place by the battle
    handler. Identity matters: a Pokemon is the same object whether it is
    referenced from the roster or from an active slot.
    """

    side: "Side" = field(repr=False)
    name: str
    species: str
    details: str = ""
    ident: str = ""
    searchid: str = ""
    level: int = 100
    shiny: bool = False
    gender: str = ""
    slot: int = 0

    hp: float = 1000
    maxhp: float = 1000
    hpcolor: str = "g"
    status: Status = Status.NONE
    fainted: bool = False
    toxic_turns: int = 0
    sleep_turns: int = 0

    boosts: BoostTable = field(default_factory=BoostTable)
    volatiles: Dict[str, Tuple[Any, ...]] = field(default_factory=dict)
    turnstatuses: Dict[str, Tuple[Any, ...]] = field(default_factory=dict)
    movestatuses: Dict[str, Tuple[Any, ...]] = field(default_factory=dict)

    item: str = ""
    item_effect: str = ""
    last_item: str = ""
    ability: str = ""
    base_ability: str = ""
    moves: List[str] = field(default_factory=list)
    move_pp_used: Dict[str, int] = field(default_factory=dict)
    last_move: str = ""
    times_attacked: int = 0

    @classmethod
    def from_details(
        cls, side: "Side", name: str, ident: str, details: str
    ) -> "Pokemon":
        """Create a Pokemon from its identifier and details fields.

        Args:
            side: Owning side
            name: Nickname; empty for team preview entries
            ident: Identifier without slot letter, e.g. "p1: Pikachu"
            details: Details field, e.g. "Pikachu, L50, M"

        Returns:
            A new Pokemon at full (unknown) health
        """
        detailed = parse_details(name, ident, details)
        return cls(
            side=side,
            name=name or detailed.species,
            species=detailed.species,
            details=details,
            ident=detailed.ident,
            searchid=detailed.searchid,
            level=detailed.level,
            shiny=detailed.shiny,
            gender=detailed.gender,
        )

    @property
    def health(self) -> PokemonHealth:
        return PokemonHealth(
            hp=self.hp,
            maxhp=self.maxhp,
            hpcolor=self.hpcolor,
            status=self.status.value,
            fainted=self.fainted,
        )

    def health_parse(self, hpstring: Optional[str]) -> bool:
        """Apply an HP/status field to this Pokemon.

        Args:
            hpstring: Field such as "48/100 brn"; empty leaves health alone

        Returns:
            True if the field was understood and applied
        """
        if not hpstring:
            return False
        health = parse_health(hpstring, self.health)
        if health is None:
            return False
        self.hp = health.hp
        self.maxhp = health.maxhp
        self.hpcolor = health.hpcolor
        try:
            self.status = Status.from_protocol(health.status)
        except ValueError:
            self.status = Status.UNKNOWN
        self.fainted = health.fainted
        return True

    def check_details(self, details: str) -> bool:
        """Whether a switch-in's details could describe this roster entry.

        A team preview entry may hide its forme ("Urshifu-*") and never shows
        shininess, so both are matched loosely until the Pokemon is seen.
        """
        if not details:
            return False
        if details == self.details:
            return True
        if self.searchid:
            return False
        if ", shiny" in details and self.check_details(details.replace(", shiny", "")):
            return True
        fields = details.split(", ")
        base_species = fields[0].split("-", 1)[0]
        hidden_forme = ", ".join([f"{base_species}-*"] + fields[1:])
        return hidden_forme == self.details

    def is_active(self) -> bool:
        return any(active is self for active in self.side.active)

    def add_volatile(self, volatile: str, *values: Any) -> None:
        self.volatiles[volatile] = tuple(values)

    def remove_volatile(self, volatile: str) -> None:
        self.volatiles.pop(volatile, None)

    def has_volatile(self, volatile: str) -> bool:
        return volatile in self.volatiles

    def clear_volatiles(self) -> None:
        """Reset everything a switch-out forgets."""
        self.volatiles = {}
        self.boosts.clear()
        self.clear_turnstatuses()
        self.clear_movestatuses()
        self.last_move = ""
        self.toxic_turns = 0
        if self.base_ability:
            self.ability = self.base_ability

    def add_turnstatus(self, volatile: str) -> None:
        self.turnstatuses[volatile] = ()

    def clear_turnstatuses(self) -> None:
        self.turnstatuses = {}

    def add_movestatus(self, volatile: str) -> None:
        self.movestatuses[volatile] = ()

    def clear_movestatuses(self) -> None:
        self.movestatuses = {}

    def copy_volatile_from(self, other: "Pokemon", copy_all: bool = False) -> None:
        """Inherit boosts and volatiles, as Baton Pass and illusion do.

        Args:
            other: The Pokemon previously in the slot
            copy_all: Also keep volatiles that Baton Pass cannot pass
        """
        self.boosts = other.boosts.copy()
        self.volatiles = dict(other.volatiles)
        if not copy_all:
            for volatile in UNCOPYABLE_VOLATILES:
                self.volatiles.pop(volatile, None)
        for volatile in FORM_VOLATILES:
            self.volatiles.pop(volatile, None)

    def activate_ability(self, effect: Optional[Effect]) -> None:
        """Reveal this Pokemon's ability when an ability caused an event."""
        if effect is None or effect.effect_type != "Ability" or not effect.name:
            return
        self.ability = effect.name
        if not self.base_ability and not self.has_volatile("transform"):
            self.base_ability = effect.name

    def remember_move(self, move_name: str, pp: int = 1) -> None:
        """Add a move to the revealed moveset and charge its PP."""
        if not move_name or move_name.startswith("*"):
            return
        move_id = to_id(move_name)
        if move_id == "struggle":
            return
        if move_name not in self.moves:
            self.moves.append(move_name)
        self.move_pp_used[move_name] = self.move_pp_used.get(move_name, 0) + pp

    def use_move(
        self,
        move: Effect,
        target: Optional["Pokemon"] = None,
        kw_args: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Record that this Pokemon used a move.

        Moves called by another effect (`[from]` Metronome, Magic Bounce and
        so on) are not part of the caller's moveset and cost no PP. Pressure
        on an opposing target costs one extra PP.

        Args:
            move: The move used
            target: The targeted Pokemon, if any
            kw_args: Keyword arguments of the `move` line
        """
        kw_args = kw_args or {}
        self.clear_movestatuses()
        source = kw_args.get("from")
        if not source or source is True:
            pp = 1
            if (
                target is not None
                and target.side is not self.side
                and to_id(target.ability) == "pressure"
            ):
                pp += 1
            self.remember_move(move.name, pp)
        self.last_move = move.id
        if target is not None and target is not self:
            target.times_attacked += 1

    def cant_use_move(self, effect: Effect, move: Optional[Effect] = None) -> None:
        """Record a `cant` line: the Pokemon was prevented from moving."""
        self.clear_movestatuses()
        if effect.id == "recharge":
            self.remove_volatile("mustrecharge")
        elif effect.id == "slp":
            self.sleep_turns += 1
        elif effect.effect_type == "Ability":
            self.activate_ability(effect)
        if move is not None and move.name:
            self.remember_move(move.name, 0)

    def to_dict(self) -> Dict[str, Any]:
        """Convert Pokemon state to a JSON-serializable dictionary."""
        return {
            "ident": self.ident,
            "name": self.name,
            "species": self.species,
            "level": self.level,
            "gender": self.gender,
            "shiny": self.shiny,
            "slot": self.slot,
            "hp": self.hp,
            "maxhp": self.maxhp,
            "status": self.status.value,
            "fainted": self.fainted,
            "boosts": self.boosts.to_dict(),
            "volatiles": sorted(self.volatiles),
            "item": self.item,
            "ability": self.ability,
            "moves": list(self.moves),
            "last_move": self.last_move,
        }

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), indent=2)
