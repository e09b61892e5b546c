"""Opaque per-generation lookup of moves, abilities and items."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Type, TypeVar

from absl import logging

from battleproto.game.data.base import Effect
from battleproto.game.protocol.field_parsers import parse_effect
from battleproto.game.schema.object_name_normalizer import to_id

E = TypeVar("E", bound=Effect)

DEFAULT_GEN = 9


@dataclass(frozen=True)
class Move(Effect):
    effect_type: str = "Move"
    pp: int = 0
    type: str = ""
    category: str = ""
    target: str = ""


@dataclass(frozen=True)
class Ability(Effect):
    effect_type: str = "Ability"


@dataclass(frozen=True)
class Item(Effect):
    effect_type: str = "Item"


class Dex:
    """Read-only lookup of moves, abilities and items for one generation.

    The reducer treats game data as opaque: any name resolves to an Effect,
    with `exists=False` when the tables do not know it. Tables are optional
    and keyed by id.
    """

    def __init__(
        self,
        gen: int = DEFAULT_GEN,
        moves: Optional[Mapping[str, Move]] = None,
        abilities: Optional[Mapping[str, Ability]] = None,
        items: Optional[Mapping[str, Item]] = None,
    ) -> None:
        self.gen = gen
        self._moves: Mapping[str, Move] = moves or {}
        self._abilities: Mapping[str, Ability] = abilities or {}
        self._items: Mapping[str, Item] = items or {}

    @classmethod
    def load(cls, data_dir: str, gen: int = DEFAULT_GEN) -> "Dex":
        """Load lookup tables from moves.json, abilities.json and items.json.

        Each file holds a list of objects with at least a "name" key. Missing
        files leave the corresponding table empty.

        Args:
            data_dir: Directory containing the JSON files
            gen: Generation the dex describes

        Returns:
            A populated Dex
        """
        directory = Path(data_dir)
        return cls(
            gen=gen,
            moves=cls._load_lookup_data(directory / "moves.json", Move),
            abilities=cls._load_lookup_data(directory / "abilities.json", Ability),
            items=cls._load_lookup_data(directory / "items.json", Item),
        )

    @staticmethod
    def _load_lookup_data(path: Path, cls: Type[E]) -> Dict[str, E]:
        if not path.exists():
            logging.info("No game data at %s", path)
            return {}
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        entries = (cls.from_dict(entry) for entry in data)
        return {entry.id: entry for entry in entries}

    def mod(self, gen: int) -> "Dex":
        """Dex for another generation sharing the same tables."""
        return Dex(gen=gen, moves=self._moves, abilities=self._abilities, items=self._items)

    def _get(self, table: Mapping[str, E], name: Any, cls: Type[E]) -> E:
        text = name.strip() if isinstance(name, str) else ""
        entry_id = to_id(text)
        entry = table.get(entry_id)
        if entry is not None:
            return entry
        return cls(id=entry_id, name=text, exists=False)

    def get_move(self, name: Any) -> Move:
        if isinstance(name, str) and name.startswith("move:"):
            name = name[5:]
        return self._get(self._moves, name, Move)

    def get_ability(self, name: Any) -> Ability:
        if isinstance(name, str) and name.startswith("ability:"):
            name = name[8:]
        return self._get(self._abilities, name, Ability)

    def get_item(self, name: Any) -> Item:
        if isinstance(name, str) and name.startswith("item:"):
            name = name[5:]
        return self._get(self._items, name, Item)

    def get_effect(self, name: Any) -> Effect:
        """Resolve an effect name such as "ability: Intimidate" or "Leftovers".

        A type prefix decides the table. Unprefixed names are looked up as a
        move, then an ability, then an item; unknown names become a
        "Condition" effect.
        """
        if not isinstance(name, str) or not name:
            return Effect(id="", name="", exists=False)
        parsed = parse_effect(name)
        if parsed.type == "move":
            return self.get_move(parsed.name)
        if parsed.type == "ability":
            return self.get_ability(parsed.name)
        if parsed.type == "item":
            return self.get_item(parsed.name)
        for table in (self._moves, self._abilities, self._items):
            entry = table.get(to_id(parsed.name))
            if entry is not None:
                return entry
        return Effect(id=to_id(parsed.name), name=parsed.name, exists=False)

    def with_entries(self, *entries: Effect) -> "Dex":
        """Copy of this dex with extra entries added to the matching tables."""
        moves = dict(self._moves)
        abilities = dict(self._abilities)
        items = dict(self._items)
        for entry in entries:
            if isinstance(entry, Move):
                moves[entry.id] = entry
            elif isinstance(entry, Ability):
                abilities[entry.id] = entry
            elif isinstance(entry, Item):
                items[entry.id] = entry
            else:
                raise ValueError(f"Unsupported dex entry: {entry!r}")
        return Dex(gen=self.gen, moves=moves, abilities=abilities, items=items)
