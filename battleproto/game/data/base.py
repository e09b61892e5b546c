"""Base record for named game objects (moves, abilities, items, conditions)."""

from dataclasses import dataclass, fields
from typing import Any, Dict, TypeVar

from battleproto.game.schema.object_name_normalizer import to_id

T = TypeVar("T", bound="Effect")


@dataclass(frozen=True)
class Effect:
    """A named game object that can be the source of a protocol event.

    `effect_type` is one of "Move", "Ability", "Item" or "Condition".
    `exists` is False for names the lookup tables do not know.
    """

    id: str
    name: str
    effect_type: str = "Condition"
    exists: bool = True

    @classmethod
    def from_dict(cls: type[T], data: Dict[str, Any]) -> T:
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        values.setdefault("id", to_id(data.get("name", "")))
        return cls(**values)
