"""Rewrites historical protocol encodings into their current shapes.

Older servers overloaded `-activate` for blocks, starts, immunities and
field effects, and packed extra information into positional fields. The
upgrade here turns such lines into the current (canonical) form. Running it on
an already canonical line returns the line unchanged.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

from absl import logging

from battleproto.game.events.battle_event import BattleLine, KeywordValue
from battleproto.game.protocol.field_parsers import effect_id

Args = Tuple[Any, ...]
KwArgs = Dict[str, KeywordValue]

# Keywords whose presence means an `-activate` line is already canonical.
_CANONICAL_ACTIVATE_KEYWORDS = ("item", "move", "number", "ability")


@dataclass(frozen=True)
class ActivateRules:
    """Effect ids that decide how a legacy `-activate` line is reclassified.

    The sets track historical server quirks and grow as protocol revisions
    are discovered, so they are data rather than branches in the upgrade.

    Attributes:
        version: Label for the protocol revision these rules describe
        blockable: Effects whose activation is really a `-block`
        startable: Effects whose activation is really a volatile `-start`
        numberable: Effects that carried a move and a number positionally
        item_carriers: Effects that carried an item positionally
        number_carriers: Effects that carried a number positionally
        ability_swappers: Effects that carried two abilities positionally
        field_activations: Effects whose activation is a `-fieldactivate`
        ability_displays: Effects that should display as an ability, mapped
            to the canonical effect name
        immune_sources: Effects that are really an immunity, mapped to the
            synthesized `from` keyword
        blocking_cant_effects: `cant` effects that are really a `-block`
        ability_start_sources: `-start` sources that lack an `ability:` prefix
        ability_move_sources: `move` sources that lack an `ability:` prefix
    """

    version: str
    blockable: FrozenSet[str]
    startable: FrozenSet[str]
    numberable: FrozenSet[str]
    item_carriers: FrozenSet[str] = frozenset({"symbiosis"})
    number_carriers: FrozenSet[str] = frozenset({"magnitude"})
    ability_swappers: FrozenSet[str] = frozenset(
        {"skillswap", "mummy", "wanderingspirit"}
    )
    field_activations: FrozenSet[str] = frozenset({"fairylock"})
    ability_displays: Mapping[str, str] = field(
        default_factory=lambda: {"sturdy": "ability: Sturdy"}
    )
    immune_sources: Mapping[str, str] = field(
        default_factory=lambda: {"wonderguard": "ability:Wonder Guard"}
    )
    blocking_cant_effects: FrozenSet[str] = frozenset(
        {"ability: Queenly Majesty", "ability: Damp", "ability: Dazzling"}
    )
    ability_start_sources: FrozenSet[str] = frozenset({"Protean", "Color Change"})
    ability_move_sources: FrozenSet[str] = frozenset({"Magic Bounce"})

    def extend(
        self,
        version: str,
        blockable: FrozenSet[str] = frozenset(),
        startable: FrozenSet[str] = frozenset(),
        numberable: FrozenSet[str] = frozenset(),
    ) -> "ActivateRules":
        """Return a newer rule set that adds effect ids to the three main sets.

        Args:
            version: Label for the new revision
            blockable: Extra ids reclassified as `-block`
            startable: Extra ids reclassified as `-start`
            numberable: Extra ids repacked into `move`/`number` keywords

        Returns:
            A new ActivateRules; this one is left unchanged
        """
        return replace(
            self,
            version=version,
            blockable=self.blockable | frozenset(blockable),
            startable=self.startable | frozenset(startable),
            numberable=self.numberable | frozenset(numberable),
        )


DEFAULT_ACTIVATE_RULES = ActivateRules(
    version="2021",
    blockable=frozenset(
        {
            "ingrain",
            "quickguard",
            "wideguard",
            "craftyshield",
            "matblock",
            "protect",
            "mist",
            "safeguard",
            "electricterrain",
            "mistyterrain",
            "psychicterrain",
            "telepathy",
            "stickyhold",
            "suctioncups",
            "aromaveil",
            "flowerveil",
            "sweetveil",
            "disguise",
            "safetygoggles",
            "protectivepads",
        }
    ),
    startable=frozenset(
        {
            "wrap",
            "clamp",
            "whirlpool",
            "firespin",
            "magmastorm",
            "sandtomb",
            "infestation",
            "charge",
            "trapped",
            "bind",
        }
    ),
    numberable=frozenset(
        {"spite", "grudge", "forewarn", "sketch", "leppaberry", "mysteryberry"}
    ),
)


def _field(args: Args, index: int) -> Optional[Any]:
    return args[index] if index < len(args) else None


def _compact(*args: Any) -> Args:
    """Build an args tuple, dropping trailing fields that are missing."""
    fields = list(args)
    while fields and (fields[-1] is None or fields[-1] == ""):
        fields.pop()
    return tuple(fields)


def _keywords(**kw_args: Optional[KeywordValue]) -> KwArgs:
    return {name: value for name, value in kw_args.items() if value}


def _upgrade_activate(args: Args, kw_args: KwArgs, rules: ActivateRules):
    if any(kw_args.get(name) for name in _CANONICAL_ACTIVATE_KEYWORDS):
        return args, kw_args

    pokemon = _field(args, 1) or ""
    effect = _field(args, 2)
    arg3 = _field(args, 3)
    arg4 = _field(args, 4)
    target = kw_args.get("of")
    if target is True:
        target = None
    effect_name = effect_id(effect)

    if kw_args.get("block"):
        return ("-fail", pokemon), kw_args
    if effect_name in rules.ability_displays:
        return ("-activate", pokemon, rules.ability_displays[effect_name]), kw_args
    if effect_name in rules.immune_sources:
        return ("-immune", pokemon), {"from": rules.immune_sources[effect_name]}
    if effect_name == "beatup" and target:
        return args, {"name": target}
    if effect_name in rules.blockable:
        if target:
            kw_args["of"] = pokemon
            return _compact("-block", target, effect, arg3), kw_args
        return _compact("-block", pokemon, effect, arg3), kw_args
    if effect_name in rules.startable:
        return ("-start", pokemon, effect), _keywords(of=target)
    if effect_name in rules.field_activations:
        return ("-fieldactivate", effect), {}

    if effect_name in rules.item_carriers:
        kw_args.update(_keywords(item=arg3))
    elif effect_name in rules.number_carriers:
        kw_args.update(_keywords(number=arg3))
    elif effect_name in rules.ability_swappers:
        kw_args.update(_keywords(ability=arg3, ability2=arg4))
    elif effect_name in rules.numberable:
        kw_args.update(_keywords(move=arg3, number=arg4))
    return _compact("-activate", pokemon, effect, target), kw_args


def _parse_gen(value: Any) -> Any:
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        logging.warning("Non-numeric generation: %r", value)
        return value


def upgrade_battle_args(
    args: Args,
    kw_args: Optional[Mapping[str, KeywordValue]] = None,
    rules: ActivateRules = DEFAULT_ACTIVATE_RULES,
) -> Tuple[Args, KwArgs]:
    """Rewrite a decoded battle line into its canonical shape.

    Args:
        args: Positional fields, args[0] being the command
        kw_args: Keyword arguments of the line (not modified)
        rules: The `-activate` reclassification tables to apply

    Returns:
        A (args, kw_args) pair. Commands without a rewrite rule are returned
        with their original fields and a copy of their keywords.
    """
    args = tuple(args)
    kw_args = dict(kw_args or {})
    if not args:
        return args, kw_args
    cmd = args[0]

    if cmd == "-activate":
        return _upgrade_activate(args, kw_args, rules)
    if cmd == "-start":
        source = kw_args.get("from")
        if source in rules.ability_start_sources:
            kw_args["from"] = f"ability:{source}"
    elif cmd == "move":
        source = kw_args.get("from")
        if source in rules.ability_move_sources:
            kw_args["from"] = f"ability:{source}"
    elif cmd == "cant":
        effect = _field(args, 2)
        if effect in rules.blocking_cant_effects:
            target = kw_args.get("of")
            return (
                _compact(
                    "-block",
                    _field(args, 1),
                    effect,
                    _field(args, 3),
                    target if target is not True else None,
                ),
                {},
            )
    elif cmd == "gen":
        return ("gen", _parse_gen(_field(args, 1))), {}
    elif cmd == "-nothing":
        return ("-activate", "", "move:Splash"), kw_args
    return args, kw_args


def upgrade(
    line: BattleLine, rules: ActivateRules = DEFAULT_ACTIVATE_RULES
) -> BattleLine:
    """BattleLine form of upgrade_battle_args."""
    args, kw_args = upgrade_battle_args(line.args, line.kw_args, rules)
    return BattleLine(args=args, kw_args=kw_args)
