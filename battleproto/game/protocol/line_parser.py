"""Tokenizer for pipe-delimited protocol lines."""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from absl import logging

from battleproto.game.events.battle_event import (
    TOURNAMENT_SUBCOMMANDS,
    BattleLine,
    Command,
    KeywordValue,
)
from battleproto.game.protocol.compat import (
    DEFAULT_ACTIVATE_RULES,
    ActivateRules,
    upgrade_battle_args,
)

SEPARATOR = "|"

# Commands whose trailing field is free text that may itself contain the
# separator, mapped to the number of fields that follow the command.
ARITY: Dict[str, int] = {
    "chatmsg": 1,
    "chatmsg-raw": 1,
    "raw": 1,
    "error": 1,
    "html": 1,
    "inactive": 1,
    "inactiveoff": 1,
    "warning": 1,
    "fieldhtml": 1,
    "controlshtml": 1,
    "bigerror": 1,
    "debug": 1,
    "tier": 1,
    "challstr": 1,
    "popup": 1,
    "": 1,
    "c": 2,
    "chat": 2,
    "uhtml": 2,
    "uhtmlchange": 2,
    "c:": 3,
    "pm": 3,
}


def _field(args: Sequence[Any], index: int) -> Any:
    return args[index] if index < len(args) else ""


def upgrade_args(args: Sequence[Any]) -> Tuple[Any, ...]:
    """Rewrite legacy single-letter command aliases to their current names.

    `name`, `join` and `leave` gain a trailing flag that is True only for the
    uppercase (silent) alias.

    Args:
        args: Tokenized fields, args[0] being the command

    Returns:
        The upgraded fields as a tuple
    """
    if not args:
        return tuple(args)
    cmd = args[0]
    if cmd in ("name", "n", "N"):
        silent = cmd == "N" or _field(args, 3) is True
        return ("name", _field(args, 1), _field(args, 2), silent)
    if cmd in ("chat", "c"):
        return ("chat", _field(args, 1), _field(args, 2))
    if cmd in ("join", "j", "J"):
        return ("join", _field(args, 1), cmd == "J" or _field(args, 2) is True)
    if cmd in ("leave", "l", "L"):
        return ("leave", _field(args, 1), cmd == "L" or _field(args, 2) is True)
    if cmd in ("battle", "b"):
        return ("battle", _field(args, 1), _field(args, 2), _field(args, 3))
    return tuple(args)


def parse_line(line: str, no_default: bool = False) -> Optional[Tuple[Any, ...]]:
    """Split a protocol line into its command and positional fields.

    Args:
        line: One protocol line, e.g. "|chat|user|hello | world"
        no_default: Return None for commands without a fixed arity instead of
            splitting on every separator

    Returns:
        The fields as a tuple, or None (only when no_default is set)

    Examples:
        >>> parse_line("|c|zarel|a | b")
        ('chat', 'zarel', 'a | b')
        >>> parse_line("just text")
        ('', 'just text')
        >>> parse_line("|")
        ('done',)
    """
    if not line.startswith(SEPARATOR):
        return ("", line)
    if line == SEPARATOR:
        return ("done",)

    index = line.find(SEPARATOR, 1)
    if index < 0:
        cmd, rest = line[1:], ""
    else:
        cmd, rest = line[1:index], line[index + 1 :]

    arity = ARITY.get(cmd)
    if arity is not None:
        fields = rest.split(SEPARATOR, arity - 1)
        fields.extend([""] * (arity - len(fields)))
        return upgrade_args([cmd] + fields)

    if no_default:
        return None
    return upgrade_args(line[1:].split(SEPARATOR))


def _pop_keywords(fields: List[str]) -> Dict[str, KeywordValue]:
    popped: List[Tuple[str, KeywordValue]] = []
    while len(fields) > 1:
        last = fields[-1]
        if not last.startswith("["):
            break
        bracket = last.find("]")
        if bracket <= 0:
            break
        popped.append((last[1:bracket].lower(), last[bracket + 1 :].strip() or True))
        fields.pop()

    # Restore line order; the leftmost occurrence of a repeated keyword wins.
    kw_args: Dict[str, KeywordValue] = {}
    for name, value in reversed(popped):
        kw_args.setdefault(name, value)
    return kw_args


def parse_battle_line(
    line: str, rules: ActivateRules = DEFAULT_ACTIVATE_RULES
) -> BattleLine:
    """Decode one protocol line, including trailing `[keyword] value` fields.

    Commands with a fixed arity never carry keywords and are tokenized by
    parse_line. Every other line is split on each separator, keyword fields
    are popped off its end, legacy aliases are renamed, and the result is
    passed through the compatibility upgrade.

    Args:
        line: One protocol line
        rules: `-activate` reclassification tables

    Returns:
        The canonical BattleLine

    Examples:
        >>> parse_battle_line("|move|p1a: X|Tackle|p2a: Y|[from] Metronome|[still]")
        BattleLine(args=('move', 'p1a: X', 'Tackle', 'p2a: Y'), kw_args={'from': 'Metronome', 'still': True})
    """
    args = parse_line(line, no_default=True)
    if args is not None:
        return BattleLine(args=args)

    fields = line[1:].split(SEPARATOR)
    kw_args = _pop_keywords(fields)
    args, kw_args = upgrade_battle_args(upgrade_args(fields), kw_args, rules)
    if args and Command.from_protocol(args[0]) is None:
        logging.debug("Unrecognized command: %s", args[0])
    return BattleLine(args=args, kw_args=kw_args)


def key(args: Sequence[Any]) -> Optional[str]:
    """Canonical lookup key for a decoded line.

    Args:
        args: Decoded fields

    Returns:
        "|cmd|" (or "|tournament|sub|") when the command is part of the
        vocabulary, otherwise None
    """
    if not args:
        return None
    cmd = args[0]
    if cmd == Command.TOURNAMENT.value:
        sub = _field(args, 1)
        return f"|{cmd}|{sub}|" if sub in TOURNAMENT_SUBCOMMANDS else None
    if Command.from_protocol(cmd) is None:
        return None
    return f"|{cmd}|"
