"""Parsers for the compound fields carried inside protocol lines.

Each parser returns a small frozen record. Malformed input is reported by
returning None (or a record with defaults) rather than raising, so a caller can
skip just the one update that depended on the field.
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional, Union

from battleproto.game.schema.object_name_normalizer import to_id

Number = Union[int, float]

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(
    r"^\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))"
)
_NAME_START = re.compile(r"[A-Za-z0-9]")

STATUS_CONDITIONS = ("par", "brn", "slp", "frz", "tox")
HP_COLORS = ("y", "g")


def parse_int(text: Optional[str]) -> Optional[int]:
    """Parse the leading integer of a string, ignoring trailing text.

    Behaves like JavaScript's parseInt(text, 10): "30 seconds left" gives 30
    and "abc" gives None.

    Args:
        text: Text starting with an optional sign and digits

    Returns:
        The parsed integer, or None if the text has no leading digits
    """
    if not text:
        return None
    match = _INT_PREFIX.match(text)
    if not match:
        return None
    return int(match.group(1))


def parse_float(text: Optional[str]) -> Optional[float]:
    """Parse the leading decimal number of a string, ignoring trailing text.

    Args:
        text: Text such as "48", "48.5", "100y"

    Returns:
        The parsed float, or None if the text does not start with a number
    """
    if not text:
        return None
    match = _FLOAT_PREFIX.match(text)
    if not match:
        return None
    return float(match.group(1).replace("Infinity", "inf"))


def _as_number(value: Number) -> Number:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


@dataclass(frozen=True)
class PokemonIdentParts:
    """The pieces of a `POSITION: NAME` identifier.

    `position` is the slot letter ("a", "b", "c") or None for a Pokemon that
    is named without being on the field.
    """

    player: str
    position: Optional[str]
    name: str


@dataclass(frozen=True)
class DetailedPokemon:
    details: str
    name: str
    species: str
    level: int = 100
    shiny: bool = False
    gender: str = ""
    ident: str = ""
    searchid: str = ""


@dataclass(frozen=True)
class PokemonHealth:
    """HP and status decoded from a `CUR/MAX STATUS` field."""

    hp: Number
    maxhp: Number
    hpcolor: str = ""
    status: str = ""
    fainted: bool = False


@dataclass(frozen=True)
class ParsedEffect:
    name: str
    type: Optional[str] = None


@dataclass(frozen=True)
class NameParts:
    group: str
    name: str
    away: bool = False
    status: str = ""


def parse_pokemon_ident(ident: str) -> PokemonIdentParts:
    """Split a Pokemon identifier into player, slot letter and name.

    Args:
        ident: Identifier such as "p1a: Pikachu" or "p2: Eevee"

    Returns:
        PokemonIdentParts. A position shorter than three characters has no
        slot letter. An identifier without a colon is treated as a bare
        position with an empty name.

    Examples:
        >>> parse_pokemon_ident("p1a: Pikachu")
        PokemonIdentParts(player='p1', position='a', name='Pikachu')
    """
    position, _, name = ident.partition(":")
    position = position.strip()
    if len(position) < 3:
        return PokemonIdentParts(player=position, position=None, name=name.strip())
    return PokemonIdentParts(
        player=position[:2], position=position[2], name=name.strip()
    )


def parse_details(name: str, ident: str, details: str = "") -> DetailedPokemon:
    """Decode a `SPECIES, L##, M|F, shiny` details field.

    The first field is always the species. The remaining fields are recognised
    by their shape, so "Sawsbuck, shiny, F, L50" and "Sawsbuck, L50, F, shiny"
    decode identically. Unknown trailing fields (tera types and similar) are
    ignored.

    Args:
        name: The Pokemon's nickname, used as the species when details is empty
        ident: The Pokemon's identifier
        details: The details field

    Returns:
        DetailedPokemon with level defaulting to 100 when absent or unparsable
    """
    fields = details.split(", ") if details else []
    species = fields[0] if fields and fields[0] else name
    level = 100
    shiny = False
    gender = ""
    for item in fields[1:]:
        if item == "shiny":
            shiny = True
        elif item in ("M", "F"):
            gender = item
        elif item.startswith("L"):
            level = parse_int(item[1:]) or 100
    return DetailedPokemon(
        details=details,
        name=name,
        species=species,
        level=level,
        shiny=shiny,
        gender=gender,
        ident=ident if name else "",
        searchid=f"{ident}|{details}" if name else "",
    )


def parse_health(
    hpstring: str, previous: Optional[PokemonHealth] = None
) -> Optional[PokemonHealth]:
    """Decode an HP/status field.

    A bare number is a percentage of the previously known max HP, so the
    caller passes the Pokemon's last health record as `previous`. The previous
    status is also needed because "psn" never overrides "tox".

    Args:
        hpstring: Field such as "48/100 brn", "0 fnt", "75" or "212/300y"
        previous: The last known health of the same Pokemon, if any

    Returns:
        PokemonHealth, or None if a `CUR/MAX` pair is not numeric

    Examples:
        >>> parse_health("48/100 brn")
        PokemonHealth(hp=48, maxhp=100, hpcolor='', status='brn', fainted=False)
        >>> parse_health("90", PokemonHealth(hp=200, maxhp=200)).hp
        180
    """
    parts = hpstring.split(" ")
    hp_text = parts[0]
    status_text = parts[1] if len(parts) > 1 else ""

    hp: float = previous.hp if previous else 0
    maxhp: float = previous.maxhp if previous else 0
    status = previous.status if previous else ""
    hpcolor = ""
    fainted = False

    if hp_text in ("0", "0.0"):
        maxhp = maxhp or 100
        hp = 0
    elif hp_text.find("/") > 0:
        cur_text, max_text = hp_text.split("/")[:2]
        cur = parse_float(cur_text)
        total = parse_float(max_text)
        if cur is None or total is None:
            return None
        hp = min(cur, total)
        maxhp = total
        if max_text[-1:] in HP_COLORS:
            hpcolor = max_text[-1]
    else:
        percent = parse_float(hp_text)
        if percent is not None:
            maxhp = maxhp or 100
            hp = maxhp * percent / 100

    if not status_text:
        status = ""
    elif status_text in STATUS_CONDITIONS:
        status = status_text
    elif status_text == "psn" and status != "tox":
        status = status_text
    elif status_text == "fnt":
        hp = 0
        fainted = True

    return PokemonHealth(
        hp=_as_number(hp),
        maxhp=_as_number(maxhp),
        hpcolor=hpcolor,
        status=status,
        fainted=fainted,
    )


def parse_effect(
    effect: Optional[str], fn: Optional[Callable[[str], str]] = None
) -> ParsedEffect:
    """Strip the `item:`, `move:` or `ability:` prefix off an effect name.

    Args:
        effect: Effect text such as "move: Protect" or "ability:Wonder Guard"
        fn: Transform applied to the bare name (defaults to str.strip; pass
            to_id to get an id)

    Returns:
        ParsedEffect with the transformed name and a type tag of "item",
        "move" or "ability", or None for an untagged effect
    """
    transform = fn or str.strip
    if not effect:
        return ParsedEffect(name=transform(""))
    if effect.startswith("item:") or effect.startswith("move:"):
        return ParsedEffect(name=transform(effect[5:]), type=effect[:4])
    if effect.startswith("ability:"):
        return ParsedEffect(name=transform(effect[8:]), type="ability")
    return ParsedEffect(name=transform(effect))


def effect_id(effect: Optional[str]) -> str:
    """Shorthand for the id of an effect with its type prefix removed."""
    return parse_effect(effect, to_id).name


def parse_name_parts(text: str) -> NameParts:
    """Split a user name into rank symbol, name and away status.

    Args:
        text: User text such as "@Zarel@!Busy" or " guest"

    Returns:
        NameParts. `group` is the leading rank symbol (names cannot start with
        one). Text after an "@" is the user's status, and a leading "!" in the
        status marks the user as away.
    """
    group = ""
    if text and not _NAME_START.match(text[0]):
        group = text[0]
        text = text[1:]

    name = text
    status = ""
    away = False
    at_index = text.find("@")
    if at_index > 0:
        name = text[:at_index]
        status = text[at_index + 1 :]
        if status.startswith("!"):
            away = True
            status = status[1:]
    return NameParts(group=group, name=name, away=away, status=status)
