"""Enums for battle state representation."""

from enum import Enum
from typing import Optional, Tuple

from battleproto.game.schema.object_name_normalizer import to_id


def _condition_id(protocol_str: str) -> str:
    # "move: Stealth Rock" and "Stealth Rock" name the same condition
    text = protocol_str.strip()
    for prefix in ("move:", "ability:", "item:"):
        if text.lower().startswith(prefix):
            text = text[len(prefix) :]
            break
    return to_id(text)


class Status(Enum):
    """Pokemon status conditions, valued by their protocol abbreviation."""

    NONE = ""
    BURN = "brn"
    PARALYSIS = "par"
    POISON = "psn"
    TOXIC = "tox"
    SLEEP = "slp"
    FREEZE = "frz"
    UNKNOWN = "???"

    @classmethod
    def from_protocol(cls, protocol_str: Optional[str]) -> "Status":
        """Parse a status abbreviation.

        Args:
            protocol_str: Status string from protocol (e.g., "brn", "tox", "")

        Returns:
            Status enum value

        Raises:
            ValueError: If the string is not a known status
        """
        if not protocol_str:
            return cls.NONE
        return cls(protocol_str.strip().lower())


class Weather(Enum):
    """Field weather conditions."""

    NONE = "none"
    SUN = "sunnyday"
    RAIN = "raindance"
    SANDSTORM = "sandstorm"
    HAIL = "hail"
    SNOW = "snow"
    HARSH_SUN = "desolateland"
    HEAVY_RAIN = "primordialsea"
    STRONG_WINDS = "deltastream"

    @classmethod
    def from_protocol(cls, protocol_str: str) -> "Weather":
        """Parse weather from protocol string.

        Args:
            protocol_str: Weather string from protocol (e.g., "SunnyDay", "RainDance")

        Returns:
            Weather enum value

        Raises:
            ValueError: If protocol string is not recognized

        Examples:
            >>> Weather.from_protocol("SunnyDay")
            Weather.SUN
            >>> Weather.from_protocol("none")
            Weather.NONE
        """
        mapping = {
            "": cls.NONE,
            "none": cls.NONE,
            "sunnyday": cls.SUN,
            "raindance": cls.RAIN,
            "sandstorm": cls.SANDSTORM,
            "hail": cls.HAIL,
            "snow": cls.SNOW,
            "snowscape": cls.SNOW,
            "desolateland": cls.HARSH_SUN,
            "primordialsea": cls.HEAVY_RAIN,
            "deltastream": cls.STRONG_WINDS,
        }
        normalized = _condition_id(protocol_str)
        if normalized not in mapping:
            raise ValueError(f"Unknown weather protocol string: {protocol_str}")
        return mapping[normalized]

    @property
    def is_primal(self) -> bool:
        return self in (Weather.HARSH_SUN, Weather.HEAVY_RAIN, Weather.STRONG_WINDS)


class Terrain(Enum):
    """Field terrain conditions."""

    ELECTRIC = "electricterrain"
    GRASSY = "grassyterrain"
    PSYCHIC = "psychicterrain"
    MISTY = "mistyterrain"

    @classmethod
    def from_protocol(cls, protocol_str: str) -> Optional["Terrain"]:
        """Parse terrain from protocol string.

        Args:
            protocol_str: Terrain string from protocol (e.g., "move: Grassy Terrain")

        Returns:
            Terrain enum value, or None if the string names another field effect

        Examples:
            >>> Terrain.from_protocol("move: Electric Terrain")
            Terrain.ELECTRIC
            >>> Terrain.from_protocol("move: Trick Room") is None
            True
        """
        normalized = _condition_id(protocol_str)
        for terrain in cls:
            if terrain.value == normalized:
                return terrain
        return None


class Stat(Enum):
    """Boostable stats. SPC is the unified Special stat of generation 1."""

    ATK = "atk"
    DEF = "def"
    SPA = "spa"
    SPD = "spd"
    SPE = "spe"
    ACCURACY = "accuracy"
    EVASION = "evasion"
    SPC = "spc"

    @classmethod
    def from_protocol(cls, protocol_str: str) -> "Stat":
        """Parse a boost stat name.

        Args:
            protocol_str: Stat string from protocol (e.g., "atk", "spa")

        Returns:
            Stat enum value

        Raises:
            ValueError: If the string is not a boostable stat
        """
        return cls(protocol_str.strip().lower())


# Stats affected by the boost commands, in protocol order.
BOOSTS: Tuple[Stat, ...] = (
    Stat.ATK,
    Stat.DEF,
    Stat.SPA,
    Stat.SPD,
    Stat.SPE,
    Stat.ACCURACY,
    Stat.EVASION,
)


class GameType(Enum):
    """Battle formats, which decide how many active slots each side has."""

    SINGLES = "singles"
    DOUBLES = "doubles"
    TRIPLES = "triples"
    ROTATION = "rotation"
    MULTI = "multi"
    FREE_FOR_ALL = "freeforall"

    @classmethod
    def from_protocol(cls, protocol_str: str) -> "GameType":
        """Parse a game type; anything unrecognized is treated as singles."""
        try:
            return cls(protocol_str.strip().lower())
        except ValueError:
            return cls.SINGLES

    @property
    def active_slots(self) -> int:
        if self is GameType.DOUBLES:
            return 2
        if self in (GameType.TRIPLES, GameType.ROTATION):
            return 3
        return 1


# Turn counts (minimum, maximum) for conditions whose duration a client can
# track. The maximum covers duration-extending items.
CONDITION_DURATIONS = {
    "reflect": (5, 8),
    "lightscreen": (5, 8),
    "auroraveil": (5, 8),
    "safeguard": (5, 0),
    "mist": (5, 0),
    "tailwind": (4, 0),
    "luckychant": (5, 0),
    "trickroom": (5, 0),
    "magicroom": (5, 0),
    "wonderroom": (5, 0),
    "gravity": (5, 0),
    "mudsport": (5, 0),
    "watersport": (5, 0),
    "electricterrain": (5, 8),
    "grassyterrain": (5, 8),
    "psychicterrain": (5, 8),
    "mistyterrain": (5, 8),
}

# Timer sentinels for Battle.kicking_inactive.
TIMER_OFF = "off"
TIMER_UNKNOWN = "on-unknown"
