"""Event vocabulary for decoded protocol lines.

A decoded line is a BattleLine: a tuple of positional fields whose first
element is the command name, plus the keyword arguments that trailed it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple, Union

KeywordValue = Union[str, bool]


class Command(Enum):
    """Closed vocabulary of protocol commands."""

    # Room messages
    MESSAGE = ""
    INIT = "init"
    TITLE = "title"
    USERLIST = "userlist"
    HTML = "html"
    UHTML = "uhtml"
    UHTMLCHANGE = "uhtmlchange"
    JOIN = "join"
    LEAVE = "leave"
    NAME = "name"
    CHAT = "chat"
    TIMESTAMP = ":"
    CHAT_TIMESTAMPED = "c:"
    BATTLE = "battle"

    # Global messages
    POPUP = "popup"
    PM = "pm"
    USERCOUNT = "usercount"
    NAMETAKEN = "nametaken"
    CHALLSTR = "challstr"
    UPDATEUSER = "updateuser"
    FORMATS = "formats"
    UPDATESEARCH = "updatesearch"
    UPDATECHALLENGES = "updatechallenges"
    QUERYRESPONSE = "queryresponse"

    # Misc
    SWITCHOUT = "switchout"
    UNLINK = "unlink"
    RAW = "raw"
    WARNING = "warning"
    ERROR = "error"
    BIGERROR = "bigerror"
    CHATMSG = "chatmsg"
    CHATMSG_RAW = "chatmsg-raw"
    CONTROLSHTML = "controlshtml"
    FIELDHTML = "fieldhtml"
    DEBUG = "debug"
    TOURNAMENT = "tournament"

    # Battle initialization
    PLAYER = "player"
    TEAMSIZE = "teamsize"
    GAMETYPE = "gametype"
    GEN = "gen"
    TIER = "tier"
    RATED = "rated"
    SEED = "seed"
    RULE = "rule"
    TEAMPREVIEW = "teampreview"
    CLEARPOKE = "clearpoke"
    POKE = "poke"
    START = "start"

    # Battle progress
    DONE = "done"
    REQUEST = "request"
    INACTIVE = "inactive"
    INACTIVEOFF = "inactiveoff"
    UPKEEP = "upkeep"
    TURN = "turn"
    WIN = "win"
    TIE = "tie"

    # Major actions
    MOVE = "move"
    SWITCH = "switch"
    DRAG = "drag"
    DETAILSCHANGE = "detailschange"
    REPLACE = "replace"
    SWAP = "swap"
    CANT = "cant"
    FAINT = "faint"

    # Minor actions
    FORMECHANGE = "-formechange"
    FAIL = "-fail"
    BLOCK = "-block"
    NOTARGET = "-notarget"
    MISS = "-miss"
    DAMAGE = "-damage"
    HEAL = "-heal"
    SETHP = "-sethp"
    STATUS = "-status"
    CURESTATUS = "-curestatus"
    CURETEAM = "-cureteam"
    BOOST = "-boost"
    UNBOOST = "-unboost"
    SETBOOST = "-setboost"
    SWAPBOOST = "-swapboost"
    INVERTBOOST = "-invertboost"
    CLEARBOOST = "-clearboost"
    CLEARALLBOOST = "-clearallboost"
    CLEARPOSITIVEBOOST = "-clearpositiveboost"
    CLEARNEGATIVEBOOST = "-clearnegativeboost"
    COPYBOOST = "-copyboost"
    OHKO = "-ohko"
    WEATHER = "-weather"
    FIELDSTART = "-fieldstart"
    FIELDEND = "-fieldend"
    SIDESTART = "-sidestart"
    SIDEEND = "-sideend"
    START_VOLATILE = "-start"
    END_VOLATILE = "-end"
    CRIT = "-crit"
    SUPEREFFECTIVE = "-supereffective"
    RESISTED = "-resisted"
    IMMUNE = "-immune"
    ITEM = "-item"
    ENDITEM = "-enditem"
    ABILITY = "-ability"
    ENDABILITY = "-endability"
    TRANSFORM = "-transform"
    MEGA = "-mega"
    PRIMAL = "-primal"
    BURST = "-burst"
    ZPOWER = "-zpower"
    ZBROKEN = "-zbroken"
    TERASTALLIZE = "-terastallize"
    ACTIVATE = "-activate"
    FIELDACTIVATE = "-fieldactivate"
    HINT = "-hint"
    CENTER = "-center"
    MESSAGE_MINOR = "-message"
    COMBINE = "-combine"
    WAITING = "-waiting"
    PREPARE = "-prepare"
    MUSTRECHARGE = "-mustrecharge"
    HITCOUNT = "-hitcount"
    SINGLEMOVE = "-singlemove"
    SINGLETURN = "-singleturn"
    ANIM = "-anim"

    @classmethod
    def from_protocol(cls, name: Any) -> Optional["Command"]:
        """Look up a command by its protocol name.

        Args:
            name: Command token (e.g., "move", "-boost")

        Returns:
            The matching Command, or None if the name is outside the vocabulary

        Examples:
            >>> Command.from_protocol("-boost")
            Command.BOOST
            >>> Command.from_protocol("nothing") is None
            True
        """
        try:
            return cls(name)
        except ValueError:
            return None


TOURNAMENT_SUBCOMMANDS: FrozenSet[str] = frozenset(
    {
        "create",
        "update",
        "updateEnd",
        "error",
        "forceend",
        "join",
        "leave",
        "replace",
        "start",
        "disqualify",
        "battlestart",
        "battleend",
        "end",
        "scouting",
        "autostart",
        "autodq",
    }
)

GENERAL_KEYWORDS: FrozenSet[str] = frozenset({"from", "of", "still", "silent"})


def _with_general(*names: str) -> FrozenSet[str]:
    return GENERAL_KEYWORDS | frozenset(names)


# Keyword arguments each command may carry. Commands missing from this table
# never carry keyword arguments.
KEYWORD_NAMES: Dict[Command, FrozenSet[str]] = {
    Command.CANT: _with_general(),
    Command.DETAILSCHANGE: _with_general("msg"),
    Command.MOVE: _with_general(
        "anim", "miss", "notarget", "prepare", "spread", "zeffect"
    ),
    Command.SWAP: _with_general(),
    Command.SWITCHOUT: _with_general(),
    Command.ACTIVATE: _with_general(
        "ability",
        "ability2",
        "block",
        "broken",
        "damage",
        "item",
        "move",
        "number",
        "consumed",
        "name",
    ),
    Command.ABILITY: _with_general("move", "weaken", "fail"),
    Command.BLOCK: _with_general(),
    Command.BOOST: _with_general("multiple", "zeffect"),
    Command.COPYBOOST: _with_general("zeffect"),
    Command.CLEARBOOST: _with_general("zeffect"),
    Command.CLEARALLBOOST: _with_general("zeffect"),
    Command.CLEARPOSITIVEBOOST: _with_general("zeffect"),
    Command.CLEARNEGATIVEBOOST: _with_general("zeffect"),
    Command.CRIT: frozenset({"spread"}),
    Command.CURESTATUS: _with_general("thaw", "msg"),
    Command.CURETEAM: _with_general(),
    Command.DAMAGE: _with_general("partiallytrapped"),
    Command.END_VOLATILE: _with_general("partiallytrapped", "interrupt"),
    Command.ENDABILITY: _with_general(),
    Command.ENDITEM: _with_general("eat", "move", "weaken"),
    Command.FAIL: _with_general("forme", "heavy", "msg", "weak", "fail"),
    Command.FIELDACTIVATE: _with_general(),
    Command.FIELDSTART: _with_general(),
    Command.FIELDEND: _with_general(),
    Command.FORMECHANGE: _with_general("msg"),
    Command.HEAL: _with_general("wisher", "zeffect"),
    Command.IMMUNE: _with_general("ohko"),
    Command.INVERTBOOST: _with_general(),
    Command.ITEM: _with_general("identify"),
    Command.MISS: _with_general(),
    Command.RESISTED: frozenset({"spread"}),
    Command.SETBOOST: _with_general(),
    Command.SETHP: _with_general(),
    Command.SIDEEND: _with_general(),
    Command.SINGLEMOVE: _with_general("zeffect"),
    Command.SINGLETURN: _with_general("zeffect"),
    Command.START_VOLATILE: _with_general(
        "already", "damage", "block", "fatigue", "upkeep", "zeffect"
    ),
    Command.STATUS: _with_general(),
    Command.SUPEREFFECTIVE: frozenset({"spread"}),
    Command.SWAPBOOST: _with_general(),
    Command.TRANSFORM: _with_general("msg"),
    Command.UNBOOST: _with_general("multiple", "zeffect"),
    Command.WEATHER: _with_general("upkeep"),
}


@dataclass(frozen=True)
class BattleLine:
    """A decoded protocol line.

    Attributes:
        args: Positional fields; args[0] is the command name. Fields are
            strings except where the compatibility upgrade types them (the
            `gen` number, the silent flag of `join`/`leave`/`name`).
        kw_args: Keyword arguments popped off the end of the line. Values are
            strings, or True for presence-only flags such as `[still]`.
    """

    args: Tuple[Any, ...]
    kw_args: Mapping[str, KeywordValue] = field(default_factory=dict)

    @property
    def cmd(self) -> str:
        return self.args[0] if self.args else ""

    @property
    def command(self) -> Optional[Command]:
        return Command.from_protocol(self.cmd)

    def arg(self, index: int, default: Any = "") -> Any:
        """Positional field at `index`, or `default` if the line is shorter."""
        if index < len(self.args):
            return self.args[index]
        return default

    def kw(self, name: str) -> Optional[KeywordValue]:
        return self.kw_args.get(name)

    def unexpected_keywords(self) -> FrozenSet[str]:
        """Keyword names that the command is not documented to carry."""
        command = self.command
        if command is None:
            return frozenset()
        return frozenset(self.kw_args) - KEYWORD_NAMES.get(command, frozenset())

    def to_line(self) -> str:
        """Serialize back to protocol text.

        Booleans synthesized by the legacy alias upgrade are not part of the
        wire format and are dropped.
        """
        fields = [str(a) for a in self.args if not isinstance(a, bool)]
        for name, value in self.kw_args.items():
            fields.append(f"[{name}]" if value is True else f"[{name}] {value}")
        return "|" + "|".join(fields)
