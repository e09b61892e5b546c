"""Replays a saved battle log and prints the resulting battle state.

The log is the raw protocol text of one battle room, as saved by a client or
downloaded from a replay (one `|`-prefixed line per event).

Example:
    python -m battleproto.scripts.replay_log --log_path=battle.log --player=Alice
"""

from pathlib import Path
from typing import List, Optional

from absl import app, flags, logging

from battleproto.game.data.dex import DEFAULT_GEN, Dex
from battleproto.game.environment.battle_room import BattleRoom
from battleproto.game.events.battle_event import BattleLine, Command
from battleproto.game.exceptions import MalformedFieldError, ProtocolError
from battleproto.game.protocol.battle_stream import handle, parse_room_id
from battleproto.game.protocol.field_parsers import parse_health

FLAGS = flags.FLAGS

flags.DEFINE_string("log_path", None, "Path to the protocol log to replay")
flags.DEFINE_string(
    "player",
    "",
    "User name of the viewing player (enables that player's timer tracking)",
)
flags.DEFINE_integer(
    "gen",
    DEFAULT_GEN,
    "Generation assumed until the log's |gen| line",
)
flags.DEFINE_string(
    "data_dir",
    "",
    "Directory with moves.json, abilities.json and items.json (optional)",
)
flags.DEFINE_bool(
    "strict",
    False,
    "Stop at the first known command that cannot be applied",
)
flags.DEFINE_bool("show_turns", False, "Log the battle state at every turn")

# Position of the HP/status field for commands that carry one.
HEALTH_FIELDS = {
    Command.SWITCH: 3,
    Command.DRAG: 3,
    Command.REPLACE: 3,
    Command.DAMAGE: 2,
    Command.HEAL: 2,
    Command.SETHP: 2,
}


def check_health_field(line: BattleLine) -> None:
    """Raise if the line carries an HP/status field that cannot be parsed.

    Raises:
        MalformedFieldError: For an unparsable `CUR/MAX` pair
    """
    index = HEALTH_FIELDS.get(line.command)
    if index is None:
        return
    hpstring = line.arg(index)
    if hpstring and parse_health(hpstring) is None:
        raise MalformedFieldError("hp", hpstring)


def replay(
    data: str,
    player: Optional[str] = None,
    gen: int = DEFAULT_GEN,
    dex: Optional[Dex] = None,
    strict: bool = False,
    show_turns: bool = False,
) -> BattleRoom:
    """Apply every line of a log to a fresh room.

    Args:
        data: Raw protocol text
        player: User name of the viewing player, if any
        gen: Generation assumed until the log's `|gen|` line
        dex: Game data lookup
        strict: Fail on the first line that cannot be applied
        show_turns: Log the battle state at every `|turn|`

    Returns:
        The room after the last line

    Raises:
        MalformedFieldError: In strict mode, for a line whose HP field is
            malformed
        ProtocolError: In strict mode, for the first line that is part of the
            vocabulary but could not be applied
    """
    room = BattleRoom(
        parse_room_id(data) or "replay", player=player, gen=gen, dex=dex
    )
    for _, line in handle(data):
        if strict:
            check_health_field(line)
        applied = room.handler.apply(line)
        if not applied and strict and line.command is not None:
            raise ProtocolError(f"Could not apply line: {line.to_line()}")
        if show_turns and line.cmd == "turn":
            logging.info(f"Turn {room.battle.turn}:\n{room.battle}")
    return room


def main(argv: List[str]) -> None:
    """Entry point for the script."""
    del argv
    logging.set_verbosity(logging.INFO)
    data = Path(FLAGS.log_path).read_text(encoding="utf-8")
    logging.info(f"Replaying {FLAGS.log_path}")

    dex = Dex.load(FLAGS.data_dir, FLAGS.gen) if FLAGS.data_dir else None
    room = replay(
        data,
        player=FLAGS.player or None,
        gen=FLAGS.gen,
        dex=dex,
        strict=FLAGS.strict,
        show_turns=FLAGS.show_turns,
    )
    if room.battle.ended:
        outcome = "tie" if room.battle.tied else f"winner: {room.battle.winner}"
        logging.info(f"Battle ended after turn {room.battle.turn} ({outcome})")
    print(room.battle)


if __name__ == "__main__":
    flags.mark_flag_as_required("log_path")
    app.run(main)
