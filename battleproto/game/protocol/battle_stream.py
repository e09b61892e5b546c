"""Lazy decoding of protocol batches into (room id, BattleLine) pairs."""

from typing import Iterator, Tuple

from absl import logging

from battleproto.game.events.battle_event import BattleLine
from battleproto.game.protocol.compat import DEFAULT_ACTIVATE_RULES, ActivateRules
from battleproto.game.protocol.line_parser import parse_battle_line

RoomLine = Tuple[str, BattleLine]


def parse_room_id(data: str) -> str:
    """Room id named by a batch's `>ROOMID` header, or "" for lobby traffic.

    Batches are formatted as:
        >ROOMID
        |message1
        |message2
        ...
    """
    first_line = data.split("\n", 1)[0]
    if first_line.startswith(">"):
        return first_line[1:].strip()
    return ""


def handle(
    data: str, rules: ActivateRules = DEFAULT_ACTIVATE_RULES
) -> Iterator[RoomLine]:
    """Decode every non-empty line of a batch.

    A `>ROOMID` header at the start of the data, or directly after a blank
    line, sets the room for the lines that follow it up to the next blank
    line. A line that fails to decode is logged and skipped.

    Args:
        data: Raw text received from the server
        rules: `-activate` reclassification tables

    Yields:
        (room id, BattleLine) for each non-empty protocol line
    """
    room_id = ""
    at_batch_start = True
    for line in data.split("\n"):
        if not line:
            room_id = ""
            at_batch_start = True
            continue
        if at_batch_start and line.startswith(">"):
            room_id = line[1:].strip()
            at_batch_start = False
            continue
        at_batch_start = False
        try:
            decoded = parse_battle_line(line, rules)
        except Exception as e:
            logging.error(f"[{room_id}] Error decoding {line!r}: {e}", exc_info=True)
            continue
        yield room_id, decoded


class BattleStream:
    """Restartable iterable over the decoded lines of a batch.

    Each call to iter() decodes the batch from the beginning, so the same
    stream can be replayed into several rooms or inspected twice.
    """

    def __init__(
        self, data: str, rules: ActivateRules = DEFAULT_ACTIVATE_RULES
    ) -> None:
        """Initialize the battle stream.

        Args:
            data: Raw text received from the server
            rules: `-activate` reclassification tables
        """
        self._data = data
        self._rules = rules

    @property
    def room_id(self) -> str:
        return parse_room_id(self._data)

    def __iter__(self) -> Iterator[RoomLine]:
        return handle(self._data, self._rules)
