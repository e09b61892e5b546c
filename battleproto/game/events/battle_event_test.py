from typing import Optional

from absl.testing import absltest, parameterized

from battleproto.game.events.battle_event import (
    KEYWORD_NAMES,
    BattleLine,
    Command,
)
from battleproto.game.protocol.line_parser import parse_battle_line


class CommandTest(parameterized.TestCase):
    @parameterized.parameters(
        ("move", Command.MOVE),
        ("-boost", Command.BOOST),
        ("-start", Command.START_VOLATILE),
        ("start", Command.START),
        ("", Command.MESSAGE),
        ("c:", Command.CHAT_TIMESTAMPED),
        ("nothing", None),
        (None, None),
    )
    def test_from_protocol(self, name: Optional[str], expected: Optional[Command]) -> None:
        self.assertEqual(Command.from_protocol(name), expected)

    def test_keyword_table_only_names_known_commands(self) -> None:
        for command, names in KEYWORD_NAMES.items():
            self.assertIsInstance(command, Command)
            self.assertTrue(names)


class BattleLineTest(parameterized.TestCase):
    def test_accessors(self) -> None:
        line = BattleLine(
            args=("move", "p1a: X", "Tackle"), kw_args={"from": "Metronome"}
        )
        self.assertEqual(line.cmd, "move")
        self.assertEqual(line.command, Command.MOVE)
        self.assertEqual(line.arg(2), "Tackle")
        self.assertEqual(line.arg(3), "")
        self.assertIsNone(line.arg(3, None))
        self.assertEqual(line.kw("from"), "Metronome")
        self.assertIsNone(line.kw("of"))

    def test_empty_line(self) -> None:
        line = BattleLine(args=())
        self.assertEqual(line.cmd, "")
        self.assertEqual(line.command, Command.MESSAGE)

    def test_unexpected_keywords(self) -> None:
        line = BattleLine(
            args=("-boost", "p1a: X", "atk", "1"),
            kw_args={"from": "ability: Moxie", "bogus": True},
        )
        self.assertEqual(line.unexpected_keywords(), frozenset({"bogus"}))

    def test_command_without_keyword_table(self) -> None:
        line = BattleLine(args=("turn", "1"), kw_args={"silent": True})
        self.assertEqual(line.unexpected_keywords(), frozenset({"silent"}))

    def test_unknown_command_has_no_unexpected_keywords(self) -> None:
        line = BattleLine(args=("t:", "1"), kw_args={"x": True})
        self.assertEqual(line.unexpected_keywords(), frozenset())

    def test_to_line(self) -> None:
        line = BattleLine(
            args=("move", "p1a: X", "Tackle", "p2a: Y"),
            kw_args={"from": "Metronome", "still": True},
        )
        self.assertEqual(
            line.to_line(), "|move|p1a: X|Tackle|p2a: Y|[from] Metronome|[still]"
        )

    def test_to_line_drops_synthesized_flags(self) -> None:
        line = BattleLine(args=("join", "user", True))
        self.assertEqual(line.to_line(), "|join|user")

    @parameterized.parameters(
        ("|move|p1a: X|Tackle|p2a: Y|[from] Metronome|[still]",),
        ("|switch|p1a: Pikachu|Pikachu, L50, M|100/100",),
        ("|-damage|p2a: Y|48/100 brn|[from] brn",),
        ("|-block|p1a: X|move: Protect",),
        ("|-boost|p1a: X|atk|2",),
        ("|turn|4",),
    )
    def test_canonical_line_survives_reserialization(self, text: str) -> None:
        line = parse_battle_line(text)
        self.assertEqual(parse_battle_line(line.to_line()), line)


if __name__ == "__main__":
    absltest.main()
