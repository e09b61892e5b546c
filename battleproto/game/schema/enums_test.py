"""Tests for battle state enums."""

from typing import Optional

from absl.testing import absltest, parameterized

from battleproto.game.schema.enums import GameType, Stat, Status, Terrain, Weather
from battleproto.game.schema.object_name_normalizer import to_id


class EnumsTest(parameterized.TestCase):
    @parameterized.parameters(
        ("", Status.NONE),
        (None, Status.NONE),
        ("brn", Status.BURN),
        ("TOX", Status.TOXIC),
        ("slp", Status.SLEEP),
    )
    def test_status_from_protocol(self, text: Optional[str], expected: Status) -> None:
        self.assertEqual(Status.from_protocol(text), expected)

    def test_status_unknown_raises(self) -> None:
        with self.assertRaises(ValueError):
            Status.from_protocol("fnt")

    @parameterized.parameters(
        ("SunnyDay", Weather.SUN),
        ("RainDance", Weather.RAIN),
        ("Snowscape", Weather.SNOW),
        ("none", Weather.NONE),
        ("DesolateLand", Weather.HARSH_SUN),
        ("move: Sandstorm", Weather.SANDSTORM),
    )
    def test_weather_from_protocol(self, text: str, expected: Weather) -> None:
        self.assertEqual(Weather.from_protocol(text), expected)

    def test_weather_unknown_raises(self) -> None:
        with self.assertRaises(ValueError):
            Weather.from_protocol("Fog")

    def test_primal_weather(self) -> None:
        self.assertTrue(Weather.HEAVY_RAIN.is_primal)
        self.assertFalse(Weather.RAIN.is_primal)

    @parameterized.parameters(
        ("move: Electric Terrain", Terrain.ELECTRIC),
        ("Grassy Terrain", Terrain.GRASSY),
        ("move: Trick Room", None),
    )
    def test_terrain_from_protocol(self, text: str, expected: Optional[Terrain]) -> None:
        self.assertEqual(Terrain.from_protocol(text), expected)

    @parameterized.parameters(("atk", Stat.ATK), ("spa", Stat.SPA), ("evasion", Stat.EVASION))
    def test_stat_from_protocol(self, text: str, expected: Stat) -> None:
        self.assertEqual(Stat.from_protocol(text), expected)

    def test_stat_unknown_raises(self) -> None:
        with self.assertRaises(ValueError):
            Stat.from_protocol("hp")

    @parameterized.parameters(
        ("singles", 1),
        ("doubles", 2),
        ("triples", 3),
        ("rotation", 3),
        ("freeforall", 1),
        ("multi", 1),
        ("somethingnew", 1),
    )
    def test_game_type_slots(self, text: str, slots: int) -> None:
        self.assertEqual(GameType.from_protocol(text).active_slots, slots)


class ToIdTest(parameterized.TestCase):
    @parameterized.parameters(
        ("Farfetch'd", "farfetchd"),
        ("Will-O-Wisp", "willowisp"),
        ("Mr. Mime", "mrmime"),
        ("ability: Wonder Guard", "abilitywonderguard"),
        ("", ""),
        (None, ""),
        (True, ""),
        (12, "12"),
    )
    def test_to_id(self, name: object, expected: str) -> None:
        self.assertEqual(to_id(name), expected)


if __name__ == "__main__":
    absltest.main()
