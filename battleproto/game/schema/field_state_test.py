"""Tests for Field state."""

import json

from absl.testing import absltest, parameterized

from battleproto.game.schema.enums import Terrain, Weather
from battleproto.game.schema.field_state import (
    WEATHER_MAX_TURNS,
    WEATHER_MIN_TURNS,
    Field,
)


class FieldStateTest(parameterized.TestCase):
    def test_default(self) -> None:
        field = Field()
        self.assertEqual(field.weather, Weather.NONE)
        self.assertIsNone(field.terrain)
        self.assertEqual(field.pseudo_weather, {})

    def test_set_weather(self) -> None:
        field = Field()
        field.set_weather(Weather.RAIN)
        self.assertEqual(field.weather, Weather.RAIN)
        self.assertEqual(field.weather_time_left, WEATHER_MAX_TURNS)
        self.assertEqual(field.weather_min_time_left, WEATHER_MIN_TURNS)

    def test_weather_upkeep_counts_down(self) -> None:
        field = Field()
        field.set_weather(Weather.SUN)
        field.set_weather(Weather.SUN, upkeep=True)
        self.assertEqual(field.weather, Weather.SUN)
        self.assertEqual(field.weather_time_left, WEATHER_MAX_TURNS - 1)
        self.assertEqual(field.weather_min_time_left, WEATHER_MIN_TURNS - 1)

    @parameterized.parameters(
        (Weather.HARSH_SUN, False),
        (Weather.SANDSTORM, True),
    )
    def test_indefinite_weather(self, weather: Weather, indefinite: bool) -> None:
        field = Field()
        field.set_weather(weather, indefinite=indefinite)
        self.assertEqual(field.weather, weather)
        self.assertEqual(field.weather_time_left, 0)

    def test_clear_weather(self) -> None:
        field = Field()
        field.set_weather(Weather.HAIL)
        field.set_weather(Weather.NONE)
        self.assertEqual(field.weather, Weather.NONE)
        self.assertEqual(field.weather_time_left, 0)

    def test_pseudo_weather(self) -> None:
        field = Field()
        field.add_pseudo_weather("Trick Room")
        self.assertTrue(field.has_pseudo_weather("trickroom"))
        self.assertEqual(field.pseudo_weather["trickroom"].min_turns_left, 5)

        field.update_pseudo_weather_left()
        self.assertEqual(field.pseudo_weather["trickroom"].min_turns_left, 4)

        field.add_pseudo_weather("Trick Room")
        self.assertEqual(field.pseudo_weather["trickroom"].min_turns_left, 4)

        field.remove_pseudo_weather("Trick Room")
        self.assertFalse(field.has_pseudo_weather("Trick Room"))

    def test_to_dict(self) -> None:
        field = Field(weather=Weather.SNOW, terrain=Terrain.MISTY)
        data = json.loads(str(field))
        self.assertEqual(data["weather"], "snow")
        self.assertEqual(data["terrain"], "mistyterrain")


if __name__ == "__main__":
    absltest.main()
