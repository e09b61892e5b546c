"""Field state: weather, terrain and pseudo-weather."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from battleproto.game.schema.enums import CONDITION_DURATIONS, Terrain, Weather
from battleproto.game.schema.object_name_normalizer import to_id

WEATHER_MIN_TURNS = 5
WEATHER_MAX_TURNS = 8


@dataclass
class PseudoWeather:
    """A whole-field effect such as Trick Room, with its remaining turns."""

    name: str
    min_turns_left: int = 0
    max_turns_left: int = 0


@dataclass
class Field:
    """Global field conditions, shared by every side."""

    weather: Weather = Weather.NONE
    weather_time_left: int = 0
    weather_min_time_left: int = 0
    terrain: Optional[Terrain] = None
    pseudo_weather: Dict[str, PseudoWeather] = field(default_factory=dict)

    def set_weather(
        self, weather: Weather, upkeep: bool = False, indefinite: bool = False
    ) -> None:
        """Apply a `-weather` line.

        Args:
            weather: The weather named by the line
            upkeep: The line only reports that existing weather continues
            indefinite: The weather has no turn limit (gen 3-5 abilities,
                primal weathers)
        """
        if weather == Weather.NONE:
            self.weather = Weather.NONE
            self.weather_time_left = 0
            self.weather_min_time_left = 0
            return
        if upkeep:
            if self.weather_time_left:
                self.weather_time_left -= 1
            if self.weather_min_time_left:
                self.weather_min_time_left -= 1
            return
        self.weather = weather
        if indefinite or weather.is_primal:
            self.weather_time_left = 0
            self.weather_min_time_left = 0
        else:
            self.weather_time_left = WEATHER_MAX_TURNS
            self.weather_min_time_left = WEATHER_MIN_TURNS

    def has_pseudo_weather(self, name: str) -> bool:
        return to_id(name) in self.pseudo_weather

    def add_pseudo_weather(self, name: str) -> None:
        pseudo_id = to_id(name)
        if pseudo_id in self.pseudo_weather:
            return
        min_turns, max_turns = CONDITION_DURATIONS.get(pseudo_id, (0, 0))
        self.pseudo_weather[pseudo_id] = PseudoWeather(name, min_turns, max_turns)

    def remove_pseudo_weather(self, name: str) -> None:
        self.pseudo_weather.pop(to_id(name), None)

    def update_pseudo_weather_left(self) -> None:
        """Count down field effect durations at the end of a turn."""
        for pseudo in self.pseudo_weather.values():
            if pseudo.min_turns_left:
                pseudo.min_turns_left -= 1
            if pseudo.max_turns_left:
                pseudo.max_turns_left -= 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weather": self.weather.value,
            "weather_time_left": self.weather_time_left,
            "terrain": self.terrain.value if self.terrain else None,
            "pseudo_weather": {
                k: v.min_turns_left for k, v in self.pseudo_weather.items()
            },
        }

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), indent=2)
