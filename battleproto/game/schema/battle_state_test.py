"""Tests for Battle state."""

import json

from absl.testing import absltest, parameterized

from battleproto.game.data.dex import Dex, Move
from battleproto.game.exceptions import MissingReferentError
from battleproto.game.schema.battle_state import Battle
from battleproto.game.schema.enums import GameType, Status


class BattleStateTest(parameterized.TestCase):
    def setUp(self) -> None:
        self.battle = Battle()

    @parameterized.parameters(("p1",), ("p1a",), ("p1: Alice",), ("p2",))
    def test_get_side(self, sid: str) -> None:
        side = self.battle.get_side(sid)
        self.assertEqual(side.sid, sid[:2])

    def test_get_side_creates_p3_and_p4(self) -> None:
        p3 = self.battle.get_side("p3")
        self.assertIs(self.battle.sides["p3"], p3)
        self.assertIs(self.battle.get_side("p3a"), p3)

    @parameterized.parameters(("p5",), ("",), ("spectator",))
    def test_get_side_unknown(self, sid: str) -> None:
        with self.assertRaises(MissingReferentError):
            self.battle.get_side(sid)

    def test_get_switched_pokemon_creates_entry(self) -> None:
        pokemon = self.battle.get_switched_pokemon("p1a: Sparky", "Pikachu, L50")
        self.assertEqual(pokemon.name, "Sparky")
        self.assertEqual(pokemon.ident, "p1: Sparky")
        self.assertEqual(pokemon.slot, 0)
        self.assertEqual(self.battle.p1.pokemon, [pokemon])

    def test_get_switched_pokemon_finds_revealed_entry(self) -> None:
        first = self.battle.get_switched_pokemon("p1a: Sparky", "Pikachu, L50")
        again = self.battle.get_switched_pokemon("p1a: Sparky", "Pikachu, L50")
        self.assertIs(first, again)
        self.assertLen(self.battle.p1.pokemon, 1)

    def test_get_switched_pokemon_skips_active_entry(self) -> None:
        self.battle.set_game_type(GameType.DOUBLES)
        first = self.battle.get_switched_pokemon("p1a: Ditto", "Ditto")
        self.battle.p1.switch_in(first)
        second = self.battle.get_switched_pokemon("p1b: Ditto", "Ditto")
        self.assertIsNot(first, second)
        self.assertEqual(second.slot, 1)

    def test_get_switched_pokemon_fills_preview_entry(self) -> None:
        self.battle.remember_team_preview_pokemon("p2", "Urshifu-*, L50")
        self.battle.remember_team_preview_pokemon("p2", "Garchomp, L50, F")
        pokemon = self.battle.get_switched_pokemon(
            "p2a: Urshifu", "Urshifu-Rapid-Strike, L50"
        )
        self.assertIs(self.battle.p2.pokemon[0], pokemon)
        self.assertLen(self.battle.p2.pokemon, 2)
        self.assertEqual(pokemon.species, "Urshifu-Rapid-Strike")

    def test_get_switched_pokemon_unknown_side(self) -> None:
        with self.assertRaises(MissingReferentError):
            self.battle.get_switched_pokemon("p9a: Nobody", "Ditto")

    def test_get_pokemon(self) -> None:
        pokemon = self.battle.get_switched_pokemon("p1a: Sparky", "Pikachu")
        self.battle.p1.switch_in(pokemon)
        self.assertIs(self.battle.get_pokemon("p1a: Sparky"), pokemon)
        self.assertIs(self.battle.get_pokemon("p1: Sparky"), pokemon)
        self.assertIsNone(self.battle.get_pokemon("p1a: Other"))

    @parameterized.parameters(("",), ("??",), ("null",), ("false",), ("p7a: X",))
    def test_get_pokemon_none(self, ident: str) -> None:
        self.assertIsNone(self.battle.get_pokemon(ident))

    def test_check_active(self) -> None:
        sparky = self.battle.get_switched_pokemon("p1a: Sparky", "Pikachu")
        other = self.battle.get_switched_pokemon("p1a: Other", "Eevee")

        # An empty slot adopts the Pokemon.
        self.assertFalse(self.battle.check_active(sparky))
        self.assertIs(self.battle.p1.active[0], sparky)

        self.assertFalse(self.battle.check_active(sparky))
        self.assertTrue(self.battle.check_active(other))

    def test_set_turn_clears_turnstatuses(self) -> None:
        pokemon = self.battle.get_switched_pokemon("p1a: Sparky", "Pikachu")
        self.battle.p1.switch_in(pokemon)
        pokemon.add_turnstatus("protect")
        self.battle.set_turn("3")
        self.assertEqual(self.battle.turn, 3)
        self.assertEqual(pokemon.turnstatuses, {})

    def test_update_toxic_turns(self) -> None:
        pokemon = self.battle.get_switched_pokemon("p1a: Sparky", "Pikachu")
        self.battle.p1.switch_in(pokemon)
        pokemon.status = Status.TOXIC
        self.battle.update_toxic_turns()
        self.battle.update_toxic_turns()
        self.assertEqual(pokemon.toxic_turns, 2)

    def test_set_game_type(self) -> None:
        self.battle.set_game_type(GameType.TRIPLES)
        self.assertLen(self.battle.p1.active, 3)
        self.assertLen(self.battle.p2.active, 3)

    def test_set_gen_keeps_dex_tables(self) -> None:
        battle = Battle(dex=Dex().with_entries(Move(id="tackle", name="Tackle", pp=35)))
        battle.set_gen(1)
        self.assertEqual(battle.dex.gen, 1)
        self.assertTrue(battle.dex.get_move("Tackle").exists)

    def test_to_dict(self) -> None:
        self.battle.get_switched_pokemon("p1a: Sparky", "Pikachu")
        data = json.loads(str(self.battle))
        self.assertEqual(data["sides"]["p1"]["pokemon"][0]["name"], "Sparky")
        self.assertEqual(data["game_type"], "singles")


if __name__ == "__main__":
    absltest.main()
