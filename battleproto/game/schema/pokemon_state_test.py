"""Tests for Pokemon state."""

import json

from absl.testing import absltest, parameterized

from battleproto.game.data.base import Effect
from battleproto.game.data.dex import Ability, Move
from battleproto.game.schema.battle_state import Battle
from battleproto.game.schema.enums import Stat, Status
from battleproto.game.schema.pokemon_state import BoostTable, Pokemon


class BoostTableTest(absltest.TestCase):
    def test_zero_is_not_stored(self) -> None:
        boosts = BoostTable()
        boosts.add(Stat.ATK, 2)
        boosts.add(Stat.ATK, -2)
        self.assertNotIn(Stat.ATK, boosts)
        self.assertEmpty(boosts)
        self.assertEqual(boosts.get(Stat.ATK), 0)

    def test_set_and_compare(self) -> None:
        boosts = BoostTable({Stat.SPE: 1, Stat.DEF: 0})
        self.assertEqual(boosts, {Stat.SPE: 1})
        self.assertEqual(boosts.to_dict(), {"spe": 1})

    def test_copy_is_independent(self) -> None:
        boosts = BoostTable({Stat.ATK: 1})
        copied = boosts.copy()
        copied.add(Stat.ATK, 1)
        self.assertEqual(boosts.get(Stat.ATK), 1)
        self.assertEqual(copied.get(Stat.ATK), 2)


class PokemonStateTest(parameterized.TestCase):
    def setUp(self) -> None:
        self.battle = Battle()
        self.side = self.battle.p1
        self.pokemon = Pokemon.from_details(
            self.side, "Sparky", "p1: Sparky", "Pikachu, L50, M"
        )

    def test_from_details(self) -> None:
        self.assertEqual(self.pokemon.name, "Sparky")
        self.assertEqual(self.pokemon.species, "Pikachu")
        self.assertEqual(self.pokemon.level, 50)
        self.assertEqual(self.pokemon.gender, "M")
        self.assertEqual(self.pokemon.searchid, "p1: Sparky|Pikachu, L50, M")
        self.assertEqual(self.pokemon.hp, 1000)
        self.assertEqual(self.pokemon.maxhp, 1000)

    def test_team_preview_entry_named_after_species(self) -> None:
        pokemon = Pokemon.from_details(self.side, "", "", "Garchomp, F")
        self.assertEqual(pokemon.name, "Garchomp")
        self.assertEqual(pokemon.searchid, "")

    @parameterized.parameters(
        ("48/100 brn", 48, 100, Status.BURN, False),
        ("0 fnt", 0, 1000, Status.NONE, True),
        ("50", 500, 1000, Status.NONE, False),
        ("70/100 ???", 70, 100, Status.NONE, False),
    )
    def test_health_parse(
        self, hpstring: str, hp: int, maxhp: int, status: Status, fainted: bool
    ) -> None:
        self.assertTrue(self.pokemon.health_parse(hpstring))
        self.assertEqual(self.pokemon.hp, hp)
        self.assertEqual(self.pokemon.maxhp, maxhp)
        self.assertEqual(self.pokemon.status, status)
        self.assertEqual(self.pokemon.fainted, fainted)

    def test_health_parse_rejects_malformed(self) -> None:
        self.assertFalse(self.pokemon.health_parse("abc/100"))
        self.assertFalse(self.pokemon.health_parse(""))
        self.assertEqual(self.pokemon.hp, 1000)

    @parameterized.parameters(
        ("Urshifu-*, L50", "Urshifu-Rapid-Strike, L50", True),
        ("Urshifu-*, L50", "Urshifu, L50", True),
        ("Pikachu, L50", "Pikachu, L50, shiny", True),
        ("Pikachu, L50", "Raichu, L50", False),
        ("Pikachu, L50", "", False),
    )
    def test_check_details_preview_entries(
        self, preview_details: str, details: str, expected: bool
    ) -> None:
        pokemon = Pokemon.from_details(self.side, "", "", preview_details)
        self.assertEqual(pokemon.check_details(details), expected)

    def test_check_details_revealed_entry_is_exact(self) -> None:
        self.assertTrue(self.pokemon.check_details("Pikachu, L50, M"))
        self.assertFalse(self.pokemon.check_details("Pikachu, L50, M, shiny"))

    def test_clear_volatiles_restores_base_ability(self) -> None:
        self.pokemon.base_ability = "Static"
        self.pokemon.ability = "Intimidate"
        self.pokemon.add_volatile("confusion")
        self.pokemon.boosts.set(Stat.ATK, 2)
        self.pokemon.last_move = "tackle"
        self.pokemon.clear_volatiles()
        self.assertEqual(self.pokemon.ability, "Static")
        self.assertEqual(self.pokemon.volatiles, {})
        self.assertEmpty(self.pokemon.boosts)
        self.assertEqual(self.pokemon.last_move, "")

    def test_copy_volatile_from_skips_uncopyable(self) -> None:
        other = Pokemon.from_details(self.side, "Old", "p1: Old", "Eevee")
        other.boosts.set(Stat.SPE, 2)
        other.add_volatile("substitute")
        other.add_volatile("yawn")
        other.add_volatile("transform", "Mew")
        self.pokemon.copy_volatile_from(other)
        self.assertEqual(self.pokemon.boosts, {Stat.SPE: 2})
        self.assertEqual(set(self.pokemon.volatiles), {"substitute"})

        self.pokemon.copy_volatile_from(other, copy_all=True)
        self.assertEqual(set(self.pokemon.volatiles), {"substitute", "yawn"})

    def test_activate_ability(self) -> None:
        self.pokemon.activate_ability(Ability(id="static", name="Static"))
        self.assertEqual(self.pokemon.ability, "Static")
        self.assertEqual(self.pokemon.base_ability, "Static")

        self.pokemon.activate_ability(Move(id="tackle", name="Tackle"))
        self.assertEqual(self.pokemon.ability, "Static")

    def test_activate_ability_while_transformed_keeps_base(self) -> None:
        self.pokemon.add_volatile("transform", "Mew")
        self.pokemon.activate_ability(Ability(id="synchronize", name="Synchronize"))
        self.assertEqual(self.pokemon.ability, "Synchronize")
        self.assertEqual(self.pokemon.base_ability, "")

    def test_use_move(self) -> None:
        target = Pokemon.from_details(self.battle.p2, "Foe", "p2: Foe", "Eevee")
        self.pokemon.add_movestatus("protect")
        self.pokemon.use_move(Move(id="thunderbolt", name="Thunderbolt"), target)
        self.assertEqual(self.pokemon.moves, ["Thunderbolt"])
        self.assertEqual(self.pokemon.move_pp_used, {"Thunderbolt": 1})
        self.assertEqual(self.pokemon.last_move, "thunderbolt")
        self.assertEqual(self.pokemon.movestatuses, {})
        self.assertEqual(target.times_attacked, 1)

    def test_use_move_into_pressure(self) -> None:
        target = Pokemon.from_details(self.battle.p2, "Foe", "p2: Foe", "Zapdos")
        target.ability = "Pressure"
        self.pokemon.use_move(Move(id="thunderbolt", name="Thunderbolt"), target)
        self.assertEqual(self.pokemon.move_pp_used, {"Thunderbolt": 2})

    def test_called_move_is_not_remembered(self) -> None:
        self.pokemon.use_move(
            Move(id="thunderbolt", name="Thunderbolt"), None, {"from": "Metronome"}
        )
        self.assertEqual(self.pokemon.moves, [])
        self.assertEqual(self.pokemon.last_move, "thunderbolt")

    @parameterized.parameters(("Struggle",), ("*Recharge",))
    def test_pseudo_moves_are_not_remembered(self, name: str) -> None:
        self.pokemon.remember_move(name)
        self.assertEqual(self.pokemon.moves, [])

    def test_cant_use_move(self) -> None:
        self.pokemon.add_volatile("mustrecharge")
        self.pokemon.cant_use_move(Effect(id="recharge", name="recharge"))
        self.assertFalse(self.pokemon.has_volatile("mustrecharge"))

        self.pokemon.cant_use_move(Effect(id="slp", name="slp"), Move(id="tackle", name="Tackle"))
        self.assertEqual(self.pokemon.sleep_turns, 1)
        self.assertEqual(self.pokemon.moves, ["Tackle"])
        self.assertEqual(self.pokemon.move_pp_used, {"Tackle": 0})

    def test_cant_use_move_reveals_ability(self) -> None:
        self.pokemon.cant_use_move(Ability(id="truant", name="Truant"))
        self.assertEqual(self.pokemon.ability, "Truant")

    def test_str_is_json(self) -> None:
        data = json.loads(str(self.pokemon))
        self.assertEqual(data["species"], "Pikachu")
        self.assertEqual(data["status"], "")


if __name__ == "__main__":
    absltest.main()
