"""Tests for battle rooms and the room router."""

from unittest import mock

from absl.testing import absltest, parameterized

from battleproto.game.data.dex import Dex, Move
from battleproto.game.environment.battle_room import BattleRoom, RoomRouter

ROOM_ID = "battle-gen9randombattle-1"

BATCH = "\n".join(
    [
        f">{ROOM_ID}",
        "|init|battle",
        "|player|p1|Alice|1|",
        "|player|p2|Bob|2|",
        "|gen|9",
        "|t:|1700000000",
        "|start",
        "|switch|p1a: Sparky|Pikachu, L50, M|100/100",
        "|switch|p2a: Fluffy|Eevee, L50, F|100/100",
        "|turn|1",
    ]
)


class BattleRoomTest(parameterized.TestCase):
    def test_receive(self) -> None:
        room = BattleRoom(ROOM_ID, player="Alice")
        # "t:" is outside the command vocabulary and is not applied.
        self.assertEqual(room.receive(BATCH), 8)
        self.assertEqual(room.battle.turn, 1)
        self.assertEqual(room.battle.p1.name, "Alice")
        self.assertEqual(room.battle.p2.active[0].species, "Eevee")
        self.assertFalse(room.ended)

    def test_receive_without_header(self) -> None:
        room = BattleRoom(ROOM_ID)
        room.receive("|turn|3\n|win|Alice")
        self.assertEqual(room.battle.turn, 3)
        self.assertTrue(room.ended)

    def test_receive_accumulates_batches(self) -> None:
        room = BattleRoom(ROOM_ID)
        room.receive(BATCH)
        room.receive(f">{ROOM_ID}\n|-damage|p2a: Fluffy|40/100\n|turn|2")
        self.assertEqual(room.battle.p2.active[0].hp, 40)
        self.assertEqual(room.battle.turn, 2)

    @parameterized.parameters((True, 9), (False, 0))
    def test_history(self, track_history: bool, expected: int) -> None:
        room = BattleRoom(ROOM_ID, track_history=track_history)
        room.receive(BATCH)
        self.assertLen(room.history, expected)
        if track_history:
            self.assertEqual(room.history[0].cmd, "init")
            self.assertEqual(room.history[-1].args, ("turn", "1"))

    def test_failing_line_does_not_stop_batch(self) -> None:
        room = BattleRoom(ROOM_ID)
        with mock.patch.object(
            room.handler, "apply", side_effect=[RuntimeError("boom"), True, True]
        ) as apply:
            applied = room.receive("|turn|1\n|turn|2\n|turn|3")
        self.assertEqual(apply.call_count, 3)
        self.assertEqual(applied, 2)

    def test_dex_and_gen(self) -> None:
        dex = Dex().with_entries(Move(id="thunderbolt", name="Thunderbolt", pp=15))
        room = BattleRoom(ROOM_ID, gen=4, dex=dex)
        self.assertEqual(room.battle.gen, 4)
        self.assertEqual(room.battle.dex.gen, 4)
        self.assertTrue(room.battle.dex.get_move("Thunderbolt").exists)


class RoomRouterTest(absltest.TestCase):
    def test_route_creates_room(self) -> None:
        router = RoomRouter(player="Alice")
        room = router.route(BATCH)
        self.assertIsNotNone(room)
        self.assertEqual(room.room_id, ROOM_ID)
        self.assertIs(router.get_room(ROOM_ID), room)
        self.assertEqual(room.battle.turn, 1)

    def test_route_reuses_room(self) -> None:
        router = RoomRouter()
        first = router.route(BATCH)
        second = router.route(f">{ROOM_ID}\n|turn|2")
        self.assertIs(first, second)
        self.assertEqual(first.battle.turn, 2)

    def test_rooms_are_independent(self) -> None:
        router = RoomRouter()
        router.route(BATCH)
        other = router.route(">battle-gen9ou-2\n|turn|7")
        self.assertEqual(other.battle.turn, 7)
        self.assertEqual(router.get_room(ROOM_ID).battle.turn, 1)

    def test_lobby(self) -> None:
        router = RoomRouter()
        batch = '|updatesearch|{"searching": [], "games": null}'
        self.assertIsNone(router.route(batch))
        self.assertEqual(router.lobby, [batch])

    def test_blank_batch(self) -> None:
        router = RoomRouter()
        self.assertIsNone(router.route("\n"))
        self.assertEqual(router.lobby, [])

    def test_no_auto_create(self) -> None:
        router = RoomRouter(auto_create=False)
        self.assertIsNone(router.route(BATCH))
        self.assertIsNone(router.get_room(ROOM_ID))

        room = BattleRoom(ROOM_ID)
        router.register_room(room)
        self.assertIs(router.route(BATCH), room)
        self.assertEqual(room.battle.turn, 1)

    def test_unregister_room(self) -> None:
        router = RoomRouter()
        room = router.route(BATCH)
        self.assertIs(router.unregister_room(ROOM_ID), room)
        self.assertIsNone(router.get_room(ROOM_ID))
        self.assertIsNone(router.unregister_room(ROOM_ID))


if __name__ == "__main__":
    absltest.main()
