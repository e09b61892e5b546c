"""Applies decoded protocol lines to a mutable Battle.

The main entry point is BattleHandler.apply(). Each command in the closed
Command vocabulary maps to one `_apply_*` method; display-only commands map to
a no-op so they are not reported as unknown.
"""

from typing import Callable, Dict, List, Optional

from absl import logging

from battleproto.game.events.battle_event import BattleLine, Command
from battleproto.game.exceptions import ProtocolError
from battleproto.game.protocol.field_parsers import (
    effect_id,
    parse_details,
    parse_effect,
    parse_int,
)
from battleproto.game.protocol.json_payloads import parse_request
from battleproto.game.schema.battle_state import Battle
from battleproto.game.schema.enums import (
    BOOSTS,
    TIMER_OFF,
    TIMER_UNKNOWN,
    GameType,
    Stat,
    Status,
    Terrain,
    Weather,
)
from battleproto.game.schema.object_name_normalizer import to_id
from battleproto.game.schema.pokemon_state import Pokemon

# Volatiles that -copyboost carries along from generation 6 onwards.
COPYBOOST_VOLATILES = ("focusenergy", "laserfocus")

# Commands that only affect presentation.
DISPLAY_COMMANDS = (
    Command.MESSAGE,
    Command.INIT,
    Command.TITLE,
    Command.USERLIST,
    Command.HTML,
    Command.UHTML,
    Command.UHTMLCHANGE,
    Command.JOIN,
    Command.LEAVE,
    Command.NAME,
    Command.CHAT,
    Command.TIMESTAMP,
    Command.CHAT_TIMESTAMPED,
    Command.RAW,
    Command.WARNING,
    Command.ERROR,
    Command.BIGERROR,
    Command.DEBUG,
    Command.CONTROLSHTML,
    Command.FIELDHTML,
    Command.SEED,
    Command.DONE,
    Command.FAIL,
    Command.BLOCK,
    Command.NOTARGET,
    Command.MISS,
    Command.OHKO,
    Command.CRIT,
    Command.SUPEREFFECTIVE,
    Command.RESISTED,
    Command.IMMUNE,
    Command.PRIMAL,
    Command.BURST,
    Command.ZPOWER,
    Command.ZBROKEN,
    Command.FIELDACTIVATE,
    Command.HINT,
    Command.CENTER,
    Command.MESSAGE_MINOR,
    Command.COMBINE,
    Command.WAITING,
    Command.HITCOUNT,
    Command.ANIM,
)


class BattleHandler:
    """Reducer that mutates one Battle from the lines of its room.

    Lines must be applied in arrival order. A line that names a Pokemon the
    battle does not know is ignored; a line that names an unknown side or
    carries an unparsable field is logged and skipped.
    """

    def __init__(self, battle: Battle, player: Optional[str] = None) -> None:
        """Initialize the handler.

        Args:
            battle: State to mutate
            player: User name of the viewing player, used to pick out that
                player's timer messages
        """
        self.battle = battle
        self.player = to_id(player) if player else None
        self._handlers: Dict[Command, Callable[[BattleLine], None]] = {
            Command.START: self._apply_start,
            Command.UPKEEP: self._apply_upkeep,
            Command.TURN: self._apply_turn,
            Command.TIER: self._apply_tier,
            Command.GAMETYPE: self._apply_gametype,
            Command.RULE: self._apply_rule,
            Command.RATED: self._apply_rated,
            Command.INACTIVE: self._apply_inactive,
            Command.INACTIVEOFF: self._apply_inactiveoff,
            Command.PLAYER: self._apply_player,
            Command.TEAMSIZE: self._apply_teamsize,
            Command.CLEARPOKE: self._apply_clearpoke,
            Command.POKE: self._apply_poke,
            Command.TEAMPREVIEW: self._apply_teampreview,
            Command.REQUEST: self._apply_request,
            Command.WIN: self._apply_win,
            Command.TIE: self._apply_tie,
            Command.GEN: self._apply_gen,
            Command.SWITCH: self._apply_switch,
            Command.DRAG: self._apply_switch,
            Command.REPLACE: self._apply_switch,
            Command.SWITCHOUT: self._apply_switchout,
            Command.FAINT: self._apply_faint,
            Command.SWAP: self._apply_swap,
            Command.MOVE: self._apply_move,
            Command.CANT: self._apply_cant,
            Command.DETAILSCHANGE: self._apply_details_change,
            Command.FORMECHANGE: self._apply_formechange,
            Command.TRANSFORM: self._apply_transform,
            Command.DAMAGE: self._apply_health,
            Command.HEAL: self._apply_health,
            Command.SETHP: self._apply_health,
            Command.STATUS: self._apply_status,
            Command.CURESTATUS: self._apply_curestatus,
            Command.CURETEAM: self._apply_cureteam,
            Command.BOOST: self._apply_boost,
            Command.UNBOOST: self._apply_boost,
            Command.SETBOOST: self._apply_setboost,
            Command.SWAPBOOST: self._apply_swapboost,
            Command.CLEARPOSITIVEBOOST: self._apply_clearpositiveboost,
            Command.CLEARNEGATIVEBOOST: self._apply_clearnegativeboost,
            Command.COPYBOOST: self._apply_copyboost,
            Command.CLEARBOOST: self._apply_clearboost,
            Command.INVERTBOOST: self._apply_invertboost,
            Command.CLEARALLBOOST: self._apply_clearallboost,
            Command.WEATHER: self._apply_weather,
            Command.FIELDSTART: self._apply_fieldstart,
            Command.FIELDEND: self._apply_fieldend,
            Command.SIDESTART: self._apply_sidestart,
            Command.SIDEEND: self._apply_sideend,
            Command.START_VOLATILE: self._apply_start_volatile,
            Command.END_VOLATILE: self._apply_end_volatile,
            Command.ITEM: self._apply_item,
            Command.ENDITEM: self._apply_enditem,
            Command.ABILITY: self._apply_ability,
            Command.ENDABILITY: self._apply_endability,
            Command.MEGA: self._apply_mega,
            Command.TERASTALLIZE: self._apply_terastallize,
            Command.SINGLETURN: self._apply_singleturn,
            Command.SINGLEMOVE: self._apply_singlemove,
            Command.MUSTRECHARGE: self._apply_mustrecharge,
            Command.PREPARE: self._apply_prepare,
            Command.ACTIVATE: self._apply_activate,
        }
        for command in DISPLAY_COMMANDS:
            self._handlers[command] = self._ignore

    def apply(self, line: BattleLine) -> bool:
        """Apply one decoded line to the battle.

        Args:
            line: Canonical BattleLine

        Returns:
            True if a handler ran to completion, False if the line was unknown
            or could not be applied
        """
        command = line.command
        handler = self._handlers.get(command) if command is not None else None
        if handler is None:
            logging.debug("Ignoring unhandled command: %s", line.cmd)
            return False

        unexpected = line.unexpected_keywords()
        if unexpected:
            logging.debug(
                "Unexpected keywords for %s: %s", line.cmd, sorted(unexpected)
            )

        try:
            handler(line)
        except (ProtocolError, ValueError) as e:
            logging.warning("Failed to apply %s: %s", line.to_line(), e)
            return False
        return True

    def _ignore(self, line: BattleLine) -> None:
        pass

    def _pokemon(self, ident: object) -> Optional[Pokemon]:
        return self.battle.get_pokemon(ident)

    def _reveal_source(self, line: BattleLine, pokemon: Optional[Pokemon]) -> None:
        """Attribute a `[from]` ability or item to `[of]`, or to `pokemon`."""
        source = line.kw("from")
        if not source or source is True or line.kw("silent"):
            return
        effect = self.battle.dex.get_effect(source)
        holder = self._pokemon(line.kw("of")) or pokemon
        if holder is None:
            return
        if effect.effect_type == "Ability":
            holder.activate_ability(effect)
        elif effect.effect_type == "Item":
            holder.item = effect.name

    # Battle initialization and progress

    def _apply_start(self, line: BattleLine) -> None:
        self.battle.started = True
        self.battle.p1.active[0] = None
        self.battle.p2.active[0] = None

    def _apply_upkeep(self, line: BattleLine) -> None:
        self.battle.field.update_pseudo_weather_left()
        for side in self.battle.all_sides():
            side.update_side_conditions_left()
        self.battle.update_toxic_turns()

    def _apply_turn(self, line: BattleLine) -> None:
        self.battle.set_turn(line.arg(1))

    def _apply_tier(self, line: BattleLine) -> None:
        self.battle.tier = line.arg(1)
        if self.battle.tier.endswith("Random Battle"):
            self.battle.species_clause = True

    def _apply_gametype(self, line: BattleLine) -> None:
        self.battle.set_game_type(GameType.from_protocol(line.arg(1)))

    def _apply_rule(self, line: BattleLine) -> None:
        rule = line.arg(1)
        self.battle.rules.append(rule)
        if rule.split(": ")[0] == "Species Clause":
            self.battle.species_clause = True

    def _apply_rated(self, line: BattleLine) -> None:
        self.battle.rated = line.arg(1) or True

    def _apply_inactive(self, line: BattleLine) -> None:
        """Track the battle timer from its free-text announcements.

        Args:
            line: `|inactive|MESSAGE`, e.g. "Time left: 150 sec this turn |
                300 sec total | 30 sec grace"
        """
        battle = self.battle
        text = line.arg(1)
        if battle.kicking_inactive == TIMER_OFF:
            battle.kicking_inactive = TIMER_UNKNOWN

        if text.startswith("Time left: "):
            parts = text.split(" | ")
            battle.kicking_inactive = parse_int(parts[0][11:]) or TIMER_UNKNOWN
            total = parse_int(parts[1]) if len(parts) > 1 else None
            grace = parse_int(parts[2]) if len(parts) > 2 else None
            battle.total_time_left = total or 0
            battle.grace_time_left = grace or 0
            if battle.total_time_left == battle.kicking_inactive:
                battle.total_time_left = 0
        elif text.startswith("You have "):
            battle.kicking_inactive = parse_int(text[9:]) or TIMER_UNKNOWN
        elif text.endswith(" seconds left."):
            has_index = text.find(" has ")
            if has_index >= 0 and to_id(text[:has_index]) == self.player:
                battle.kicking_inactive = (
                    parse_int(text[has_index + 5 :]) or TIMER_UNKNOWN
                )

    def _apply_inactiveoff(self, line: BattleLine) -> None:
        self.battle.kicking_inactive = TIMER_OFF

    def _apply_player(self, line: BattleLine) -> None:
        side = self.battle.get_side(line.arg(1))
        side.set_name(line.arg(2))
        if line.arg(3):
            side.set_avatar(line.arg(3))
        if line.arg(4):
            side.rating = line.arg(4)

    def _apply_teamsize(self, line: BattleLine) -> None:
        self.battle.get_side(line.arg(1)).total_pokemon = int(line.arg(2))

    def _apply_clearpoke(self, line: BattleLine) -> None:
        self.battle.p1.clear_pokemon()
        self.battle.p2.clear_pokemon()

    def _apply_poke(self, line: BattleLine) -> None:
        pokemon = self.battle.remember_team_preview_pokemon(line.arg(1), line.arg(2))
        if line.arg(3) == "item":
            pokemon.item = "(exists)"

    def _apply_teampreview(self, line: BattleLine) -> None:
        self.battle.team_preview_count = parse_int(line.arg(1)) or 0

    def _apply_request(self, line: BattleLine) -> None:
        # The JSON document may itself contain the separator.
        payload = "|".join(str(arg) for arg in line.args[1:])
        self.battle.request = parse_request(payload)

    def _apply_win(self, line: BattleLine) -> None:
        self.battle.ended = True
        self.battle.winner = line.arg(1)
        logging.info("Battle won by %s", self.battle.winner)

    def _apply_tie(self, line: BattleLine) -> None:
        self.battle.ended = True
        self.battle.tied = True

    def _apply_gen(self, line: BattleLine) -> None:
        gen = line.arg(1)
        if not isinstance(gen, int):
            logging.warning("Ignoring non-numeric generation: %r", gen)
            return
        self.battle.set_gen(gen)

    # Major actions

    def _apply_switch(self, line: BattleLine) -> None:
        """Apply `switch`, `drag` and `replace`.

        Args:
            line: `|switch|POKEMON|DETAILS|HP STATUS` or its drag/replace form
        """
        pokemon = self.battle.get_switched_pokemon(line.arg(1), line.arg(2))
        side = pokemon.side
        slot = pokemon.slot
        pokemon.health_parse(line.arg(3))
        pokemon.remove_volatile("itemremoved")
        if line.cmd == Command.SWITCH.value:
            occupant = side.active[slot] if slot < len(side.active) else None
            if occupant is not None:
                side.switch_out(occupant)
            side.switch_in(pokemon)
        elif line.cmd == Command.REPLACE.value:
            side.replace(pokemon)
        else:
            side.drag_in(pokemon)

    def _apply_switchout(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        pokemon.side.switch_out(pokemon)

    def _apply_faint(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        pokemon.side.faint(pokemon)

    def _apply_swap(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None or not pokemon.is_active():
            return
        target = line.arg(2)
        if target.strip().isdigit():
            pokemon.side.swap_to(pokemon, int(target))
            return
        other = self._pokemon(target)
        if other is None or not other.is_active():
            return
        pokemon.side.swap_with(pokemon, other)

    def _apply_move(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        move = self.battle.dex.get_move(line.arg(2))
        if self.battle.check_active(pokemon):
            return
        target = self._pokemon(line.arg(3))
        pokemon.use_move(move, target, line.kw_args)
        self._reveal_source(line, pokemon)

    def _apply_cant(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        effect = self.battle.dex.get_effect(line.arg(2))
        move = self.battle.dex.get_move(line.arg(3)) if line.arg(3) else None
        pokemon.cant_use_move(effect, move)

    def _apply_details_change(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        detailed = parse_details(pokemon.name, pokemon.ident, line.arg(2))
        pokemon.details = detailed.details
        pokemon.species = detailed.species
        pokemon.level = detailed.level
        pokemon.shiny = detailed.shiny
        pokemon.gender = detailed.gender
        if pokemon.searchid:
            pokemon.searchid = detailed.searchid
        pokemon.health_parse(line.arg(3))

    def _apply_formechange(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        pokemon.add_volatile("formechange", line.arg(2))
        pokemon.health_parse(line.arg(3))
        self._reveal_source(line, pokemon)

    def _apply_transform(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        target = self._pokemon(line.arg(2))
        if pokemon is None or target is None:
            return
        pokemon.add_volatile("transform", target.species)
        pokemon.boosts = target.boosts.copy()
        pokemon.ability = target.ability
        self._reveal_source(line, pokemon)

    # Minor actions

    def _apply_health(self, line: BattleLine) -> None:
        """Apply `-damage`, `-heal` and `-sethp`, which all carry a new HP."""
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        pokemon.health_parse(line.arg(2))
        self._reveal_source(line, pokemon)

    def _apply_status(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        pokemon.status = Status.from_protocol(line.arg(2))
        pokemon.sleep_turns = 0
        pokemon.toxic_turns = 0
        self._reveal_source(line, pokemon)

    def _apply_curestatus(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        pokemon.status = Status.NONE
        pokemon.sleep_turns = 0
        pokemon.toxic_turns = 0

    def _apply_cureteam(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        for member in pokemon.side.pokemon:
            member.status = Status.NONE
            member.sleep_turns = 0
            member.toxic_turns = 0

    def _boost_stat(self, name: str) -> Optional[Stat]:
        """Map a boost name to the stat it changes in this generation.

        Returns:
            The Stat, or None in generation 1 for `spd` (Special is a single
            stat there and is reported as `spa`)
        """
        stat = Stat.from_protocol(name)
        if self.battle.gen == 1:
            if stat is Stat.SPD:
                return None
            if stat is Stat.SPA:
                return Stat.SPC
        return stat

    def _apply_boost(self, line: BattleLine) -> None:
        """Apply `-boost` and `-unboost`.

        Args:
            line: `|-boost|POKEMON|STAT|AMOUNT`, optionally with `[from]` and
                `[of]` naming the ability that caused it
        """
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        stat = self._boost_stat(line.arg(2))
        if stat is None:
            return
        amount = parse_int(line.arg(3))
        if not amount:
            return
        if line.cmd == Command.UNBOOST.value:
            amount = -amount
        pokemon.boosts.add(stat, amount)

        source = line.kw("from")
        if line.kw("silent") or not source or source is True:
            return
        effect = self.battle.dex.get_effect(source)
        if (
            line.cmd == Command.BOOST.value
            and effect.id == "weakarmor"
            and stat is Stat.SPE
        ):
            return
        holder = self._pokemon(line.kw("of")) or pokemon
        holder.activate_ability(effect)

    def _apply_setboost(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        stat = self._boost_stat(line.arg(2))
        amount = parse_int(line.arg(3))
        if stat is None or amount is None:
            return
        pokemon.boosts.set(stat, amount)

    def _listed_boosts(self, field: str) -> List[Stat]:
        if not field:
            return list(BOOSTS)
        return [Stat.from_protocol(name) for name in field.split(", ")]

    def _apply_swapboost(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        other = self._pokemon(line.arg(2))
        if pokemon is None or other is None:
            return
        for stat in self._listed_boosts(line.arg(3)):
            mine = pokemon.boosts.get(stat)
            pokemon.boosts.set(stat, other.boosts.get(stat))
            other.boosts.set(stat, mine)

    def _apply_clearpositiveboost(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        for stat, value in pokemon.boosts.items():
            if value > 0:
                pokemon.boosts.remove(stat)

    def _apply_clearnegativeboost(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        for stat, value in pokemon.boosts.items():
            if value < 0:
                pokemon.boosts.remove(stat)

    def _apply_copyboost(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        source = self._pokemon(line.arg(2))
        if pokemon is None or source is None:
            return
        for stat in self._listed_boosts(line.arg(3)):
            pokemon.boosts.set(stat, source.boosts.get(stat))
        if self.battle.gen >= 6:
            for volatile in COPYBOOST_VOLATILES:
                if source.has_volatile(volatile):
                    pokemon.add_volatile(volatile)
                else:
                    pokemon.remove_volatile(volatile)

    def _apply_clearboost(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        pokemon.boosts.clear()

    def _apply_invertboost(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        for stat, value in pokemon.boosts.items():
            pokemon.boosts.set(stat, -value)

    def _apply_clearallboost(self, line: BattleLine) -> None:
        for pokemon in self.battle.active_pokemon():
            pokemon.boosts.clear()

    def _apply_weather(self, line: BattleLine) -> None:
        """Apply `-weather`.

        Args:
            line: `|-weather|WEATHER`; `[upkeep]` marks a continuing weather,
                `[from] ability: ...` an ability-set weather
        """
        field = self.battle.field
        weather = Weather.from_protocol(line.arg(1))
        if line.kw("upkeep"):
            field.set_weather(field.weather, upkeep=True)
            return
        source = line.kw("from")
        from_ability = (
            isinstance(source, str) and parse_effect(source).type == "ability"
        )
        # Ability weather lasted until replaced before generation 6.
        field.set_weather(
            weather, indefinite=from_ability and 3 <= self.battle.gen <= 5
        )
        if from_ability:
            self._reveal_source(line, None)

    def _apply_fieldstart(self, line: BattleLine) -> None:
        terrain = Terrain.from_protocol(line.arg(1))
        if terrain is not None:
            self.battle.field.terrain = terrain
        else:
            self.battle.field.add_pseudo_weather(parse_effect(line.arg(1)).name)
        self._reveal_source(line, None)

    def _apply_fieldend(self, line: BattleLine) -> None:
        terrain = Terrain.from_protocol(line.arg(1))
        if terrain is not None:
            if self.battle.field.terrain is terrain:
                self.battle.field.terrain = None
        else:
            self.battle.field.remove_pseudo_weather(parse_effect(line.arg(1)).name)

    def _apply_sidestart(self, line: BattleLine) -> None:
        side = self.battle.get_side(line.arg(1))
        side.add_side_condition(parse_effect(line.arg(2)).name)

    def _apply_sideend(self, line: BattleLine) -> None:
        side = self.battle.get_side(line.arg(1))
        side.remove_side_condition(parse_effect(line.arg(2)).name)

    def _apply_start_volatile(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        pokemon.add_volatile(effect_id(line.arg(2)), *line.args[3:])
        self._reveal_source(line, pokemon)

    def _apply_end_volatile(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        pokemon.remove_volatile(effect_id(line.arg(2)))

    def _apply_item(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        pokemon.item = self.battle.dex.get_item(line.arg(2)).name
        pokemon.remove_volatile("itemremoved")
        self._reveal_source(line, None)

    def _apply_enditem(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        pokemon.last_item = self.battle.dex.get_item(line.arg(2)).name
        pokemon.item = ""
        if line.kw("eat"):
            pokemon.item_effect = "eaten"
        else:
            pokemon.item_effect = "removed"
            pokemon.add_volatile("itemremoved")

    def _apply_ability(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        ability = self.battle.dex.get_ability(line.arg(2))
        source = line.kw("from")
        if isinstance(source, str) and effect_id(source) == "trace":
            pokemon.activate_ability(self.battle.dex.get_ability("Trace"))
            pokemon.ability = ability.name
            traced = self._pokemon(line.kw("of"))
            if traced is not None:
                traced.activate_ability(ability)
            return
        pokemon.activate_ability(ability)

    def _apply_endability(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        if line.arg(2):
            pokemon.activate_ability(self.battle.dex.get_ability(line.arg(2)))
        pokemon.add_volatile("gastroacid")

    def _apply_mega(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        if line.arg(3):
            pokemon.item = line.arg(3)

    def _apply_terastallize(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        pokemon.add_volatile("terastallized", line.arg(2))

    def _apply_singleturn(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        pokemon.add_turnstatus(effect_id(line.arg(2)))

    def _apply_singlemove(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        pokemon.add_movestatus(effect_id(line.arg(2)))

    def _apply_mustrecharge(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        pokemon.add_volatile("mustrecharge")

    def _apply_prepare(self, line: BattleLine) -> None:
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        pokemon.add_movestatus(effect_id(line.arg(2)))

    def _apply_activate(self, line: BattleLine) -> None:
        """Reveal the ability or item named by an `-activate` line."""
        pokemon = self._pokemon(line.arg(1))
        if pokemon is None:
            return
        parsed = parse_effect(line.arg(2))
        if parsed.type == "ability":
            pokemon.activate_ability(self.battle.dex.get_ability(parsed.name))
        elif parsed.type == "item":
            pokemon.item = parsed.name
