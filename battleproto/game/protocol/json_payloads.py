"""Models for the JSON payloads carried by protocol lines.

`|request|`, `|updatechallenges|`, `|updatesearch|`, `|tournament|update|` and
`|tournament|end|` each carry a JSON document as their last field. Unknown
keys are kept so newer server fields survive a decode.
"""

from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from battleproto.game.exceptions import PayloadError

ModelT = TypeVar("ModelT", bound=BaseModel)


class _Payload(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class RequestMove(_Payload):
    move: str
    id: str
    pp: Optional[int] = None
    maxpp: Optional[int] = None
    target: Optional[str] = None
    disabled: Union[bool, str] = False


class ActivePokemon(_Payload):
    moves: List[RequestMove] = Field(default_factory=list)
    trapped: bool = False
    maybe_disabled: bool = Field(default=False, alias="maybeDisabled")
    maybe_trapped: bool = Field(default=False, alias="maybeTrapped")
    can_mega_evo: bool = Field(default=False, alias="canMegaEvo")
    can_ultra_boost: bool = Field(default=False, alias="canUltraBoost")
    can_dynamax: bool = Field(default=False, alias="canDynamax")
    can_terastallize: Optional[str] = Field(default=None, alias="canTerastallize")
    can_z_move: Optional[List[Optional[Dict[str, Any]]]] = Field(
        default=None, alias="canZMove"
    )
    max_moves: Optional[Dict[str, Any]] = Field(default=None, alias="maxMoves")


class RequestPokemon(_Payload):
    ident: str
    details: str
    condition: str
    active: bool = False
    stats: Dict[str, int] = Field(default_factory=dict)
    moves: List[str] = Field(default_factory=list)
    base_ability: Optional[str] = Field(default=None, alias="baseAbility")
    ability: Optional[str] = None
    item: Optional[str] = None
    pokeball: Optional[str] = None


class RequestSide(_Payload):
    name: str
    id: str
    pokemon: List[RequestPokemon] = Field(default_factory=list)


class Request(_Payload):
    """A `|request|` decision prompt."""

    rqid: Optional[int] = None
    active: List[ActivePokemon] = Field(default_factory=list)
    side: Optional[RequestSide] = None
    force_switch: Optional[List[bool]] = Field(default=None, alias="forceSwitch")
    team_preview: bool = Field(default=False, alias="teamPreview")
    wait: bool = False
    no_cancel: bool = Field(default=False, alias="noCancel")


class ChallengeTo(_Payload):
    to: str
    format: str


class Challenges(_Payload):
    """The `|updatechallenges|` table of pending challenges."""

    challenges_from: Dict[str, str] = Field(
        default_factory=dict, alias="challengesFrom"
    )
    challenge_to: Optional[ChallengeTo] = Field(default=None, alias="challengeTo")


class SearchState(_Payload):
    """The `|updatesearch|` state of ladder searches and running games."""

    searching: List[str] = Field(default_factory=list)
    games: Optional[Dict[str, str]] = None


class TournamentUpdate(_Payload):
    format: Optional[str] = None
    teambuilder_format: Optional[str] = Field(default=None, alias="teambuilderFormat")
    is_started: Optional[bool] = Field(default=None, alias="isStarted")
    is_joined: Optional[bool] = Field(default=None, alias="isJoined")
    generator: Optional[str] = None
    player_cap: Optional[int] = Field(default=None, alias="playerCap")
    bracket_data: Optional[Dict[str, Any]] = Field(default=None, alias="bracketData")
    challenges: Optional[List[str]] = None
    challenge_bys: Optional[List[str]] = Field(default=None, alias="challengeBys")
    challenged: Optional[str] = None
    challenging: Optional[str] = None


class TournamentEnded(_Payload):
    results: List[Any] = Field(default_factory=list)
    format: str = ""
    generator: str = ""
    bracket_data: Dict[str, Any] = Field(default_factory=dict, alias="bracketData")


def _decode(command: str, payload: str, model: Type[ModelT]) -> ModelT:
    try:
        return model.model_validate_json(payload)
    except ValidationError as e:
        raise PayloadError(command, str(e)) from e


def parse_request(payload: str) -> Optional[Request]:
    """Decode a `|request|` payload.

    Args:
        payload: The JSON text; an empty payload means "no decision pending"

    Returns:
        The Request, or None for an empty payload

    Raises:
        PayloadError: If the payload is not a valid request document
    """
    if not payload:
        return None
    return _decode("request", payload, Request)


def parse_challenges(payload: str) -> Challenges:
    return _decode("updatechallenges", payload, Challenges)


def parse_search_state(payload: str) -> SearchState:
    return _decode("updatesearch", payload, SearchState)


def parse_tournament_update(payload: str) -> TournamentUpdate:
    return _decode("tournament|update", payload, TournamentUpdate)


def parse_tournament_ended(payload: str) -> TournamentEnded:
    return _decode("tournament|end", payload, TournamentEnded)
