"""
Sleeper API response models.

Sleeper responses are loosely typed: fields go missing between seasons,
numbers sometimes arrive as strings and identifiers can be ``null``. Every
field here goes through a ``before`` validator that substitutes a safe
default (``""``, ``0``, ``None`` or an empty collection) instead of failing,
so the rest of the engine can trust the shapes it receives.
"""
import math
from typing import Annotated, Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict


def coerce_str(value: Any) -> str:
    if isinstance(value, str):
        return value
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value)


def coerce_optional_str(value: Any) -> Optional[str]:
    text = coerce_str(value).strip()
    return text or None


def coerce_float(value: Any) -> float:
    if isinstance(value, bool):
        return float(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def coerce_optional_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def coerce_optional_int(value: Any) -> Optional[int]:
    number = coerce_optional_float(value)
    if number is None:
        return None
    return int(number)


def coerce_int(value: Any) -> int:
    number = coerce_optional_int(value)
    return 0 if number is None else number


def _dict_or_empty(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _int_list(value: Any) -> List[int]:
    if not isinstance(value, list):
        return []
    ints = (coerce_optional_int(v) for v in value)
    return [v for v in ints if v is not None]


def _str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [s for s in (coerce_str(v) for v in value) if s]


def _dict_list(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, dict)]


def _player_moves(value: Any) -> Dict[str, int]:
    """``adds`` / ``drops`` map player id -> roster id; keep insertion order."""
    moves = {}
    for player_id, roster_id in _dict_or_empty(value).items():
        rid = coerce_optional_int(roster_id)
        if rid is not None:
            moves[str(player_id)] = rid
    return moves


LooseStr = Annotated[str, BeforeValidator(coerce_str)]
OptionalStr = Annotated[Optional[str], BeforeValidator(coerce_optional_str)]
LooseInt = Annotated[int, BeforeValidator(coerce_int)]
OptionalInt = Annotated[Optional[int], BeforeValidator(coerce_optional_int)]
LooseFloat = Annotated[float, BeforeValidator(coerce_float)]
OptionalFloat = Annotated[Optional[float], BeforeValidator(coerce_optional_float)]
IntList = Annotated[List[int], BeforeValidator(_int_list)]
StrList = Annotated[List[str], BeforeValidator(_str_list)]
PlayerMoves = Annotated[Dict[str, int], BeforeValidator(_player_moves)]


def points_value(whole: float, decimal: float) -> float:
    """Rebuild a Sleeper point total stored as a whole part plus hundredths."""
    return round(whole + decimal / 100, 2)


class SleeperModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


M = TypeVar("M", bound=SleeperModel)


def parse_one(model: Type[M], data: Any) -> M:
    return model.model_validate(_dict_or_empty(data))


def parse_list(model: Type[M], data: Any) -> List[M]:
    return [model.model_validate(item) for item in _dict_list(data)]


class UserMetadata(SleeperModel):
    team_name: LooseStr = ""


class User(SleeperModel):
    user_id: LooseStr = ""
    username: LooseStr = ""
    display_name: LooseStr = ""
    avatar: OptionalStr = None
    metadata: Annotated[UserMetadata, BeforeValidator(_dict_or_empty)] = UserMetadata()


class LeagueSettings(SleeperModel):
    playoff_week_start: LooseInt = 0
    winner_roster_id: OptionalInt = None
    leg: LooseInt = 0
    last_scored_leg: LooseInt = 0


class LeagueMetadata(SleeperModel):
    latest_league_winner_roster_id: OptionalInt = None


class League(SleeperModel):
    league_id: LooseStr = ""
    name: LooseStr = ""
    season: LooseStr = ""
    status: LooseStr = ""
    total_rosters: LooseInt = 0
    previous_league_id: OptionalStr = None
    draft_id: OptionalStr = None
    settings: Annotated[LeagueSettings, BeforeValidator(_dict_or_empty)] = LeagueSettings()
    metadata: Annotated[LeagueMetadata, BeforeValidator(_dict_or_empty)] = LeagueMetadata()

    @property
    def previous_id(self) -> Optional[str]:
        """The prior season's league id; Sleeper uses ``"0"`` for "none"."""
        if not self.previous_league_id or self.previous_league_id == "0":
            return None
        return self.previous_league_id


class RosterSettings(SleeperModel):
    wins: LooseInt = 0
    losses: LooseInt = 0
    ties: LooseInt = 0
    fpts: LooseFloat = 0.0
    fpts_decimal: LooseFloat = 0.0
    fpts_against: LooseFloat = 0.0
    fpts_against_decimal: LooseFloat = 0.0
    ppts: LooseFloat = 0.0
    ppts_decimal: LooseFloat = 0.0

    @property
    def points_for(self) -> float:
        return points_value(self.fpts, self.fpts_decimal)

    @property
    def points_against(self) -> float:
        return points_value(self.fpts_against, self.fpts_against_decimal)

    @property
    def possible_points(self) -> float:
        return points_value(self.ppts, self.ppts_decimal)

    @property
    def games(self) -> int:
        return self.wins + self.losses + self.ties

    @property
    def win_pct(self) -> float:
        return win_percentage(self.wins, self.losses, self.ties)

    @property
    def record(self) -> str:
        return format_record(self.wins, self.losses, self.ties)


class Roster(SleeperModel):
    roster_id: OptionalInt = None
    owner_id: OptionalStr = None
    co_owners: StrList = []
    players: StrList = []
    starters: StrList = []
    settings: Annotated[RosterSettings, BeforeValidator(_dict_or_empty)] = RosterSettings()


class MatchupEntry(SleeperModel):
    roster_id: OptionalInt = None
    matchup_id: OptionalInt = None
    points: OptionalFloat = None
    week: LooseInt = 0

    @property
    def score(self) -> float:
        return self.points or 0.0


class DraftPickMovement(SleeperModel):
    season: LooseStr = ""
    round: LooseInt = 0
    roster_id: OptionalInt = None  # roster the pick originally belonged to
    owner_id: OptionalInt = None  # roster receiving the pick in this move
    previous_owner_id: OptionalInt = None


class Transaction(SleeperModel):
    transaction_id: LooseStr = ""
    type: LooseStr = ""
    status: LooseStr = ""
    status_updated: LooseInt = 0
    week: LooseInt = 0
    roster_ids: IntList = []
    adds: PlayerMoves = {}
    drops: PlayerMoves = {}
    draft_picks: Annotated[List[DraftPickMovement], BeforeValidator(_dict_list)] = []


class BracketRow(SleeperModel):
    r: OptionalInt = None
    m: OptionalInt = None
    t1: OptionalInt = None
    t2: OptionalInt = None
    w: OptionalInt = None
    l: OptionalInt = None  # noqa: E741
    p: OptionalInt = None


class DraftSettings(SleeperModel):
    rounds: LooseInt = 0
    slots: LooseInt = 0


class Draft(SleeperModel):
    draft_id: LooseStr = ""
    type: LooseStr = ""
    status: LooseStr = ""
    season: LooseStr = ""
    start_time: LooseInt = 0
    settings: Annotated[DraftSettings, BeforeValidator(_dict_or_empty)] = DraftSettings()

    @property
    def size(self) -> int:
        return self.settings.rounds * self.settings.slots


class DraftPickMetadata(SleeperModel):
    first_name: LooseStr = ""
    last_name: LooseStr = ""
    position: LooseStr = ""
    team: LooseStr = ""


class DraftPick(SleeperModel):
    player_id: LooseStr = ""
    pick_no: LooseInt = 0
    round: LooseInt = 0
    draft_slot: OptionalInt = None
    roster_id: OptionalInt = None
    picked_by: LooseStr = ""
    metadata: Annotated[DraftPickMetadata, BeforeValidator(_dict_or_empty)] = DraftPickMetadata()

    @property
    def player_label(self) -> str:
        name = f"{self.metadata.first_name} {self.metadata.last_name}".strip()
        return name or self.player_id or f"Pick {self.pick_no}"


class Player(SleeperModel):
    full_name: LooseStr = ""
    first_name: LooseStr = ""
    last_name: LooseStr = ""
    position: LooseStr = ""
    team: LooseStr = ""

    @property
    def label(self) -> str:
        name = self.full_name or f"{self.first_name} {self.last_name}".strip()
        if name and self.position:
            return f"{name} ({self.position})"
        return name


def win_percentage(wins: int, losses: int, ties: int = 0) -> float:
    """Win percentage with ties counted as half a win."""
    games = wins + losses + ties
    if games == 0:
        return 0.0
    return (wins + ties * 0.5) / games


def format_record(wins: int, losses: int, ties: int = 0) -> str:
    return f"{wins}-{losses}-{ties}" if ties else f"{wins}-{losses}"
