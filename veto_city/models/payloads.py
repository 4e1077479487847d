from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class Payload(BaseModel):
    """Base for every response body: camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TeamRef(Payload):
    roster_id: Optional[int] = None
    owner_id: Optional[str] = None
    name: str
    avatar: Optional[str] = None


class ErrorPayload(Payload):
    error: str


# Awards

class SeasonAwards(Payload):
    season: str
    league_id: str
    league_name: str
    status: str
    champion: TeamRef
    reg_season: TeamRef
    points_leader: TeamRef = Field(alias="bestManager")
    toilet_bowl: TeamRef


class AwardsPayload(Payload):
    league_id: str
    seasons: List[SeasonAwards]
    fetched_at: str


# Records

class RecordTeam(Payload):
    roster_id: Optional[int] = None
    team_name: str
    avatar: Optional[str] = None

    @classmethod
    def of(cls, team: TeamRef) -> "RecordTeam":
        return cls(roster_id=team.roster_id, team_name=team.name, avatar=team.avatar)


class RecordEntry(Payload):
    season: str
    week: Optional[int] = None
    value: float
    label: str
    team: RecordTeam
    opponent: Optional[RecordTeam] = None
    note: Optional[str] = None


class WeekRange(Payload):
    min: int
    max: int


class RecordLists(Payload):
    highest_week_score: List[RecordEntry]
    lowest_week_score: List[RecordEntry]
    biggest_blowout: List[RecordEntry]
    closest_win: List[RecordEntry]
    highest_combined: List[RecordEntry]
    most_season_pf: List[RecordEntry] = Field(alias="mostSeasonPF")
    least_season_pa: List[RecordEntry] = Field(alias="leastSeasonPA")
    most_season_pa: List[RecordEntry] = Field(alias="mostSeasonPA")
    best_season_record: List[RecordEntry]
    worst_season_record: List[RecordEntry]


class RecordsPayload(Payload):
    league_id: str
    seasons_count: int
    week_range: WeekRange
    lists: RecordLists
    fetched_at: str


# Managers

class ManagerRow(Payload):
    manager_id: str
    manager_name: str
    avatar: Optional[str] = None
    seasons: int
    wins: int
    losses: int
    ties: int
    win_pct: float
    points_for: float
    points_against: float
    points_per_game: float
    possible_points: float
    lineup_efficiency: float = Field(alias="lineupIQ")
    trades: int
    waivers: int


class ManagersPayload(Payload):
    league_id: str
    managers_count: int
    rows: List[ManagerRow]
    fetched_at: str


# Rivalry

class OwnerRef(Payload):
    owner_id: str
    name: str
    avatar: Optional[str] = None


class RivalSide(OwnerRef):
    score: float


class GameRow(Payload):
    season: str
    week: int
    matchup_id: int
    a: RivalSide
    b: RivalSide


class RivalrySummary(Payload):
    games: int
    a_wins: int
    b_wins: int
    ties: int
    points_for: float
    points_against: float
    diff: float
    a_win_pct: float
    b_win_pct: float


class RivalryPayload(Payload):
    league_id: str
    owners: List[OwnerRef]
    owner_a: Optional[OwnerRef] = None
    owner_b: Optional[OwnerRef] = None
    games: List[GameRow]
    summary: RivalrySummary
    fetched_at: str


# Standings

class StandingsRow(Payload):
    roster_id: int
    owner_id: Optional[str] = None
    name: str
    avatar: Optional[str] = None
    wins: int
    losses: int
    ties: int
    points_for: float
    points_against: float
    streak: str
    top6_wins: int
    top6_losses: int
    total_wins: int
    total_losses: int


class StandingsPayload(Payload):
    league_id: str
    season: str
    mode: str
    week_range: WeekRange
    playoff_week_start: int
    last_scored_week: int
    rows: List[StandingsRow]
    fetched_at: str


# Transactions

class TransactionAsset(Payload):
    kind: str
    label: str
    from_team: Optional[TeamRef] = None
    to_team: Optional[TeamRef] = None


class TransactionItem(Payload):
    transaction_id: str
    type: str
    week: int
    status_updated: int
    teams: List[TeamRef]
    adds: List[TransactionAsset]
    drops: List[TransactionAsset]
    picks: List[TransactionAsset]


class TransactionFeedPayload(Payload):
    league_id: str
    season: str
    trades: int
    waivers: int
    transactions: List[TransactionItem]
    fetched_at: str


# Draft board

class DraftBoardPick(Payload):
    pick_no: int
    round: int
    team: TeamRef
    player_id: str
    player: str
    position: str
    nfl_team: str


class DraftBoardSeason(Payload):
    league_id: str
    season: str
    draft_id: Optional[str] = None
    draft_type: str
    status: str
    rounds: int
    slots: int
    picks: List[DraftBoardPick]


class DraftBoardPayload(Payload):
    league_id: str
    seasons: List[DraftBoardSeason]
    fetched_at: str
