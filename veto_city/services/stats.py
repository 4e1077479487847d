"""
Career totals per manager across the whole season chain.

Season records and point totals come straight from each roster's settings;
trade and waiver counts come from scanning every week's transactions.
Managers are keyed by their Sleeper user id, so a manager who changes roster
slot between seasons keeps one line, and seasons a manager sat out add
nothing at all.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from ..logging import get_logger
from ..models.payloads import ManagerRow
from ..models.sleeper import Transaction, win_percentage
from .season_data import SeasonBundle

logger = get_logger(__name__)

TRADE = "trade"
WAIVER_TYPES = ("waiver", "free_agent")


@dataclass
class ManagerCareerTotals:
    manager_id: str
    manager_name: str
    avatar: Optional[str] = None
    seasons: int = 0
    wins: int = 0
    losses: int = 0
    ties: int = 0
    points_for: float = 0.0
    points_against: float = 0.0
    possible_points: float = 0.0
    trades: int = 0
    waivers: int = 0

    @property
    def games(self) -> int:
        return self.wins + self.losses + self.ties

    @property
    def win_pct(self) -> float:
        return win_percentage(self.wins, self.losses, self.ties)

    @property
    def points_per_game(self) -> float:
        return self.points_for / self.games if self.games else 0.0

    @property
    def lineup_efficiency(self) -> float:
        if self.possible_points <= 0:
            return 0.0
        return self.points_for / self.possible_points * 100

    def to_row(self) -> ManagerRow:
        return ManagerRow(
            manager_id=self.manager_id,
            manager_name=self.manager_name,
            avatar=self.avatar,
            seasons=self.seasons,
            wins=self.wins,
            losses=self.losses,
            ties=self.ties,
            win_pct=round(self.win_pct, 4),
            points_for=round(self.points_for, 2),
            points_against=round(self.points_against, 2),
            points_per_game=round(self.points_per_game, 2),
            possible_points=round(self.possible_points, 2),
            lineup_efficiency=round(self.lineup_efficiency, 2),
            trades=self.trades,
            waivers=self.waivers,
        )


def transaction_participants(tx: Transaction) -> List[int]:
    """
    Roster ids a transaction counts against.

    Some waiver and free-agent moves come back without ``roster_ids``. Those
    are credited to the roster that received the first added player, which
    is a guess: a multi-party move would be credited to one roster only.
    """
    roster_ids = list(dict.fromkeys(tx.roster_ids))
    if not roster_ids and tx.type in WAIVER_TYPES and tx.adds:
        roster_ids = [next(iter(tx.adds.values()))]
    return roster_ids


def aggregate_manager_totals(bundles: Iterable[SeasonBundle]) -> Dict[str, ManagerCareerTotals]:
    """
    Fold every season into per-manager totals.

    ``bundles`` is expected newest first so each manager is shown with the
    name and avatar from their latest season.
    """
    managers: Dict[str, ManagerCareerTotals] = {}

    for bundle in bundles:
        identity = bundle.identity

        for roster in bundle.rosters:
            owner_id = identity.owner_of(roster.roster_id)
            if not owner_id:
                continue

            totals = managers.get(owner_id)
            if totals is None:
                team = identity.team(roster.roster_id)
                totals = managers[owner_id] = ManagerCareerTotals(
                    manager_id=owner_id, manager_name=team.name, avatar=team.avatar
                )

            settings = roster.settings
            totals.seasons += 1
            totals.wins += settings.wins
            totals.losses += settings.losses
            totals.ties += settings.ties
            totals.points_for += settings.points_for
            totals.points_against += settings.points_against
            totals.possible_points += settings.possible_points

        for tx in bundle.transactions:
            is_trade = tx.type == TRADE
            if not is_trade and tx.type not in WAIVER_TYPES:
                continue

            for roster_id in transaction_participants(tx):
                totals = managers.get(identity.owner_of(roster_id) or "")
                if totals is None:
                    continue
                if is_trade:
                    totals.trades += 1
                else:
                    totals.waivers += 1

    logger.debug("Aggregated career totals for %d managers", len(managers))
    return managers


def manager_rows(managers: Dict[str, ManagerCareerTotals]) -> List[ManagerRow]:
    ordered = sorted(
        managers.values(),
        key=lambda m: (-m.win_pct, -m.points_for, m.manager_name.lower(), m.manager_id),
    )
    return [m.to_row() for m in ordered]
