"""
Season standings rebuilt from weekly matchups.

Besides head-to-head results every team also plays the field: each week the
six highest scorers get a Top6 win and everyone else a Top6 loss. Totals add
both, which is how the league ranks its regular season.
"""
from dataclasses import dataclass, field
from typing import List, Tuple

from ..models.payloads import StandingsRow, WeekRange
from .pairings import week_games, week_was_played
from .season_data import SeasonBundle

DEFAULT_PLAYOFF_WEEK_START = 15
TOP_FIELD_SIZE = 6
REGULAR = "regular"
PLAYOFFS = "playoffs"
NO_STREAK = "-"


@dataclass
class _TeamStanding:
    wins: int = 0
    losses: int = 0
    ties: int = 0
    points_for: float = 0.0
    points_against: float = 0.0
    top6_wins: int = 0
    top6_losses: int = 0
    results: List[str] = field(default_factory=list)


def current_streak(results: List[str]) -> str:
    """``W3`` / ``L2`` for the run of identical results ending the list; a tie ends any run."""
    if not results or results[-1] == "T":
        return NO_STREAK
    last = results[-1]
    count = 0
    for result in reversed(results):
        if result != last:
            break
        count += 1
    return f"{last}{count}"


def last_scored_week(bundle: SeasonBundle) -> int:
    played = [week for week in bundle.weeks() if week_was_played(bundle.matchups[week])]
    return max(played) if played else 0


def standings_weeks(bundle: SeasonBundle, mode: str) -> Tuple[WeekRange, int, int]:
    playoff_start = bundle.league.settings.playoff_week_start or DEFAULT_PLAYOFF_WEEK_START
    last_week = last_scored_week(bundle)
    if mode == PLAYOFFS:
        week_range = WeekRange(min=playoff_start, max=max(last_week, playoff_start - 1))
    else:
        week_range = WeekRange(min=1, max=min(last_week, playoff_start - 1))
    return week_range, playoff_start, last_week


def build_standings(bundle: SeasonBundle, mode: str = REGULAR) -> Tuple[WeekRange, int, int, List[StandingsRow]]:
    week_range, playoff_start, last_week = standings_weeks(bundle, mode)
    identity = bundle.identity
    table = {r.roster_id: _TeamStanding() for r in bundle.rosters if r.roster_id is not None}

    for week in range(week_range.min, week_range.max + 1):
        entries = [
            e
            for e in bundle.matchups.get(week, [])
            if e.roster_id in table and e.matchup_id is not None and e.points is not None
        ]
        if not entries:
            continue

        for entry in entries:
            table[entry.roster_id].points_for += entry.score

        ranked = sorted(entries, key=lambda e: e.score, reverse=True)
        top_field = {e.roster_id for e in ranked[:TOP_FIELD_SIZE]}
        for roster_id in {e.roster_id for e in entries}:
            if roster_id in top_field:
                table[roster_id].top6_wins += 1
            else:
                table[roster_id].top6_losses += 1

        for game in week_games(entries):
            winner = table[game.winner.roster_id]
            loser = table[game.loser.roster_id]
            winner.points_against += game.loser.score
            loser.points_against += game.winner.score
            if game.is_tie:
                winner.ties += 1
                loser.ties += 1
                winner.results.append("T")
                loser.results.append("T")
            else:
                winner.wins += 1
                loser.losses += 1
                winner.results.append("W")
                loser.results.append("L")

    rows = []
    for roster_id, s in table.items():
        team = identity.team(roster_id)
        rows.append(
            StandingsRow(
                roster_id=roster_id,
                owner_id=team.owner_id,
                name=team.name,
                avatar=team.avatar,
                wins=s.wins,
                losses=s.losses,
                ties=s.ties,
                points_for=round(s.points_for, 2),
                points_against=round(s.points_against, 2),
                streak=current_streak(s.results),
                top6_wins=s.top6_wins,
                top6_losses=s.top6_losses,
                total_wins=s.wins + s.top6_wins,
                total_losses=s.losses + s.top6_losses,
            )
        )

    rows.sort(key=lambda r: (-r.total_wins, -r.wins, -r.points_for, r.name.lower()))
    return week_range, playoff_start, last_week, rows
