"""
The league record book: ten all-time top-10 lists.

Weekly lists come from every played week in the requested range of every
season; season lists come from each roster's final settings. Lists are
sorted with Python's stable sort so equal values keep chain order (newest
season first, then week, then matchup).
"""
from typing import Iterable, List

from ..logging import get_logger
from ..models.payloads import RecordEntry, RecordLists, RecordTeam
from .pairings import week_games, week_was_played
from .season_data import SeasonBundle

logger = get_logger(__name__)

TOP_N = 10


def top_n(entries: List[RecordEntry], descending: bool, n: int = TOP_N) -> List[RecordEntry]:
    return sorted(entries, key=lambda e: e.value, reverse=descending)[:n]


def _score_note(high: float, low: float) -> str:
    return f"{high:.2f} - {low:.2f}"


def build_record_lists(bundles: Iterable[SeasonBundle], week_min: int, week_max: int) -> RecordLists:
    week_scores: List[RecordEntry] = []
    blowouts: List[RecordEntry] = []
    close_wins: List[RecordEntry] = []
    combined: List[RecordEntry] = []
    season_pf: List[RecordEntry] = []
    season_pa: List[RecordEntry] = []
    season_records: List[RecordEntry] = []

    for bundle in bundles:
        season = bundle.season
        identity = bundle.identity

        for roster in bundle.rosters:
            if roster.roster_id is None:
                continue
            team = RecordTeam.of(identity.team(roster.roster_id))
            settings = roster.settings
            record_note = f"Record: {settings.record}"

            season_pf.append(
                RecordEntry(
                    season=season,
                    value=settings.points_for,
                    label=f"{settings.points_for:.1f}",
                    team=team,
                    note=record_note,
                )
            )
            season_pa.append(
                RecordEntry(
                    season=season,
                    value=settings.points_against,
                    label=f"{settings.points_against:.1f}",
                    team=team,
                    note=record_note,
                )
            )
            season_records.append(
                RecordEntry(
                    season=season,
                    value=settings.win_pct,
                    label=settings.record,
                    team=team,
                    note=f"Win% {settings.win_pct * 100:.1f}%",
                )
            )

        for week in bundle.weeks():
            if not week_min <= week <= week_max:
                continue
            entries = bundle.matchups[week]
            if not week_was_played(entries):
                continue

            for entry in entries:
                if entry.roster_id is None:
                    continue
                week_scores.append(
                    RecordEntry(
                        season=season,
                        week=week,
                        value=entry.score,
                        label=f"{entry.score:.2f}",
                        team=RecordTeam.of(identity.team(entry.roster_id)),
                    )
                )

            for game in week_games(entries):
                winner = RecordTeam.of(identity.team(game.winner.roster_id))
                loser = RecordTeam.of(identity.team(game.loser.roster_id))
                note = _score_note(game.winner.score, game.loser.score)

                combined.append(
                    RecordEntry(
                        season=season,
                        week=week,
                        value=game.combined,
                        label=f"{game.combined:.2f}",
                        team=winner,
                        opponent=loser,
                        note=note,
                    )
                )
                margin_entry = RecordEntry(
                    season=season,
                    week=week,
                    value=game.margin,
                    label=f"{game.margin:.2f}",
                    team=winner,
                    opponent=loser,
                    note=note,
                )
                blowouts.append(margin_entry)
                # A tie has no winner
                if not game.is_tie:
                    close_wins.append(margin_entry)

    logger.debug("Record book built from %d weekly scores and %d games", len(week_scores), len(blowouts))

    return RecordLists(
        highest_week_score=top_n(week_scores, descending=True),
        lowest_week_score=top_n(week_scores, descending=False),
        biggest_blowout=top_n(blowouts, descending=True),
        closest_win=top_n(close_wins, descending=False),
        highest_combined=top_n(combined, descending=True),
        most_season_pf=top_n(season_pf, descending=True),
        least_season_pa=top_n(season_pa, descending=False),
        most_season_pa=top_n(season_pa, descending=True),
        best_season_record=top_n(season_records, descending=True),
        worst_season_record=top_n(season_records, descending=False),
    )
