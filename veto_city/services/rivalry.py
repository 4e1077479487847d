from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..models.payloads import GameRow, OwnerRef, RivalSide, RivalrySummary
from ..models.sleeper import MatchupEntry
from .pairings import group_pairings, week_was_played
from .season_data import SeasonBundle


def _season_sort_key(season: str) -> int:
    return int(season) if season.isdigit() else 0


def owner_directory(bundles: Iterable[SeasonBundle]) -> Dict[str, OwnerRef]:
    """Every owner in the chain, shown as they appear in their newest season."""
    owners: Dict[str, OwnerRef] = {}
    for bundle in bundles:
        identity = bundle.identity
        for owner_id in identity.roster_by_owner:
            if owner_id not in owners:
                owners[owner_id] = identity.owner(owner_id)
    return owners


def _find_entry(entries: List[MatchupEntry], owner_id: str, bundle: SeasonBundle) -> Optional[MatchupEntry]:
    return next((e for e in entries if bundle.identity.owner_of(e.roster_id) == owner_id), None)


def head_to_head_games(bundles: Sequence[SeasonBundle], owner_a: OwnerRef, owner_b: OwnerRef) -> List[GameRow]:
    """
    Replay every played week and keep the pairings between the two owners.

    A season only contributes when both owners had a roster in it.
    """
    games: List[GameRow] = []
    if owner_a.owner_id == owner_b.owner_id:
        return games

    for bundle in bundles:
        identity = bundle.identity
        if not (identity.has_owner(owner_a.owner_id) and identity.has_owner(owner_b.owner_id)):
            continue

        for week in bundle.weeks():
            entries = bundle.matchups[week]
            if not week_was_played(entries):
                continue
            for matchup_id, pairing in group_pairings(entries).items():
                a_entry = _find_entry(pairing, owner_a.owner_id, bundle)
                b_entry = _find_entry(pairing, owner_b.owner_id, bundle)
                if a_entry is None or b_entry is None:
                    continue
                games.append(
                    GameRow(
                        season=bundle.season,
                        week=week,
                        matchup_id=matchup_id,
                        a=RivalSide(**owner_a.model_dump(), score=a_entry.score),
                        b=RivalSide(**owner_b.model_dump(), score=b_entry.score),
                    )
                )

    games.sort(key=lambda g: (-_season_sort_key(g.season), -g.week, g.matchup_id))
    return games


def summarize(games: List[GameRow]) -> RivalrySummary:
    a_wins = b_wins = ties = 0
    points_for = points_against = 0.0
    for game in games:
        points_for += game.a.score
        points_against += game.b.score
        if game.a.score > game.b.score:
            a_wins += 1
        elif game.b.score > game.a.score:
            b_wins += 1
        else:
            ties += 1

    total = len(games)
    return RivalrySummary(
        games=total,
        a_wins=a_wins,
        b_wins=b_wins,
        ties=ties,
        points_for=round(points_for, 2),
        points_against=round(points_against, 2),
        diff=round(points_for - points_against, 2),
        a_win_pct=round(a_wins / total, 4) if total else 0.0,
        b_win_pct=round(b_wins / total, 4) if total else 0.0,
    )


def build_rivalry(
    bundles: Sequence[SeasonBundle], owner_a_id: Optional[str], owner_b_id: Optional[str]
) -> Tuple[List[OwnerRef], Optional[OwnerRef], Optional[OwnerRef], List[GameRow], RivalrySummary]:
    """
    All-time series between two owners.

    Unknown or missing owner ids produce an empty series rather than an
    error, so the owner list can still be offered for selection.
    """
    directory = owner_directory(bundles)
    owners = sorted(directory.values(), key=lambda o: (o.name.lower(), o.owner_id))

    owner_a = directory.get(owner_a_id) if owner_a_id else None
    owner_b = directory.get(owner_b_id) if owner_b_id else None

    games: List[GameRow] = []
    if owner_a is not None and owner_b is not None:
        games = head_to_head_games(bundles, owner_a, owner_b)

    return owners, owner_a, owner_b, games, summarize(games)
