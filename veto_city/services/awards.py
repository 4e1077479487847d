from typing import Iterable, List, Optional

from ..models.payloads import SeasonAwards, TeamRef
from ..models.sleeper import Roster
from .brackets import resolve_champion, resolve_consolation_winner
from .identity import SeasonIdentity
from .season_data import SeasonBundle

UNRESOLVED = "-"


def _award(identity: SeasonIdentity, roster_id: Optional[int]) -> TeamRef:
    # Roster ids start at 1; a 0 from Sleeper means "nobody"
    if not roster_id:
        return TeamRef(roster_id=None, name=UNRESOLVED)
    return identity.team(roster_id)


def regular_season_leader(rosters: List[Roster]) -> Optional[int]:
    """Best record: wins, then ties, then points for, then fewest losses."""
    ranked = sorted(
        (r for r in rosters if r.roster_id is not None),
        key=lambda r: (-r.settings.wins, -r.settings.ties, -r.settings.points_for, r.settings.losses),
    )
    return ranked[0].roster_id if ranked else None


def points_leader(rosters: List[Roster]) -> Optional[int]:
    ranked = sorted(
        (r for r in rosters if r.roster_id is not None),
        key=lambda r: r.settings.points_for,
        reverse=True,
    )
    return ranked[0].roster_id if ranked else None


def season_awards(bundle: SeasonBundle) -> SeasonAwards:
    identity = bundle.identity
    league = bundle.league
    return SeasonAwards(
        season=bundle.season,
        league_id=league.league_id,
        league_name=league.name or "League",
        status=league.status,
        champion=_award(identity, resolve_champion(league, bundle.winners_bracket)),
        reg_season=_award(identity, regular_season_leader(bundle.rosters)),
        points_leader=_award(identity, points_leader(bundle.rosters)),
        toilet_bowl=_award(identity, resolve_consolation_winner(bundle.losers_bracket)),
    )


def build_season_awards(bundles: Iterable[SeasonBundle]) -> List[SeasonAwards]:
    return [season_awards(bundle) for bundle in bundles]
