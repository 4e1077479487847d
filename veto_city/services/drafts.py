from typing import Iterable, List

from ..models.payloads import DraftBoardPick, DraftBoardSeason
from .season_data import SeasonBundle


def _season_sort_key(bundle: SeasonBundle) -> int:
    return int(bundle.league.season) if bundle.league.season.isdigit() else 0


def draft_board_season(bundle: SeasonBundle) -> DraftBoardSeason:
    identity = bundle.identity
    draft = bundle.draft
    picks = sorted(bundle.draft_picks, key=lambda p: (p.pick_no, p.round))
    return DraftBoardSeason(
        league_id=bundle.league_id,
        season=bundle.season,
        draft_id=draft.draft_id if draft else None,
        draft_type=draft.type if draft else "",
        status=draft.status if draft else "",
        rounds=draft.settings.rounds if draft else 0,
        slots=draft.settings.slots if draft else 0,
        picks=[
            DraftBoardPick(
                pick_no=pick.pick_no,
                round=pick.round,
                team=identity.team(pick.roster_id),
                player_id=pick.player_id,
                player=pick.player_label,
                position=pick.metadata.position,
                nfl_team=pick.metadata.team,
            )
            for pick in picks
        ],
    )


def build_draft_board(bundles: Iterable[SeasonBundle]) -> List[DraftBoardSeason]:
    """One board per season, newest season first."""
    ordered = sorted(bundles, key=_season_sort_key, reverse=True)
    return [draft_board_season(bundle) for bundle in ordered]
