from typing import List, Optional

from ..models.sleeper import BracketRow, League


def resolve_bracket_winner(bracket: List[BracketRow]) -> Optional[int]:
    """
    Winner of an elimination bracket.

    Bracket rows look like ``{r: 1, m: 1, t1: 3, t2: 6, w: 3, l: 6, p: 1}``.
    The game with placement ``p == 1`` decides it when it has a winner;
    otherwise the highest-round game with a winner does.
    """
    for row in bracket:
        if row.p == 1 and row.w is not None:
            return row.w

    decided = [row for row in bracket if row.r is not None and row.w is not None]
    if not decided:
        return None
    return max(decided, key=lambda row: row.r).w


def resolve_champion(league: League, winners_bracket: List[BracketRow]) -> Optional[int]:
    """
    The season champion's roster id, or ``None`` when nothing says who won.

    Falls back from the bracket to ``settings.winner_roster_id`` and then to
    ``metadata.latest_league_winner_roster_id``.
    """
    winner = resolve_bracket_winner(winners_bracket)
    if winner is not None:
        return winner
    if league.settings.winner_roster_id is not None:
        return league.settings.winner_roster_id
    return league.metadata.latest_league_winner_roster_id


def resolve_consolation_winner(losers_bracket: List[BracketRow]) -> Optional[int]:
    return resolve_bracket_winner(losers_bracket)
