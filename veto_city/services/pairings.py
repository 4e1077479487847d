from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from ..models.sleeper import MatchupEntry


@dataclass(frozen=True)
class Game:
    """The two top scorers of one pairing, higher score first."""

    matchup_id: int
    winner: MatchupEntry
    loser: MatchupEntry

    @property
    def margin(self) -> float:
        return round(abs(self.winner.score - self.loser.score), 2)

    @property
    def combined(self) -> float:
        return round(self.winner.score + self.loser.score, 2)

    @property
    def is_tie(self) -> bool:
        return self.margin == 0


def group_pairings(entries: Iterable[MatchupEntry]) -> Dict[int, List[MatchupEntry]]:
    """Group one week's entries by ``matchup_id``; entries without one are byes."""
    groups: Dict[int, List[MatchupEntry]] = {}
    for entry in entries:
        if entry.matchup_id is None or entry.roster_id is None:
            continue
        groups.setdefault(entry.matchup_id, []).append(entry)
    return groups


def game_from_pairing(matchup_id: int, entries: List[MatchupEntry]) -> Optional[Game]:
    scored = [e for e in entries if e.points is not None]
    if len(scored) < 2:
        return None
    first, second = sorted(scored, key=lambda e: e.score, reverse=True)[:2]
    return Game(matchup_id=matchup_id, winner=first, loser=second)


def week_games(entries: Iterable[MatchupEntry]) -> List[Game]:
    games = []
    for matchup_id, group in sorted(group_pairings(entries).items()):
        game = game_from_pairing(matchup_id, group)
        if game is not None:
            games.append(game)
    return games


def week_was_played(entries: Iterable[MatchupEntry]) -> bool:
    """Sleeper lists future weeks with every score at zero."""
    return any(e.score > 0 for e in entries)
