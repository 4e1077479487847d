import asyncio
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Awaitable, Dict, List, Optional, Sequence, Tuple

from ..client import SleeperClient
from ..errors import UpstreamError
from ..logging import get_logger
from ..models.sleeper import (
    BracketRow,
    Draft,
    DraftPick,
    League,
    MatchupEntry,
    Roster,
    Transaction,
    User,
    parse_list,
    parse_one,
)
from .identity import SeasonIdentity

logger = get_logger(__name__)


@dataclass(frozen=True)
class FetchPlan:
    """Which optional parts of a season to fetch, and over which weeks."""

    matchup_weeks: Sequence[int] = ()
    transaction_weeks: Sequence[int] = ()
    brackets: bool = False
    draft: bool = False


@dataclass
class SeasonBundle:
    league: League
    users: List[User] = field(default_factory=list)
    rosters: List[Roster] = field(default_factory=list)
    matchups: Dict[int, List[MatchupEntry]] = field(default_factory=dict)
    transactions: List[Transaction] = field(default_factory=list)
    winners_bracket: List[BracketRow] = field(default_factory=list)
    losers_bracket: List[BracketRow] = field(default_factory=list)
    draft: Optional[Draft] = None
    draft_picks: List[DraftPick] = field(default_factory=list)

    @property
    def league_id(self) -> str:
        return self.league.league_id

    @property
    def season(self) -> str:
        return self.league.season or "-"

    @cached_property
    def identity(self) -> SeasonIdentity:
        return SeasonIdentity.build(self.users, self.rosters)

    def weeks(self) -> List[int]:
        return sorted(self.matchups)


async def _safe(fetch: Awaitable[Any], fallback: Any, what: str) -> Any:
    """Await a leaf fetch, substituting ``fallback`` if Sleeper fails."""
    try:
        return await fetch
    except UpstreamError as e:
        logger.warning("Using empty %s: %s", what, e)
        return fallback


async def _fetch_week_matchups(client: SleeperClient, league_id: str, week: int) -> List[MatchupEntry]:
    data = await _safe(client.get_league_matchups(league_id, week), [], f"matchups for {league_id} week {week}")
    return [entry.model_copy(update={"week": week}) for entry in parse_list(MatchupEntry, data)]


async def _fetch_week_transactions(client: SleeperClient, league_id: str, week: int) -> List[Transaction]:
    data = await _safe(
        client.get_league_transactions(league_id, week), [], f"transactions for {league_id} week {week}"
    )
    return [tx.model_copy(update={"week": week}) for tx in parse_list(Transaction, data)]


async def _fetch_matchups(client: SleeperClient, league_id: str, weeks: Sequence[int]) -> Dict[int, List[MatchupEntry]]:
    weekly = await asyncio.gather(*[_fetch_week_matchups(client, league_id, week) for week in weeks])
    return dict(zip(weeks, weekly))


async def _fetch_transactions(client: SleeperClient, league_id: str, weeks: Sequence[int]) -> List[Transaction]:
    weekly = await asyncio.gather(*[_fetch_week_transactions(client, league_id, week) for week in weeks])
    return [tx for week_transactions in weekly for tx in week_transactions]


async def _fetch_bracket(client: SleeperClient, league_id: str, losers: bool) -> List[BracketRow]:
    if losers:
        data = await _safe(client.get_losers_bracket(league_id), [], f"losers bracket for {league_id}")
    else:
        data = await _safe(client.get_winners_bracket(league_id), [], f"winners bracket for {league_id}")
    return parse_list(BracketRow, data)


async def _select_draft_id(client: SleeperClient, league: League) -> Optional[str]:
    """
    Pick the season's main draft.

    Leagues normally carry ``draft_id`` directly. Older ones only list their
    drafts; among those the largest board (rounds x slots) wins, newest
    first on a tie.
    """
    if league.draft_id:
        return league.draft_id

    drafts = parse_list(
        Draft, await _safe(client.get_league_drafts(league.league_id), [], f"drafts for {league.league_id}")
    )
    details = await asyncio.gather(
        *[_safe(client.get_draft(d.draft_id), None, f"draft {d.draft_id}") for d in drafts if d.draft_id]
    )
    candidates = [parse_one(Draft, d) for d in details if isinstance(d, dict)]
    candidates = [d for d in candidates if d.draft_id]
    if not candidates:
        return None
    candidates.sort(key=lambda d: (d.size, d.start_time), reverse=True)
    return candidates[0].draft_id


async def _fetch_draft(client: SleeperClient, league: League) -> Tuple[Optional[Draft], List[DraftPick]]:
    draft_id = await _select_draft_id(client, league)
    if not draft_id:
        return None, []

    draft_data, picks_data = await asyncio.gather(
        _safe(client.get_draft(draft_id), None, f"draft {draft_id}"),
        _safe(client.get_draft_picks(draft_id), [], f"picks for draft {draft_id}"),
    )
    draft = parse_one(Draft, draft_data)
    if not draft.draft_id:
        draft = draft.model_copy(update={"draft_id": draft_id})
    return draft, parse_list(DraftPick, picks_data)


async def _nothing(value: Any) -> Any:
    return value


async def fetch_season(client: SleeperClient, league: League, plan: FetchPlan) -> SeasonBundle:
    """
    Fetch everything ``plan`` asks for about one season, concurrently.

    Each piece falls back to an empty collection on its own, so one missing
    week or bracket never costs the rest of the season.
    """
    league_id = league.league_id
    (
        users_data,
        rosters_data,
        matchups,
        transactions,
        winners_bracket,
        losers_bracket,
        (draft, draft_picks),
    ) = await asyncio.gather(
        _safe(client.get_league_users(league_id), [], f"users for {league_id}"),
        _safe(client.get_league_rosters(league_id), [], f"rosters for {league_id}"),
        _fetch_matchups(client, league_id, plan.matchup_weeks),
        _fetch_transactions(client, league_id, plan.transaction_weeks),
        _fetch_bracket(client, league_id, losers=False) if plan.brackets else _nothing([]),
        _fetch_bracket(client, league_id, losers=True) if plan.brackets else _nothing([]),
        _fetch_draft(client, league) if plan.draft else _nothing((None, [])),
    )

    bundle = SeasonBundle(
        league=league,
        users=parse_list(User, users_data),
        rosters=parse_list(Roster, rosters_data),
        matchups=matchups,
        transactions=transactions,
        winners_bracket=winners_bracket,
        losers_bracket=losers_bracket,
        draft=draft,
        draft_picks=draft_picks,
    )
    logger.debug(
        "Fetched season %s (%s): %d rosters, %d weeks, %d transactions",
        bundle.season,
        league_id,
        len(bundle.rosters),
        len(bundle.matchups),
        len(bundle.transactions),
    )
    return bundle


async def fetch_seasons(client: SleeperClient, leagues: Sequence[League], plan: FetchPlan) -> List[SeasonBundle]:
    """Fetch every season in parallel, keeping the chain's newest-first order."""
    return list(await asyncio.gather(*[fetch_season(client, league, plan) for league in leagues]))
