"""
Entry points behind the HTTP routes.

Each method walks the league's season chain, fetches only what its
consumer needs, and runs the pure aggregation over the result. Results are
stored in the injected ``ResultCache`` under a key describing the query, so
repeated requests inside the TTL never reach Sleeper.
"""
from typing import Dict, List, Optional

from ..cache import ResultCache
from ..client import SleeperClient
from ..config import Settings
from ..errors import InvalidWeekRangeError, SeasonNotFoundError, UpstreamError
from ..logging import get_logger
from ..models.payloads import (
    AwardsPayload,
    DraftBoardPayload,
    ManagersPayload,
    RecordsPayload,
    RivalryPayload,
    StandingsPayload,
    TransactionFeedPayload,
    WeekRange,
    utc_now_iso,
)
from ..models.sleeper import League, Player
from .awards import build_season_awards
from .drafts import build_draft_board
from .records import build_record_lists
from .rivalry import build_rivalry
from .season_chain import walk_season_chain
from .season_data import FetchPlan, SeasonBundle, fetch_season, fetch_seasons
from .standings import REGULAR, build_standings
from .stats import aggregate_manager_totals, manager_rows
from .transactions import build_transaction_feed

logger = get_logger(__name__)


class LeagueService:
    def __init__(self, client: SleeperClient, cache: ResultCache, settings: Settings):
        self.client = client
        self.cache = cache
        self.settings = settings

    async def season_chain(self, league_id: str) -> List[League]:
        return await walk_season_chain(self.client, league_id, self.settings.MAX_SEASON_CHAIN_DEPTH)

    async def season_bundles(self, league_id: str, plan: FetchPlan) -> List[SeasonBundle]:
        leagues = await self.season_chain(league_id)
        return await fetch_seasons(self.client, leagues, plan)

    def _transaction_weeks(self) -> range:
        return range(1, self.settings.TRANSACTION_WEEK_MAX + 1)

    async def get_awards(self, league_id: str) -> AwardsPayload:
        async def compute():
            bundles = await self.season_bundles(league_id, FetchPlan(brackets=True))
            return AwardsPayload(
                league_id=league_id,
                seasons=build_season_awards(bundles),
                fetched_at=utc_now_iso(),
            )

        return await self.cache.get_or_compute(("awards", league_id), compute)

    async def get_records(
        self, league_id: str, week_min: Optional[int] = None, week_max: Optional[int] = None
    ) -> RecordsPayload:
        week_min = self.settings.RECORDS_WEEK_MIN if week_min is None else week_min
        week_max = self.settings.RECORDS_WEEK_MAX if week_max is None else week_max
        if week_min > week_max:
            raise InvalidWeekRangeError(week_min, week_max)

        async def compute():
            plan = FetchPlan(matchup_weeks=range(week_min, week_max + 1))
            bundles = await self.season_bundles(league_id, plan)
            return RecordsPayload(
                league_id=league_id,
                seasons_count=len(bundles),
                week_range=WeekRange(min=week_min, max=week_max),
                lists=build_record_lists(bundles, week_min, week_max),
                fetched_at=utc_now_iso(),
            )

        return await self.cache.get_or_compute(("records", league_id, week_min, week_max), compute)

    async def get_managers(self, league_id: str) -> ManagersPayload:
        async def compute():
            plan = FetchPlan(transaction_weeks=self._transaction_weeks())
            bundles = await self.season_bundles(league_id, plan)
            rows = manager_rows(aggregate_manager_totals(bundles))
            return ManagersPayload(
                league_id=league_id,
                managers_count=len(rows),
                rows=rows,
                fetched_at=utc_now_iso(),
            )

        return await self.cache.get_or_compute(("managers", league_id), compute)

    async def matchup_history(self, league_id: str) -> List[SeasonBundle]:
        """Every season with every week's matchups; shared by all rivalry queries."""

        async def compute():
            plan = FetchPlan(matchup_weeks=range(1, self.settings.TRANSACTION_WEEK_MAX + 1))
            return await self.season_bundles(league_id, plan)

        return await self.cache.get_or_compute(("matchup-history", league_id), compute)

    async def get_rivalry(
        self, league_id: str, owner_a: Optional[str] = None, owner_b: Optional[str] = None
    ) -> RivalryPayload:
        async def compute():
            bundles = await self.matchup_history(league_id)
            owners, a, b, games, summary = build_rivalry(bundles, owner_a, owner_b)
            return RivalryPayload(
                league_id=league_id,
                owners=owners,
                owner_a=a,
                owner_b=b,
                games=games,
                summary=summary,
                fetched_at=utc_now_iso(),
            )

        return await self.cache.get_or_compute(("rivalry", league_id, owner_a, owner_b), compute)

    async def _season_league(self, league_id: str, season: Optional[str]) -> League:
        leagues = await self.season_chain(league_id)
        if season is None:
            return leagues[0]
        for league in leagues:
            if league.season == season:
                return league
        raise SeasonNotFoundError(league_id, season)

    async def get_standings(self, league_id: str, season: Optional[str] = None, mode: str = REGULAR) -> StandingsPayload:
        async def compute():
            league = await self._season_league(league_id, season)
            plan = FetchPlan(matchup_weeks=range(1, self.settings.TRANSACTION_WEEK_MAX + 1))
            bundle = await fetch_season(self.client, league, plan)
            week_range, playoff_start, last_week, rows = build_standings(bundle, mode)
            return StandingsPayload(
                league_id=league_id,
                season=bundle.season,
                mode=mode,
                week_range=week_range,
                playoff_week_start=playoff_start,
                last_scored_week=last_week,
                rows=rows,
                fetched_at=utc_now_iso(),
            )

        return await self.cache.get_or_compute(("standings", league_id, season, mode), compute)

    async def player_directory(self) -> Dict[str, Player]:
        async def compute():
            try:
                data = await self.client.get_all_players()
            except UpstreamError as e:
                logger.warning("Player directory unavailable, labelling players by id: %s", e)
                return {}
            if not isinstance(data, dict):
                return {}
            return {
                str(player_id): Player.model_validate(info)
                for player_id, info in data.items()
                if isinstance(info, dict)
            }

        return await self.cache.get_or_compute(("players",), compute)

    async def get_transactions(self, league_id: str) -> TransactionFeedPayload:
        async def compute():
            league = await self._season_league(league_id, None)
            plan = FetchPlan(transaction_weeks=self._transaction_weeks())
            bundle = await fetch_season(self.client, league, plan)
            players = await self.player_directory()
            items, trades, waivers = build_transaction_feed(bundle, players)
            return TransactionFeedPayload(
                league_id=league_id,
                season=bundle.season,
                trades=trades,
                waivers=waivers,
                transactions=items,
                fetched_at=utc_now_iso(),
            )

        return await self.cache.get_or_compute(("transactions", league_id), compute)

    async def get_draft_board(self, league_id: str) -> DraftBoardPayload:
        async def compute():
            bundles = await self.season_bundles(league_id, FetchPlan(draft=True))
            return DraftBoardPayload(
                league_id=league_id,
                seasons=build_draft_board(bundles),
                fetched_at=utc_now_iso(),
            )

        return await self.cache.get_or_compute(("draftboard", league_id), compute)
