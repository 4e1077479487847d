import asyncio
from typing import Any, Optional

import httpx

from .errors import UpstreamError
from .logging import get_logger

logger = get_logger(__name__)

API_URL = "https://api.sleeper.app/v1"


class SleeperClient:
    """
    Read-only async client for the Sleeper REST API.

    One instance wraps one ``httpx.AsyncClient``; every request goes through a
    semaphore so a single aggregation never has more than
    ``max_concurrency`` requests in flight.
    """

    def __init__(
        self,
        base_url: str = API_URL,
        timeout: float = 15.0,
        max_concurrency: int = 16,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._semaphore = asyncio.Semaphore(max_concurrency)

    async def aclose(self):
        await self._http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def get(self, path: str) -> Any:
        """
        A generic GET request for the Sleeper API.

        Raises ``UpstreamError`` for transport failures, non-2xx responses and
        bodies that are not JSON.
        """
        url = f"{self.base_url}{path}"
        async with self._semaphore:
            try:
                response = await self._http.get(url)
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise UpstreamError(
                    url,
                    f"Sleeper API error {e.response.status_code} for {path}",
                    status_code=e.response.status_code,
                ) from e
            except httpx.RequestError as e:
                raise UpstreamError(url, f"Sleeper API request failed for {path}: {e!r}") from e

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(url, f"Sleeper API returned invalid JSON for {path}") from e

    async def get_league(self, league_id: str):
        return await self.get(f"/league/{league_id}")

    async def get_league_users(self, league_id: str):
        return await self.get(f"/league/{league_id}/users")

    async def get_league_rosters(self, league_id: str):
        return await self.get(f"/league/{league_id}/rosters")

    async def get_league_matchups(self, league_id: str, week: int):
        # Weeks past the end of a season come back as 404 on some older leagues
        try:
            return await self.get(f"/league/{league_id}/matchups/{week}")
        except UpstreamError as e:
            if e.not_found:
                return []
            raise

    async def get_league_transactions(self, league_id: str, week: int):
        try:
            return await self.get(f"/league/{league_id}/transactions/{week}")
        except UpstreamError as e:
            if e.not_found:
                return []
            raise

    async def get_winners_bracket(self, league_id: str):
        return await self.get(f"/league/{league_id}/winners_bracket")

    async def get_losers_bracket(self, league_id: str):
        return await self.get(f"/league/{league_id}/losers_bracket")

    async def get_league_drafts(self, league_id: str):
        return await self.get(f"/league/{league_id}/drafts")

    async def get_draft(self, draft_id: str):
        return await self.get(f"/draft/{draft_id}")

    async def get_draft_picks(self, draft_id: str):
        return await self.get(f"/draft/{draft_id}/picks")

    async def get_all_players(self):
        return await self.get("/players/nfl")
