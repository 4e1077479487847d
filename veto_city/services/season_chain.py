from typing import AsyncIterator, List

from ..client import SleeperClient
from ..errors import SeedLeagueError, UpstreamError
from ..logging import get_logger
from ..models.sleeper import League, parse_one

logger = get_logger(__name__)

DEFAULT_MAX_DEPTH = 20


async def iter_season_chain(
    client: SleeperClient, league_id: str, max_depth: int = DEFAULT_MAX_DEPTH
) -> AsyncIterator[League]:
    """
    Yield a league's seasons newest to oldest by following ``previous_league_id``.

    Stops at an empty pointer, at the first league id already visited, or
    after ``max_depth`` seasons, whichever comes first. If the seed league
    cannot be loaded ``SeedLeagueError`` is raised; a failure further back
    simply ends the chain.
    """
    seen = set()
    current_league_id = league_id

    while current_league_id and len(seen) < max_depth:
        if current_league_id in seen:
            logger.info("Season chain for %s loops back to %s; stopping", league_id, current_league_id)
            return
        seen.add(current_league_id)

        try:
            data = await client.get_league(current_league_id)
        except UpstreamError as e:
            if current_league_id == league_id:
                raise SeedLeagueError(league_id, e) from e
            logger.warning("Season chain for %s truncated at %s: %s", league_id, current_league_id, e)
            return

        # Sleeper answers unknown league ids with a 200 and a null body
        if not isinstance(data, dict):
            if current_league_id == league_id:
                raise SeedLeagueError(league_id)
            logger.warning("Season chain for %s truncated at unknown league %s", league_id, current_league_id)
            return

        league = parse_one(League, data)
        if not league.league_id:
            league = league.model_copy(update={"league_id": current_league_id})
        yield league

        current_league_id = league.previous_id

    if current_league_id and current_league_id not in seen:
        logger.info("Season chain for %s reached max depth %d", league_id, max_depth)


async def walk_season_chain(
    client: SleeperClient, league_id: str, max_depth: int = DEFAULT_MAX_DEPTH
) -> List[League]:
    return [league async for league in iter_season_chain(client, league_id, max_depth)]
