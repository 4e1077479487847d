from contextlib import asynccontextmanager
from typing import Literal, Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .cache import ResultCache
from .client import SleeperClient
from .config import Settings, get_settings
from .errors import InvalidWeekRangeError, SeasonNotFoundError, SeedLeagueError, UpstreamError
from .logging import configure_logging, get_logger
from .models.payloads import (
    AwardsPayload,
    DraftBoardPayload,
    ErrorPayload,
    ManagersPayload,
    RecordsPayload,
    RivalryPayload,
    StandingsPayload,
    TransactionFeedPayload,
)
from .services.league_service import LeagueService

logger = get_logger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL, json_output=settings.LOG_JSON)
    client = SleeperClient(
        base_url=settings.SLEEPER_API_URL,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
        max_concurrency=settings.MAX_CONCURRENT_REQUESTS,
    )
    cache = ResultCache(ttl_seconds=settings.RESULT_CACHE_TTL_SECONDS)
    app.state.league_service = LeagueService(client, cache, settings)
    logger.info("Serving league %s from %s", settings.LEAGUE_ID, settings.SLEEPER_API_URL)
    yield
    await client.aclose()


app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)

# Configure CORS for frontend integration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)


def get_league_service(request: Request) -> LeagueService:
    return request.app.state.league_service


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorPayload(error=message).model_dump())


@app.exception_handler(SeedLeagueError)
async def seed_league_error_handler(request: Request, exc: SeedLeagueError):
    logger.error("Aggregation failed for %s: %s", request.url.path, exc)
    return _error(502, str(exc))


@app.exception_handler(UpstreamError)
async def upstream_error_handler(request: Request, exc: UpstreamError):
    logger.error("Sleeper request failed while serving %s: %s", request.url.path, exc)
    return _error(502, str(exc))


@app.exception_handler(SeasonNotFoundError)
async def season_not_found_handler(request: Request, exc: SeasonNotFoundError):
    return _error(404, str(exc))


@app.exception_handler(InvalidWeekRangeError)
async def invalid_week_range_handler(request: Request, exc: InvalidWeekRangeError):
    return _error(422, str(exc))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    problems = [
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', 'invalid value')}"
        for error in exc.errors()
    ]
    return _error(422, "; ".join(problems) or "Invalid request")


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error while serving %s", request.url.path)
    return _error(500, str(exc) or "Failed to load league data")


def _league(league_id: Optional[str], current: Settings) -> str:
    return league_id or current.LEAGUE_ID


@app.get("/")
def read_root(current: Settings = Depends(get_settings)):
    return {"name": current.APP_NAME, "version": current.APP_VERSION, "leagueId": current.LEAGUE_ID}


@app.get("/awards", response_model=AwardsPayload)
@app.get("/league/{league_id}/awards", response_model=AwardsPayload)
async def get_awards(
    league_id: Optional[str] = None,
    service: LeagueService = Depends(get_league_service),
    current: Settings = Depends(get_settings),
):
    """Champion, regular season leader, points leader and toilet bowl winner of every season."""
    return await service.get_awards(_league(league_id, current))


@app.get("/records", response_model=RecordsPayload)
@app.get("/league/{league_id}/records", response_model=RecordsPayload)
async def get_records(
    league_id: Optional[str] = None,
    week_min: Optional[int] = Query(None, ge=1, le=18),
    week_max: Optional[int] = Query(None, ge=1, le=18),
    service: LeagueService = Depends(get_league_service),
    current: Settings = Depends(get_settings),
):
    """All-time top-10 lists over the given week range (regular season by default)."""
    return await service.get_records(_league(league_id, current), week_min, week_max)


@app.get("/managers", response_model=ManagersPayload)
@app.get("/league/{league_id}/managers", response_model=ManagersPayload)
async def get_managers(
    league_id: Optional[str] = None,
    service: LeagueService = Depends(get_league_service),
    current: Settings = Depends(get_settings),
):
    """Career totals for every manager who ever held a roster in the league."""
    return await service.get_managers(_league(league_id, current))


@app.get("/rivalry", response_model=RivalryPayload)
@app.get("/league/{league_id}/rivalry", response_model=RivalryPayload)
async def get_rivalry(
    league_id: Optional[str] = None,
    owner_a: Optional[str] = None,
    owner_b: Optional[str] = None,
    service: LeagueService = Depends(get_league_service),
    current: Settings = Depends(get_settings),
):
    """All-time head-to-head between two owners, identified by Sleeper user id."""
    return await service.get_rivalry(_league(league_id, current), owner_a, owner_b)


@app.get("/standings", response_model=StandingsPayload)
@app.get("/league/{league_id}/standings", response_model=StandingsPayload)
async def get_standings(
    league_id: Optional[str] = None,
    season: Optional[str] = None,
    mode: Literal["regular", "playoffs"] = "regular",
    service: LeagueService = Depends(get_league_service),
    current: Settings = Depends(get_settings),
):
    return await service.get_standings(_league(league_id, current), season, mode)


@app.get("/transactions", response_model=TransactionFeedPayload)
@app.get("/league/{league_id}/transactions", response_model=TransactionFeedPayload)
async def get_transactions(
    league_id: Optional[str] = None,
    service: LeagueService = Depends(get_league_service),
    current: Settings = Depends(get_settings),
):
    """This season's trades, waiver claims and free agent moves, newest first."""
    return await service.get_transactions(_league(league_id, current))


@app.get("/draftboard", response_model=DraftBoardPayload)
@app.get("/league/{league_id}/draftboard", response_model=DraftBoardPayload)
async def get_draft_board(
    league_id: Optional[str] = None,
    service: LeagueService = Depends(get_league_service),
    current: Settings = Depends(get_settings),
):
    return await service.get_draft_board(_league(league_id, current))
