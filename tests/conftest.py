"""Shared fixtures: a two-season Sleeper league served through httpx.MockTransport."""
import copy
from typing import Any, Dict, List, Set

import httpx
import pytest

from veto_city.cache import ResultCache
from veto_city.client import SleeperClient
from veto_city.config import Settings
from veto_city.services.league_service import LeagueService

BASE_URL = "https://sleeper.test/v1"
LEAGUE_ID = "L2024"


def roster(roster_id, owner_id, wins, losses, ties=0, fpts=0, fpts_decimal=0, fpts_against=0,
           fpts_against_decimal=0, ppts=0, ppts_decimal=0):
    return {
        "roster_id": roster_id,
        "owner_id": owner_id,
        "settings": {
            "wins": wins,
            "losses": losses,
            "ties": ties,
            "fpts": fpts,
            "fpts_decimal": fpts_decimal,
            "fpts_against": fpts_against,
            "fpts_against_decimal": fpts_against_decimal,
            "ppts": ppts,
            "ppts_decimal": ppts_decimal,
        },
    }


def matchup(roster_id, matchup_id, points):
    return {"roster_id": roster_id, "matchup_id": matchup_id, "points": points}


USERS_2024 = [
    {"user_id": "u1", "username": "alice", "display_name": "alice", "avatar": "av1",
     "metadata": {"team_name": "Alpha Dogs"}},
    {"user_id": "u2", "username": "bob", "display_name": "bobby", "avatar": None, "metadata": {}},
    {"user_id": "u3", "username": "carol_c", "display_name": "", "metadata": {"team_name": "  "}},
    {"user_id": "u4", "username": "dave", "display_name": "dave", "avatar": "av4", "metadata": None},
]

USERS_2023 = [
    {"user_id": "u1", "username": "alice", "display_name": "alice", "avatar": "av1-old",
     "metadata": {"team_name": "Alpha Pups"}},
    {"user_id": "u2", "username": "bob", "display_name": "bobby", "metadata": {}},
    {"user_id": "u3", "username": "carol_c", "display_name": "carol"},
]

ROSTERS_2024 = [
    roster(1, "u1", 10, 3, 1, fpts=1500, fpts_decimal=25, fpts_against=1400, fpts_against_decimal=50, ppts=1700),
    roster(2, "u2", 7, 7, 0, fpts=1350, fpts_decimal=10, fpts_against=1380, ppts=1600),
    roster(3, "u3", 5, 9, 0, fpts=1200, fpts_against=1300, ppts=1500),
    roster(4, "u4", 6, 8, 0, fpts=1250, fpts_decimal=75, fpts_against=1270, ppts=1450),
]

ROSTERS_2023 = [
    roster(1, "u2", 9, 5, 0, fpts=1420, fpts_decimal=56, fpts_against=1300, ppts=1550, ppts_decimal=50),
    roster(2, "u1", 8, 6, 0, fpts=1380, fpts_against=1350, ppts=1500),
    roster(3, "u3", 4, 10, 0, fpts="1100", fpts_against=1400, ppts=1300),
    roster(4, None, 7, 7, 0, fpts=1250, fpts_against=1200),
]


def league_fixture() -> Dict[str, Any]:
    """Sleeper responses keyed by API path."""
    return {
        "/league/L2024": {
            "league_id": "L2024",
            "name": "Veto City",
            "season": "2024",
            "status": "complete",
            "previous_league_id": "L2023",
            "settings": {"playoff_week_start": 2},
        },
        "/league/L2023": {
            "league_id": "L2023",
            "name": "Veto City",
            "season": "2023",
            "status": "complete",
            "previous_league_id": None,
            "draft_id": None,
            "settings": {"playoff_week_start": 15, "winner_roster_id": 1},
        },
        "/league/L2024/users": USERS_2024,
        "/league/L2023/users": USERS_2023,
        "/league/L2024/rosters": ROSTERS_2024,
        "/league/L2023/rosters": ROSTERS_2023,
        "/league/L2024/matchups/1": [
            matchup(1, 1, 120.4), matchup(2, 1, 98.1), matchup(3, 2, 110.0), matchup(4, 2, 105.5),
        ],
        "/league/L2024/matchups/2": [
            matchup(1, 1, 100.0), matchup(4, 1, 100.0), matchup(2, 2, 130.2), matchup(3, 2, 90.3),
        ],
        "/league/L2024/matchups/3": [
            matchup(1, 1, 0), matchup(2, 1, 0), matchup(3, 2, 0), matchup(4, 2, 0),
        ],
        "/league/L2023/matchups/1": [
            matchup(1, 1, 140.0), matchup(2, 1, 80.0), matchup(3, 2, 95.0), matchup(4, 2, 96.5),
        ],
        "/league/L2024/transactions/1": [
            {
                "transaction_id": "t1",
                "type": "trade",
                "status": "complete",
                "status_updated": 3000,
                "roster_ids": [1, 2],
                "adds": {"p1": 1, "p2": 2},
                "drops": {"p1": 2, "p2": 1},
                "draft_picks": [
                    {"season": "2025", "round": 1, "roster_id": 2, "owner_id": 1, "previous_owner_id": 2},
                ],
            },
            {
                "transaction_id": "t2",
                "type": "waiver",
                "status": "complete",
                "status_updated": 2000,
                "roster_ids": [3],
                "adds": {"p3": 3},
                "drops": None,
            },
            {
                "transaction_id": "t3",
                "type": "free_agent",
                "status": "complete",
                "status_updated": 1000,
                "roster_ids": [],
                "adds": {"p4": 4},
            },
            {
                "transaction_id": "t4",
                "type": "waiver",
                "status": "failed",
                "status_updated": 1500,
                "roster_ids": [1],
                "adds": {"p5": 1},
            },
        ],
        "/league/L2023/transactions/2": [
            {"transaction_id": "t5", "type": "waiver", "status": "complete", "roster_ids": [1], "adds": {"p6": 1}},
            {"transaction_id": "t6", "type": "commissioner", "status": "complete", "roster_ids": [2]},
        ],
        "/league/L2024/winners_bracket": [
            {"r": 1, "m": 1, "t1": 1, "t2": 4, "w": 1, "l": 4},
            {"r": 1, "m": 2, "t1": 2, "t2": 3, "w": 2, "l": 3},
            {"r": 2, "m": 3, "t1": 1, "t2": 2, "w": 2, "l": 1, "p": 1},
            {"r": 2, "m": 4, "t1": 4, "t2": 3, "w": 3, "l": 4, "p": 3},
        ],
        "/league/L2024/losers_bracket": [
            {"r": 1, "m": 1, "t1": 3, "t2": 4, "w": 4, "l": 3},
            {"r": 2, "m": 2, "t1": 4, "t2": 1, "w": None, "l": None},
        ],
        "/league/L2023/losers_bracket": [],
        "/league/L2024/drafts": [{"draft_id": "d2024"}],
        "/league/L2023/drafts": [{"draft_id": "d2023-mock"}, {"draft_id": "d2023"}],
        "/draft/d2024": {
            "draft_id": "d2024", "type": "snake", "status": "complete", "season": "2024",
            "start_time": 200, "settings": {"rounds": 2, "slots": 4},
        },
        "/draft/d2023-mock": {
            "draft_id": "d2023-mock", "type": "snake", "status": "complete", "season": "2023",
            "start_time": 150, "settings": {"rounds": 1, "slots": 4},
        },
        "/draft/d2023": {
            "draft_id": "d2023", "type": "linear", "status": "complete", "season": "2023",
            "start_time": 100, "settings": {"rounds": 2, "slots": 4},
        },
        "/draft/d2024/picks": [
            {"pick_no": 2, "round": 1, "roster_id": 2, "player_id": "p2",
             "metadata": {"first_name": "Bijan", "last_name": "Robinson", "position": "RB", "team": "ATL"}},
            {"pick_no": 1, "round": 1, "roster_id": 1, "player_id": "p1",
             "metadata": {"first_name": "Christian", "last_name": "McCaffrey", "position": "RB", "team": "SF"}},
        ],
        "/draft/d2023/picks": [
            {"pick_no": 1, "round": 1, "roster_id": 3, "player_id": "p9", "metadata": {}},
        ],
        "/players/nfl": {
            "p1": {"full_name": "Christian McCaffrey", "position": "RB", "team": "SF"},
            "p2": {"first_name": "Bijan", "last_name": "Robinson", "position": "RB"},
            "p3": {"full_name": "Puka Nacua", "position": "WR"},
        },
    }


class FakeSleeper:
    """
    Serves a canned league. Unknown paths answer 404, paths listed in
    ``failures`` answer 500, and every request path is recorded.
    """

    def __init__(self, responses: Dict[str, Any]):
        self.responses = responses
        self.failures: Set[str] = set()
        self.calls: List[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path[len("/v1"):]
        self.calls.append(path)
        if path in self.failures:
            return httpx.Response(500, text="upstream exploded")
        if path not in self.responses:
            return httpx.Response(404, json=None)
        return httpx.Response(200, json=self.responses[path])

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def sleeper() -> FakeSleeper:
    return FakeSleeper(copy.deepcopy(league_fixture()))


@pytest.fixture
def test_settings() -> Settings:
    return Settings(SLEEPER_API_URL=BASE_URL, LEAGUE_ID=LEAGUE_ID, RESULT_CACHE_TTL_SECONDS=60)


@pytest.fixture
def sleeper_client(sleeper: FakeSleeper) -> SleeperClient:
    return SleeperClient(base_url=BASE_URL, max_concurrency=64, transport=sleeper.transport())


@pytest.fixture
def fake_sleeper():
    """Build a client over an arbitrary set of canned responses."""

    def build(responses: Dict[str, Any]):
        fake = FakeSleeper(responses)
        return fake, SleeperClient(base_url=BASE_URL, max_concurrency=64, transport=fake.transport())

    return build


@pytest.fixture
def service(sleeper_client: SleeperClient, test_settings: Settings) -> LeagueService:
    return LeagueService(sleeper_client, ResultCache(ttl_seconds=60), test_settings)
