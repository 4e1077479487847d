import pytest

from veto_city.services.rivalry import build_rivalry
from veto_city.services.season_chain import walk_season_chain
from veto_city.services.season_data import FetchPlan, fetch_seasons


async def _bundles(client):
    leagues = await walk_season_chain(client, "L2024")
    return await fetch_seasons(client, leagues, FetchPlan(matchup_weeks=range(1, 19)))


@pytest.mark.asyncio
async def test_series_spans_seasons_and_roster_slots(sleeper_client):
    owners, a, b, games, summary = build_rivalry(await _bundles(sleeper_client), "u1", "u2")

    assert (a.name, b.name) == ("Alpha Dogs", "bobby")
    assert [(g.season, g.week) for g in games] == [("2024", 1), ("2023", 1)]
    assert (games[0].a.score, games[0].b.score) == (120.4, 98.1)
    assert (games[1].a.score, games[1].b.score) == (80.0, 140.0)

    assert (summary.games, summary.a_wins, summary.b_wins, summary.ties) == (2, 1, 1, 0)
    assert summary.points_for == 200.4
    assert summary.points_against == 238.1
    assert summary.diff == -37.7
    assert summary.a_win_pct == 0.5


@pytest.mark.asyncio
async def test_late_joiner_only_counts_shared_seasons(sleeper_client):
    _, a, b, games, summary = build_rivalry(await _bundles(sleeper_client), "u1", "u4")
    assert b.name == "dave"
    assert [(g.season, g.week) for g in games] == [("2024", 2)]
    assert (summary.games, summary.ties) == (1, 1)
    assert summary.a_win_pct == 0.0


@pytest.mark.asyncio
async def test_owner_directory_is_sorted_by_name(sleeper_client):
    owners, *_ = build_rivalry(await _bundles(sleeper_client), None, None)
    assert [o.owner_id for o in owners] == ["u1", "u2", "u3", "u4"]
    assert [o.name for o in owners] == ["Alpha Dogs", "bobby", "carol_c", "dave"]


@pytest.mark.asyncio
async def test_unknown_or_same_owner_yields_empty_series(sleeper_client):
    bundles = await _bundles(sleeper_client)

    _, a, b, games, summary = build_rivalry(bundles, "u1", "nobody")
    assert b is None
    assert games == []
    assert summary.games == 0
    assert summary.a_win_pct == 0.0

    _, a, b, games, _ = build_rivalry(bundles, "u1", "u1")
    assert games == []
