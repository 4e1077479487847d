import pytest


@pytest.mark.asyncio
async def test_board_per_season(service):
    payload = await service.get_draft_board("L2024")
    assert [s.season for s in payload.seasons] == ["2024", "2023"]

    latest = payload.seasons[0]
    assert latest.draft_id == "d2024"
    assert (latest.rounds, latest.slots, latest.draft_type) == (2, 4, "snake")
    assert [p.pick_no for p in latest.picks] == [1, 2]

    first = latest.picks[0]
    assert first.player == "Christian McCaffrey"
    assert (first.position, first.nfl_team) == ("RB", "SF")
    assert first.team.name == "Alpha Dogs"


@pytest.mark.asyncio
async def test_pick_without_metadata_uses_player_id(service):
    payload = await service.get_draft_board("L2024")
    older = payload.seasons[1]
    assert older.draft_id == "d2023"
    assert older.picks[0].player == "p9"
    assert older.picks[0].team.name == "carol"


@pytest.mark.asyncio
async def test_season_without_draft(sleeper, service):
    del sleeper.responses["/league/L2023/drafts"]
    payload = await service.get_draft_board("L2024")
    older = payload.seasons[1]
    assert older.draft_id is None
    assert older.picks == []
