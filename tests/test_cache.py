import asyncio

import pytest

from veto_city.cache import ResultCache
from veto_city.errors import SeedLeagueError


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.mark.asyncio
async def test_value_is_reused_until_ttl_expires():
    clock = FakeClock()
    cache = ResultCache(ttl_seconds=60, clock=clock)
    calls = []

    async def compute():
        calls.append(clock.now)
        return len(calls)

    assert await cache.get_or_compute("k", compute) == 1
    clock.now = 59.9
    assert await cache.get_or_compute("k", compute) == 1
    clock.now = 60.0
    assert await cache.get_or_compute("k", compute) == 2
    assert calls == [0.0, 60.0]


@pytest.mark.asyncio
async def test_concurrent_callers_share_one_computation():
    cache = ResultCache(ttl_seconds=60)
    calls = 0

    async def compute():
        nonlocal calls
        calls += 1
        await asyncio.sleep(0.01)
        return {"answer": 42}

    results = await asyncio.gather(*[cache.get_or_compute(("awards", "L"), compute) for _ in range(5)])
    assert calls == 1
    assert all(r is results[0] for r in results)


@pytest.mark.asyncio
async def test_failures_are_not_cached():
    cache = ResultCache(ttl_seconds=60)
    attempts = 0

    async def compute():
        nonlocal attempts
        attempts += 1
        if attempts == 1:
            raise RuntimeError("boom")
        return "ok"

    with pytest.raises(RuntimeError):
        await cache.get_or_compute("k", compute)
    assert len(cache) == 0
    assert await cache.get_or_compute("k", compute) == "ok"


@pytest.mark.asyncio
async def test_expired_entries_and_idle_locks_are_dropped():
    clock = FakeClock()
    cache = ResultCache(ttl_seconds=60, clock=clock)

    async def compute():
        return "payload"

    for n in range(500):
        await cache.get_or_compute(("rivalry", "L", f"a{n}", f"b{n}"), compute)
    assert len(cache) == 500

    clock.now = 61.0
    await cache.get_or_compute(("rivalry", "L", "x", "y"), compute)
    assert len(cache) == 1
    assert list(cache._locks) == [("rivalry", "L", "x", "y")]


@pytest.mark.asyncio
async def test_expired_entry_is_removed_on_lookup():
    clock = FakeClock()
    cache = ResultCache(ttl_seconds=60, clock=clock)

    async def compute():
        return "payload"

    await cache.get_or_compute("k", compute)
    clock.now = 60.0
    assert len(cache) == 1
    cache._lookup("k")
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_invalidate():
    cache = ResultCache(ttl_seconds=60)

    async def compute():
        return object()

    first = await cache.get_or_compute("a", compute)
    await cache.get_or_compute("b", compute)
    cache.invalidate("a")
    assert len(cache) == 1
    assert await cache.get_or_compute("a", compute) is not first
    cache.invalidate()
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_repeated_query_makes_no_upstream_calls(sleeper, service):
    first = await service.get_awards("L2024")
    calls_after_first = len(sleeper.calls)
    second = await service.get_awards("L2024")

    assert len(sleeper.calls) == calls_after_first
    assert second.model_dump() == first.model_dump()


@pytest.mark.asyncio
async def test_different_week_ranges_are_cached_apart(sleeper, service):
    await service.get_records("L2024", 1, 14)
    calls_after_first = len(sleeper.calls)
    await service.get_records("L2024", 1, 2)
    assert len(sleeper.calls) > calls_after_first


@pytest.mark.asyncio
async def test_seed_failure_is_retried(sleeper, service):
    sleeper.failures.add("/league/L2024")
    with pytest.raises(SeedLeagueError):
        await service.get_managers("L2024")

    sleeper.failures.clear()
    payload = await service.get_managers("L2024")
    assert payload.managers_count == 4
