import asyncio
import time
from typing import Any, Awaitable, Callable, Dict, Hashable, Optional, Tuple, TypeVar

from .logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_MISSING = object()


class ResultCache:
    """
    In-memory TTL cache for aggregation results, keyed by the logical query.

    Concurrent callers asking for the same key while it is being computed
    wait on a per-key lock and then read the stored value, so one upstream
    fan-out serves all of them. Entries are replaced wholesale on expiry and
    failed computations are never stored. Expired entries are dropped when a
    lookup finds them and swept, along with idle locks, on every insert.
    """

    def __init__(self, ttl_seconds: float = 60.0, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[Hashable, Tuple[float, Any]] = {}
        self._locks: Dict[Hashable, asyncio.Lock] = {}

    def _expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at >= self.ttl_seconds

    def _lookup(self, key: Hashable) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return _MISSING
        stored_at, value = entry
        if self._expired(stored_at, self._clock()):
            del self._entries[key]
            return _MISSING
        return value

    def _sweep(self):
        """Drop expired entries and the locks of keys nobody is computing."""
        now = self._clock()
        for key in [k for k, (stored_at, _) in self._entries.items() if self._expired(stored_at, now)]:
            del self._entries[key]
        for key in [k for k, lock in self._locks.items() if k not in self._entries and not lock.locked()]:
            del self._locks[key]

    async def get_or_compute(self, key: Hashable, compute: Callable[[], Awaitable[T]]) -> T:
        value = self._lookup(key)
        if value is not _MISSING:
            return value

        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            value = self._lookup(key)
            if value is not _MISSING:
                return value

            logger.debug("Result cache miss for %s", key)
            value = await compute()
            self._sweep()
            self._entries[key] = (self._clock(), value)
            return value

    def invalidate(self, key: Optional[Hashable] = None):
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)
