import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from bookfinder.config import config
from bookfinder.models import Recommendation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    data: Recommendation
    timestamp: float


class RecommendationCache:
    """
    In-process, time-expiring store of recommendations keyed by normalized query.
    Only touched from the event loop, so plain dict operations are enough.
    """

    def __init__(self, ttl_seconds: Optional[float] = None, clock: Callable[[], float] = time.monotonic):
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._store: Dict[str, CacheEntry] = {}
        self._sweeper: Optional[asyncio.Task] = None

    @property
    def ttl_seconds(self) -> float:
        # Tracks CACHE_TTL_SECONDS live unless fixed at construction
        if self._ttl_seconds is not None:
            return self._ttl_seconds
        return config.CACHE_TTL_SECONDS

    @staticmethod
    def normalize(query: str) -> str:
        return query.strip().lower()

    def _expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.timestamp >= self.ttl_seconds

    def get(self, query: str) -> Optional[Recommendation]:
        key = self.normalize(query)
        entry = self._store.get(key)
        if entry is None:
            return None
        if self._expired(entry, self._clock()):
            self._store.pop(key, None)
            return None
        return entry.data

    def put(self, query: str, data: Recommendation) -> None:
        self._store[self.normalize(query)] = CacheEntry(data=data, timestamp=self._clock())

    def clear(self) -> None:
        self._store.clear()

    def sweep(self) -> int:
        """Drops every expired entry and returns how many were removed."""
        now = self._clock()
        stale = [key for key, entry in self._store.items() if self._expired(entry, now)]
        for key in stale:
            del self._store[key]
        if stale:
            logger.debug(f"Cache sweep removed {len(stale)} expired entries")
        return len(stale)

    def __len__(self) -> int:
        return len(self._store)

    async def _sweep_forever(self):
        while True:
            await asyncio.sleep(self.ttl_seconds)
            self.sweep()

    def start_sweeper(self) -> asyncio.Task:
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.create_task(self._sweep_forever())
        return self._sweeper

    async def stop_sweeper(self):
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        try:
            await self._sweeper
        except asyncio.CancelledError:
            pass
        self._sweeper = None


# Global instance
recommendation_cache = RecommendationCache()
