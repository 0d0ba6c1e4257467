"""Per-candidate TTL cache of ranked match results."""
from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Hashable, Sequence

import structlog
from cachetools import TTLCache

from jobrank.core.errors import CacheCorruption
from jobrank.matching.filters import RankingFilters
from jobrank.matching.types import MatchResult

LOGGER = structlog.get_logger(__name__)

CacheKey = tuple[int, str]


@dataclass(frozen=True, slots=True)
class CacheEntry:
    results: tuple[MatchResult, ...]
    created_at: float


class MatchResultCache:
    """Bounded TTL cache keyed by (candidate id, filter signature).

    Entries live for ``ttl_seconds``: an entry written at ``T`` is served
    while ``now - T < ttl`` and evicted on the first access after that.
    Expired entries are also swept on every write. At most ``max_entries``
    keys are held (least recently used go first) and each stored list is
    truncated to ``max_results``. All access goes through one lock, so the
    TTL check and the read or eviction are atomic.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = 60.0,
        max_entries: int = 1024,
        max_results: int = 50,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self.max_results = max_results
        self._timer = timer
        self._entries: TTLCache[Hashable, CacheEntry] = TTLCache(
            maxsize=max_entries, ttl=ttl_seconds, timer=timer
        )
        self._lock = threading.Lock()

    @staticmethod
    def key(candidate_id: int, filters: RankingFilters) -> CacheKey:
        return (candidate_id, filters.signature())

    def _validate(self, entry: object, now: float) -> CacheEntry:
        if not isinstance(entry, CacheEntry):
            raise CacheCorruption(f"unexpected cache value {type(entry).__name__}")
        if not isinstance(entry.results, tuple) or not all(isinstance(item, MatchResult) for item in entry.results):
            raise CacheCorruption("cached results are not match results")
        if entry.created_at > now:
            raise CacheCorruption("cache entry created in the future")
        return entry

    def get(self, key: CacheKey) -> list[MatchResult] | None:
        """Return the cached results for ``key``, or ``None`` on a miss."""

        with self._lock:
            now = self._timer()
            self._entries.expire(now)
            raw = self._entries.get(key)
            if raw is None:
                return None
            try:
                entry = self._validate(raw, now)
            except CacheCorruption as exc:
                self._entries.pop(key, None)
                LOGGER.warning("cache.corrupt", key=str(key), error=str(exc))
                return None
            if now - entry.created_at >= self.ttl_seconds:
                self._entries.pop(key, None)
                return None
            return list(entry.results)

    def set(self, key: CacheKey, results: Sequence[MatchResult]) -> None:
        """Store the top ``max_results`` results under ``key``, stamped with now."""

        with self._lock:
            now = self._timer()
            self._entries.expire(now)
            self._entries[key] = CacheEntry(tuple(results[: self.max_results]), now)

    def sweep(self) -> int:
        """Remove all expired entries; returns how many were removed."""

        with self._lock:
            # currsize expires on read, so count the raw entries instead
            before = len(self._entries)
            self._entries.expire(self._timer())
            return before - len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            self._entries.expire(self._timer())
            return len(self._entries)
