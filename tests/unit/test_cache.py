"""Tests for the per-candidate result cache."""
from __future__ import annotations

import threading
import uuid

import pytest

pytest.importorskip("cachetools")

from jobrank.matching.cache import CacheEntry, MatchResultCache
from jobrank.matching.filters import RankingFilters
from jobrank.matching.types import MatchResult


class FakeTimer:
    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now


def _results(count: int) -> list[MatchResult]:
    return [
        MatchResult(
            candidate_id=1,
            job_id=uuid.uuid4(),
            skill_score=50.0,
            experience_score=50.0,
            context_score=50.0,
            semantic_score=0.5,
            recency_score=0.5,
            liveness_score=0.5,
            personalization_score=0.5,
            final_score=0.9 - index * 0.001,
            matched_skills=(),
            explanation="",
            is_verified_active=False,
            is_direct_from_company=False,
            trust_score=50,
        )
        for index in range(count)
    ]


def test_entries_live_exactly_one_ttl() -> None:
    """An entry written at T is served at T+TTL-1 and gone at T+TTL+1."""

    timer = FakeTimer()
    cache = MatchResultCache(ttl_seconds=60, timer=timer)
    key = cache.key(1, RankingFilters())
    results = _results(3)

    cache.set(key, results)
    timer.now += 59
    assert cache.get(key) == results

    timer.now += 2
    assert cache.get(key) is None
    assert len(cache) == 0


def test_filters_are_part_of_the_key() -> None:
    """Different filters for one candidate do not share an entry."""

    cache = MatchResultCache(timer=FakeTimer())
    remote = cache.key(1, RankingFilters(location="Remote"))
    berlin = cache.key(1, RankingFilters(location="Berlin"))

    cache.set(remote, _results(1))

    assert cache.get(berlin) is None
    assert cache.key(1, RankingFilters(location="  remote ")) == remote


def test_stored_results_are_capped() -> None:
    """Each entry keeps at most max_results results."""

    cache = MatchResultCache(max_results=5, timer=FakeTimer())
    key = cache.key(1, RankingFilters())

    cache.set(key, _results(20))

    assert len(cache.get(key)) == 5


def test_entry_count_is_bounded() -> None:
    """The oldest keys are evicted once max_entries is reached."""

    cache = MatchResultCache(max_entries=2, timer=FakeTimer())
    for candidate_id in (1, 2, 3):
        cache.set(cache.key(candidate_id, RankingFilters()), _results(1))

    assert len(cache) == 2
    assert cache.get(cache.key(1, RankingFilters())) is None


def test_corrupt_entries_are_treated_as_misses() -> None:
    """Values that fail validation are dropped and reported as misses."""

    timer = FakeTimer()
    cache = MatchResultCache(timer=timer)
    garbage = cache.key(1, RankingFilters())
    future = cache.key(2, RankingFilters())

    cache._entries[garbage] = "not an entry"
    cache._entries[future] = CacheEntry(tuple(_results(1)), timer.now + 500)

    assert cache.get(garbage) is None
    assert cache.get(future) is None
    assert len(cache) == 0


def test_sweep_drops_only_expired_entries() -> None:
    """Sweeping removes entries past the TTL and keeps fresh ones."""

    timer = FakeTimer()
    cache = MatchResultCache(ttl_seconds=10, timer=timer)
    cache.set(cache.key(1, RankingFilters()), _results(1))
    cache.set(cache.key(1, RankingFilters(limit=5)), _results(1))
    cache.set(cache.key(2, RankingFilters()), _results(1))

    timer.now += 6
    cache.set(cache.key(3, RankingFilters()), _results(1))
    timer.now += 5

    assert cache.sweep() == 3
    assert len(cache) == 1


def test_ttl_must_be_positive() -> None:
    """A zero TTL would make every write a miss."""

    with pytest.raises(ValueError):
        MatchResultCache(ttl_seconds=0)


def test_concurrent_access_is_safe() -> None:
    """Parallel readers and writers never see a partial entry."""

    cache = MatchResultCache(max_entries=8)
    errors: list[BaseException] = []

    def worker(candidate_id: int) -> None:
        try:
            key = cache.key(candidate_id % 4, RankingFilters())
            for _ in range(200):
                cache.set(key, _results(3))
                hit = cache.get(key)
                assert hit is None or len(hit) == 3
                cache.sweep()
        except BaseException as exc:  # noqa: BLE001
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(index,)) for index in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
