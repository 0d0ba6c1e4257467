"""In-process entry points used by the API, tasks and CLI."""
from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime
from functools import lru_cache
from typing import Any, Callable, Iterable, Mapping

import structlog

from jobrank.core.config import get_settings
from jobrank.core.settings import AppSettings
from jobrank.db.repository import JobRepository
from jobrank.db.session import SessionFactory, storage_scope
from jobrank.ingestion.dedup import IngestionDeduplicator, IngestStats
from jobrank.ingestion.liveness import LivenessTracker
from jobrank.ingestion.probe import LivenessProbe, ProbeRunStats
from jobrank.matching.cache import MatchResultCache
from jobrank.matching.filters import RankingFilters, eligible_for_ranking, matches_filters
from jobrank.matching.ranking import HybridRanker
from jobrank.matching.types import MatchResult
from jobrank.utils.http import HttpClient
from jobrank.utils.time import now_utc

LOGGER = structlog.get_logger(__name__)


class MatchingEngine:
    """Ranking, ingestion and expiry over one store and one result cache.

    Ranking reads never swallow storage failures: ``StorageUnavailable``
    propagates instead of an empty list.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        settings: AppSettings,
        *,
        cache: MatchResultCache | None = None,
        ranker: HybridRanker | None = None,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self.session_factory = session_factory
        self.settings = settings
        self._clock = clock
        self.cache = cache or MatchResultCache(
            ttl_seconds=settings.cache_ttl_seconds,
            max_entries=settings.cache_max_entries,
            max_results=settings.cache_max_results,
        )
        self.ranker = ranker or HybridRanker(
            skill_mode=settings.skill_match_mode,
            half_life_days=settings.recency_half_life_days,
            stale_factor=settings.stale_liveness_factor,
            clock=clock,
        )
        self.tracker = LivenessTracker(expiry_days=settings.job_expiry_days, clock=clock)
        self.deduplicator = IngestionDeduplicator(
            session_factory, self.tracker, chunk_size=settings.ingest_chunk_size
        )

    def filters(self, **values: Any) -> RankingFilters:
        """Build request filters, clamping the page size to the cache's result cap."""

        limit = values.pop("limit", None) or self.settings.default_page_size
        limit = max(1, min(int(limit), self.cache.max_results))
        return RankingFilters(limit=limit, **values)

    def rank_jobs_for_candidate(
        self, candidate_id: int, filters: RankingFilters | None = None
    ) -> list[MatchResult]:
        """Ranked, threshold-filtered jobs for one candidate, served from cache within the TTL."""

        filters = filters or self.filters()
        if filters.limit > self.cache.max_results:
            filters = replace(filters, limit=self.cache.max_results)
        key = self.cache.key(candidate_id, filters)
        cached = self.cache.get(key)
        if cached is not None:
            LOGGER.debug("rank.cache.hit", candidate_id=candidate_id)
            return cached

        now = self._clock()
        with storage_scope(self.session_factory) as session:
            repository = JobRepository(session)
            candidate = repository.fetch_candidate_profile(candidate_id)
            jobs = repository.fetch_active_jobs(filters, now)
            signals = repository.fetch_interactions(candidate_id)

        pool = [job for job in jobs if eligible_for_ranking(job, now) and matches_filters(job, filters)]
        ranked = self.ranker.rank_jobs(candidate, pool, signals, now=now)[: filters.limit]
        self.cache.set(key, ranked)
        LOGGER.info("rank.jobs.complete", candidate_id=candidate_id, pool=len(pool), returned=len(ranked))
        return ranked

    def rank_candidates_for_job(self, job_id: uuid.UUID, *, limit: int | None = None) -> list[MatchResult]:
        """Ranked candidates for one job; not cached."""

        now = self._clock()
        with storage_scope(self.session_factory) as session:
            repository = JobRepository(session)
            job = repository.fetch_job(job_id)
            candidates = repository.fetch_candidate_profiles()
            signals = {candidate.id: repository.fetch_interactions(candidate.id) for candidate in candidates}

        ranked = self.ranker.rank_candidates(job, candidates, signals, now=now)
        if limit is not None:
            ranked = ranked[:limit]
        LOGGER.info("rank.candidates.complete", job_id=str(job_id), returned=len(ranked))
        return ranked

    def ingest(self, batch: Iterable[Mapping[str, Any]]) -> IngestStats:
        return self.deduplicator.ingest(batch)

    def expire_stale_jobs(self) -> int:
        """Close external postings past their expiry; returns how many were closed."""

        now = self._clock()
        with storage_scope(self.session_factory) as session:
            closed = JobRepository(session).sweep_expired(now)
        if closed:
            self.cache.clear()
        LOGGER.info("jobs.expired", count=closed)
        return closed

    def verify_liveness(self, client: HttpClient | None = None) -> ProbeRunStats:
        """Probe the external postings that are due for a liveness check."""

        owned = client is None
        client = client or HttpClient(self.settings.http_timeout, self.settings.http_user_agent)
        probe = LivenessProbe(
            self.session_factory, self.tracker, client=client, batch_size=self.settings.liveness_batch_size
        )
        try:
            stats = probe.run()
        finally:
            if owned:
                client.close()
        if stats.stale:
            self.cache.clear()
        return stats


@lru_cache(maxsize=1)
def default_engine() -> MatchingEngine:
    """Process-wide engine over the configured database."""

    from jobrank.db.session import get_session_factory

    return MatchingEngine(get_session_factory(), get_settings())
