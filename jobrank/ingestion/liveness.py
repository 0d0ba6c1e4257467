"""Trust scores by source and liveness state transitions."""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Callable

import structlog

from jobrank.matching.types import PLATFORM_SOURCE, JobPosting, LivenessStatus
from jobrank.utils.time import age_in_days, as_utc, now_utc

if TYPE_CHECKING:
    from jobrank.db.repository import JobRepository

LOGGER = structlog.get_logger(__name__)

PLATFORM_TRUST_SCORE = 100
DEFAULT_TRUST_SCORE = 50

SOURCE_TRUST_SCORES: dict[str, int] = {
    PLATFORM_SOURCE: PLATFORM_TRUST_SCORE,
    "greenhouse": 95,
    "lever": 95,
    "company-api": 95,
    "workday": 90,
    "usajobs": 85,
    "remoteok": 75,
    "jsearch": 70,
    "themuse": 70,
    "arbeitnow": 65,
}

# (posting age below N days, hours between checks); older postings use the last tier
CHECK_INTERVALS: tuple[tuple[float, int], ...] = ((7, 24), (30, 48), (float("inf"), 72))


def trust_for_source(source: str) -> int:
    """Return the fixed trust score for a feed; unknown feeds get 50."""

    return SOURCE_TRUST_SCORES.get((source or "").strip().lower(), DEFAULT_TRUST_SCORE)


def effective_liveness(job: JobPosting, now: datetime) -> LivenessStatus:
    """Stored liveness, degraded to stale once a non-platform job is past ``expires_at``."""

    expires_at = as_utc(job.expires_at)
    if not job.is_platform and expires_at is not None and expires_at <= as_utc(now):
        return LivenessStatus.STALE
    return job.liveness_status


@dataclass(slots=True)
class InitialState:
    trust_score: int
    liveness_status: LivenessStatus
    last_liveness_check: datetime | None
    expires_at: datetime | None


class LivenessTracker:
    """Owns every write to a job's trust and liveness fields."""

    def __init__(self, *, expiry_days: int = 60, clock: Callable[[], datetime] = now_utc) -> None:
        self.expiry_days = expiry_days
        self._clock = clock

    def now(self) -> datetime:
        return self._clock()

    def initial_state(self, source: str) -> InitialState:
        """Trust and liveness for a newly inserted posting.

        External postings start ``unknown`` and expire after ``expiry_days``;
        platform postings are authored in-house, start ``active`` and never expire.
        """

        now = self.now()
        if source == PLATFORM_SOURCE:
            return InitialState(PLATFORM_TRUST_SCORE, LivenessStatus.ACTIVE, now, None)
        return InitialState(
            trust_for_source(source),
            LivenessStatus.UNKNOWN,
            None,
            now + timedelta(days=self.expiry_days),
        )

    def reconfirm(self, repository: "JobRepository", job_id: uuid.UUID, *, is_platform: bool) -> None:
        """Record that a known posting was seen again.

        A single idempotent UPDATE: liveness becomes ``active``, the check time
        becomes now and external postings get a fresh expiry. Trust score and
        posting status are left alone.
        """

        now = self.now()
        expires_at = None if is_platform else now + timedelta(days=self.expiry_days)
        repository.update_job_liveness(job_id, LivenessStatus.ACTIVE, now, expires_at=expires_at)
        LOGGER.debug("liveness.reconfirmed", job_id=str(job_id))

    def mark_stale(self, repository: "JobRepository", job_id: uuid.UUID) -> None:
        repository.update_job_liveness(job_id, LivenessStatus.STALE, self.now())
        LOGGER.info("liveness.stale", job_id=str(job_id))

    def is_due(self, job: JobPosting, now: datetime | None = None) -> bool:
        """Whether an external posting is due for a liveness probe.

        Never-checked postings are always due; otherwise postings younger than
        a week are re-checked daily, up to a month every two days, and older
        ones every three days.
        """

        if job.is_platform:
            return False
        now = now or self.now()
        last_check = as_utc(job.last_liveness_check)
        if last_check is None:
            return True
        reference = job.posted_at or last_check
        age = age_in_days(reference, now)
        for max_age, hours in CHECK_INTERVALS:
            if age < max_age:
                return now - last_check >= timedelta(hours=hours)
        return True
