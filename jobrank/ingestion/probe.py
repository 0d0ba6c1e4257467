"""HTTP re-verification of external postings."""
from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from urllib.parse import urlparse

import httpx
import structlog

from jobrank.db.repository import JobRepository
from jobrank.db.session import SessionFactory, storage_scope
from jobrank.ingestion.liveness import LivenessTracker
from jobrank.matching.types import JobPosting
from jobrank.parsing.html import page_text
from jobrank.utils.http import HttpClient

LOGGER = structlog.get_logger(__name__)

STALE_PAGE_PHRASES: tuple[str, ...] = (
    "position has been filled",
    "position filled",
    "role has been filled",
    "no longer available",
    "no longer accepting",
    "this job is no longer open",
    "this position has been closed",
    "job closed",
    "job posting expired",
    "this job has expired",
    "application deadline has passed",
    "this listing has ended",
    "requisition closed",
)

GENERIC_CAREER_PATHS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"/careers/?$",
        r"/jobs/?$",
        r"/careers/search",
        r"/jobs/search",
        r"/careers/openings",
        r"/join-us/?$",
        r"/work-with-us/?$",
        r"/opportunities/?$",
    )
)

GONE_STATUSES = {404, 410}


class ProbeVerdict(str, Enum):
    ACTIVE = "active"
    STALE = "stale"
    INCONCLUSIVE = "inconclusive"


@dataclass(slots=True)
class ProbeOutcome:
    job_id: uuid.UUID | None
    verdict: ProbeVerdict
    reason: str = ""
    http_status: int | None = None


@dataclass(slots=True)
class ProbeRunStats:
    checked: int = 0
    active: int = 0
    stale: int = 0
    inconclusive: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "checked": self.checked,
            "active": self.active,
            "stale": self.stale,
            "inconclusive": self.inconclusive,
        }


def is_generic_career_redirect(final_url: str, original_url: str) -> bool:
    """True when a posting URL landed on a much shorter careers landing path."""

    final_path = urlparse(final_url).path
    original_path = urlparse(original_url).path
    if len(final_path) >= len(original_path) * 0.5:
        return False
    return any(pattern.search(final_path) for pattern in GENERIC_CAREER_PATHS)


def classify_response(response: httpx.Response, original_url: str) -> ProbeOutcome:
    status = response.status_code
    if status in GONE_STATUSES:
        return ProbeOutcome(None, ProbeVerdict.STALE, f"HTTP {status}", status)
    if is_generic_career_redirect(str(response.url), original_url):
        return ProbeOutcome(None, ProbeVerdict.STALE, "redirected to careers page", status)
    if response.is_success:
        text = page_text(response.text)
        for phrase in STALE_PAGE_PHRASES:
            if phrase in text:
                return ProbeOutcome(None, ProbeVerdict.STALE, f"page says {phrase!r}", status)
        return ProbeOutcome(None, ProbeVerdict.ACTIVE, "", status)
    return ProbeOutcome(None, ProbeVerdict.INCONCLUSIVE, f"HTTP {status}", status)


class LivenessProbe:
    """Fetch due postings and record what their pages say.

    Network failures and unexpected statuses are inconclusive and leave the
    posting untouched.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        tracker: LivenessTracker,
        *,
        client: HttpClient | None = None,
        batch_size: int = 50,
    ) -> None:
        self.session_factory = session_factory
        self.tracker = tracker
        self.client = client or HttpClient()
        self.batch_size = batch_size

    def check(self, job: JobPosting) -> ProbeOutcome:
        if not job.external_url:
            return ProbeOutcome(job.id, ProbeVerdict.INCONCLUSIVE, "no url")
        try:
            response = self.client.get(job.external_url, max_retries=2, raise_for_status=False)
        except httpx.HTTPError as exc:
            LOGGER.info("liveness.probe.network_error", job_id=str(job.id), error=str(exc))
            return ProbeOutcome(job.id, ProbeVerdict.INCONCLUSIVE, f"network error: {exc}")
        outcome = classify_response(response, job.external_url)
        outcome.job_id = job.id
        return outcome

    def due_jobs(self, now: datetime | None = None) -> list[JobPosting]:
        now = now or self.tracker.now()
        with storage_scope(self.session_factory) as session:
            candidates = JobRepository(session).fetch_liveness_candidates()
        return [job for job in candidates if self.tracker.is_due(job, now)][: self.batch_size]

    def run(self, now: datetime | None = None) -> ProbeRunStats:
        """Probe one batch of due postings and persist the verdicts."""

        stats = ProbeRunStats()
        outcomes = [self.check(job) for job in self.due_jobs(now)]
        with storage_scope(self.session_factory) as session:
            repository = JobRepository(session)
            for outcome in outcomes:
                stats.checked += 1
                if outcome.verdict is ProbeVerdict.ACTIVE:
                    self.tracker.reconfirm(repository, outcome.job_id, is_platform=False)  # type: ignore[arg-type]
                    stats.active += 1
                elif outcome.verdict is ProbeVerdict.STALE:
                    self.tracker.mark_stale(repository, outcome.job_id)  # type: ignore[arg-type]
                    stats.stale += 1
                else:
                    stats.inconclusive += 1
        LOGGER.info("liveness.run.complete", **stats.as_dict())
        return stats
