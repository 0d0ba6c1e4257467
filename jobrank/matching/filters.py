"""Request filters and ranking-pool eligibility."""
from __future__ import annotations

import hashlib
import json
from dataclasses import asdict, dataclass
from datetime import datetime

from jobrank.ingestion.liveness import effective_liveness
from jobrank.matching.types import JobPosting, JobStatus, LivenessStatus, WorkMode
from jobrank.parsing.location import parse_location
from jobrank.utils.text import normalize_term

RANKABLE_LIVENESS = frozenset({LivenessStatus.ACTIVE, LivenessStatus.UNKNOWN})


@dataclass(frozen=True, slots=True)
class RankingFilters:
    """Parameters of one ranking request; part of the cache key."""

    work_mode: WorkMode | None = None
    location: str | None = None
    min_salary: int | None = None
    limit: int = 20

    def signature(self) -> str:
        """Stable hash of the filter values."""

        payload = asdict(self)
        payload["work_mode"] = self.work_mode.value if self.work_mode else None
        payload["location"] = normalize_term(self.location) if self.location else None
        encoded = json.dumps(payload, sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(encoded.encode("utf-8")).hexdigest()[:16]


def eligible_for_ranking(job: JobPosting, now: datetime) -> bool:
    """Active, unexpired postings whose liveness is ``active`` or ``unknown``."""

    if job.status is not JobStatus.ACTIVE:
        return False
    return effective_liveness(job, now) in RANKABLE_LIVENESS


def matches_filters(job: JobPosting, filters: RankingFilters) -> bool:
    """Apply the caller's optional work-mode, location and salary filters."""

    if filters.work_mode is not None and job.work_mode is not filters.work_mode:
        return False
    if filters.location:
        wanted = normalize_term(filters.location)
        job_location = parse_location(job.location)
        if not job_location.is_remote and wanted not in job_location.normalized:
            return False
    if filters.min_salary is not None:
        ceiling = job.salary_max or job.salary_min
        if ceiling is not None and ceiling < filters.min_salary:
            return False
    return True

