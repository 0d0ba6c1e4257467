"""Contextual fit: location, salary band, work mode and industry."""
from __future__ import annotations

from dataclasses import dataclass

from jobrank.matching.types import CandidateProfile, JobPosting, WorkMode
from jobrank.parsing.location import parse_location
from jobrank.utils.text import contains_phrase, normalize_term

NEUTRAL_LOCATION = 70.0
NEUTRAL_SALARY = 80.0
NEUTRAL_WORK_MODE = 80.0
NEUTRAL_INDUSTRY = 80.0

LOCATION_WEIGHT = 0.4
SALARY_WEIGHT = 0.25
WORK_MODE_WEIGHT = 0.25
INDUSTRY_WEIGHT = 0.1

METRO_AREAS: dict[str, tuple[str, ...]] = {
    "san francisco": ("san francisco", "sf", "bay area", "silicon valley", "palo alto", "mountain view", "oakland", "san jose"),
    "new york": ("new york", "nyc", "manhattan", "brooklyn", "queens", "jersey city"),
    "los angeles": ("los angeles", "la", "hollywood", "santa monica", "pasadena"),
    "chicago": ("chicago", "chi", "evanston"),
    "boston": ("boston", "cambridge", "somerville"),
    "seattle": ("seattle", "bellevue", "redmond", "kirkland"),
}

RELATED_INDUSTRIES: dict[str, tuple[str, ...]] = {
    "technology": ("technology", "software", "tech", "it", "saas", "fintech", "edtech"),
    "finance": ("finance", "fintech", "banking", "investment", "insurance"),
    "healthcare": ("healthcare", "healthtech", "medical", "pharma", "biotech"),
    "retail": ("retail", "e-commerce", "ecommerce", "consumer", "fashion"),
    "media": ("media", "advertising", "marketing", "entertainment", "gaming"),
}

# candidate preference -> job mode -> score; identical modes score 100
WORK_MODE_COMPATIBILITY: dict[WorkMode, dict[WorkMode, float]] = {
    WorkMode.REMOTE: {WorkMode.HYBRID: 85.0, WorkMode.ONSITE: 30.0},
    WorkMode.HYBRID: {WorkMode.REMOTE: 90.0, WorkMode.ONSITE: 70.0},
    WorkMode.ONSITE: {WorkMode.HYBRID: 60.0, WorkMode.REMOTE: 20.0},
}


@dataclass(slots=True)
class ContextMatch:
    location: float
    salary: float
    work_mode: float
    industry: float

    @property
    def score(self) -> float:
        """Weighted 0-100 context score."""

        return (
            LOCATION_WEIGHT * self.location
            + SALARY_WEIGHT * self.salary
            + WORK_MODE_WEIGHT * self.work_mode
            + INDUSTRY_WEIGHT * self.industry
        )


def _metro(location: str) -> set[str]:
    return {
        metro for metro, aliases in METRO_AREAS.items() if any(contains_phrase(location, alias) for alias in aliases)
    }


def location_score(candidate_location: str | None, job_location: str | None, job_work_mode: WorkMode | None) -> float:
    job_parts = parse_location(job_location)
    if job_work_mode is WorkMode.REMOTE or job_parts.is_remote:
        return 95.0
    candidate_parts = parse_location(candidate_location)
    if not candidate_parts.normalized or not job_parts.normalized:
        return NEUTRAL_LOCATION
    if candidate_parts.normalized == job_parts.normalized:
        return 100.0
    if candidate_parts.normalized in job_parts.normalized or job_parts.normalized in candidate_parts.normalized:
        return 90.0
    if candidate_parts.city == job_parts.city:
        return 85.0
    # metro is checked before region: Oakland and San Jose share a metro, not just CA
    if _metro(candidate_parts.normalized) & _metro(job_parts.normalized):
        return 80.0
    if candidate_parts.region and candidate_parts.region == job_parts.region:
        return 60.0
    return 30.0


def salary_score(
    candidate_min: int | None,
    candidate_max: int | None,
    job_min: int | None,
    job_max: int | None,
) -> float:
    if candidate_min and job_max:
        if candidate_min <= job_max:
            headroom = (job_max - candidate_min) / candidate_min
            return min(100.0, 85.0 + headroom * 15.0)
        shortfall = (candidate_min - job_max) / candidate_min
        return max(0.0, 80.0 - shortfall * 100.0)
    if candidate_max and job_min:
        return 90.0 if candidate_max >= job_min else 40.0
    return NEUTRAL_SALARY


def work_mode_score(candidate_mode: WorkMode | None, job_mode: WorkMode | None) -> float:
    if candidate_mode is None or job_mode is None:
        return NEUTRAL_WORK_MODE
    if candidate_mode is job_mode:
        return 100.0
    return WORK_MODE_COMPATIBILITY[candidate_mode][job_mode]


def industry_score(candidate_industry: str | None, job_industry: str | None) -> float:
    candidate = normalize_term(candidate_industry or "")
    job = normalize_term(job_industry or "")
    if not candidate or not job:
        return NEUTRAL_INDUSTRY
    if candidate == job:
        return 100.0
    for members in RELATED_INDUSTRIES.values():
        if any(contains_phrase(candidate, term) for term in members) and any(
            contains_phrase(job, term) for term in members
        ):
            return 75.0
    return 50.0


def score_context(candidate: CandidateProfile, job: JobPosting) -> ContextMatch:
    """Score the non-skill fit between a candidate and a job.

    Every sub-score falls back to its neutral value when either side lacks
    the data, so sparse profiles are never pushed below that floor.
    """

    return ContextMatch(
        location=location_score(candidate.location, job.location, job.work_mode),
        salary=salary_score(candidate.salary_min, candidate.salary_max, job.salary_min, job.salary_max),
        work_mode=work_mode_score(candidate.work_mode, job.work_mode),
        industry=industry_score(candidate.industry, job.industry),
    )
