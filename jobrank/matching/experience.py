"""Experience and seniority scoring."""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum

from jobrank.utils.text import contains_phrase


class Seniority(IntEnum):
    ENTRY = 0
    MID = 1
    SENIOR = 2
    EXECUTIVE = 3


LEVEL_KEYWORDS: dict[Seniority, tuple[str, ...]] = {
    Seniority.ENTRY: ("entry", "entry-level", "junior", "associate", "graduate", "intern", "internship"),
    Seniority.MID: ("mid", "mid-level", "intermediate", "experienced", "professional"),
    Seniority.SENIOR: ("senior", "sr", "lead", "principal", "staff", "expert"),
    Seniority.EXECUTIVE: ("director", "vp", "vice president", "executive", "head of", "chief", "cto", "ceo"),
}

UNDER_QUALIFIED_PENALTY = 30
OVER_QUALIFIED_PENALTY = 15
OVER_QUALIFIED_FLOOR = 60
YEARS_BONUS = 10
YEARS_SHORTFALL_PENALTY = 10

_YEARS_PATTERN = re.compile(r"(\d+)\s*\+?\s*(?:years?|yrs?)\b", re.IGNORECASE)
_REQUIRED_YEARS_PATTERN = re.compile(
    r"(\d+)\s*\+?\s*(?:years?|yrs?)\s*(?:of\s*)?(?:[a-z.+#]+\s+)?(?:experience|exp)\b",
    re.IGNORECASE,
)


@dataclass(slots=True)
class ExperienceMatch:
    score: float
    candidate_level: Seniority
    job_level: Seniority
    candidate_years: int
    required_years: int


def extract_years(text: str) -> int:
    """Return the first ``<N> years`` figure in ``text``, or 0."""

    match = _YEARS_PATTERN.search(text or "")
    return int(match.group(1)) if match else 0


def extract_required_years(text: str) -> int:
    """Return the years of experience a job asks for (``5+ years of experience``), or 0."""

    match = _REQUIRED_YEARS_PATTERN.search(text or "")
    return int(match.group(1)) if match else 0


def level_for_years(years: int) -> Seniority:
    if years <= 2:
        return Seniority.ENTRY
    if years <= 5:
        return Seniority.MID
    if years <= 10:
        return Seniority.SENIOR
    return Seniority.EXECUTIVE


def detect_level(text: str, years: int) -> Seniority:
    """Seniority from keywords when present (the highest mentioned wins), else from years."""

    mentioned = [
        level
        for level, keywords in LEVEL_KEYWORDS.items()
        if any(contains_phrase(text or "", keyword) for keyword in keywords)
    ]
    # highest level mentioned wins, so "senior, mentors juniors" stays senior
    if mentioned:
        return max(mentioned)
    return level_for_years(years)


def score_experience(candidate_experience: str, job_text: str) -> ExperienceMatch:
    """Score how well a candidate's seniority fits a job, on a 0-100 scale.

    Under-qualification costs 30 points per level; over-qualification costs
    15 per level but never drops the score below 60. An explicit years
    requirement adds 10 when met and removes 10 per missing year.
    """

    candidate_years = extract_years(candidate_experience)
    required_years = extract_required_years(job_text)
    candidate_level = detect_level(candidate_experience, candidate_years)
    job_level = detect_level(job_text, required_years)

    score = 100.0
    gap = int(job_level) - int(candidate_level)
    if gap > 0:
        score = 100.0 - UNDER_QUALIFIED_PENALTY * gap
    elif gap < 0:
        score = max(float(OVER_QUALIFIED_FLOOR), 100.0 + OVER_QUALIFIED_PENALTY * gap)

    if required_years > 0:
        if candidate_years >= required_years:
            score += YEARS_BONUS
        else:
            score -= YEARS_SHORTFALL_PENALTY * (required_years - candidate_years)

    return ExperienceMatch(
        score=max(0.0, min(100.0, score)),
        candidate_level=candidate_level,
        job_level=job_level,
        candidate_years=candidate_years,
        required_years=required_years,
    )
