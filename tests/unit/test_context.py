"""Tests for contextual fit scoring."""
from __future__ import annotations

import pytest

from jobrank.matching.context import (
    NEUTRAL_INDUSTRY,
    NEUTRAL_LOCATION,
    NEUTRAL_SALARY,
    NEUTRAL_WORK_MODE,
    industry_score,
    location_score,
    salary_score,
    score_context,
    work_mode_score,
)
from jobrank.matching.types import WorkMode


def test_sparse_profiles_get_neutral_scores(make_candidate, make_job) -> None:
    """Missing data on either side never pushes a sub-score below neutral."""

    candidate = make_candidate(location=None, salary_min=None, salary_max=None, work_mode=None, industry=None)
    job = make_job(location=None, work_mode=WorkMode.ONSITE)

    context = score_context(candidate, job)

    assert context.location == NEUTRAL_LOCATION
    assert context.salary == NEUTRAL_SALARY
    assert context.work_mode == NEUTRAL_WORK_MODE
    assert context.industry == NEUTRAL_INDUSTRY
    assert context.score == pytest.approx(76.0)


@pytest.mark.parametrize(
    ("candidate", "job", "expected"),
    [
        ("Austin, TX", "Austin, TX", 100.0),
        ("Brooklyn, NY", "Manhattan, NY", 80.0),
        ("Oakland, CA", "San Jose, CA", 80.0),
        ("Sacramento, CA", "San Jose, CA", 60.0),
        ("Austin, TX", "Dallas, TX", 60.0),
        ("Austin, TX", "Berlin, Germany", 30.0),
        ("Austin, TX", "Remote - US", 95.0),
    ],
)
def test_location_tiers(candidate: str, job: str, expected: float) -> None:
    """Exact, metro, region and remote locations score in descending tiers."""

    assert location_score(candidate, job, None) == expected


def test_remote_work_mode_overrides_location() -> None:
    """A remote posting fits wherever the candidate lives."""

    assert location_score("Austin, TX", "Berlin, Germany", WorkMode.REMOTE) == 95.0


def test_salary_overlap_and_shortfall() -> None:
    """Headroom raises the score; a ceiling below the floor lowers it."""

    assert salary_score(120000, None, None, 180000) == pytest.approx(92.5)
    assert salary_score(150000, None, None, 120000) == pytest.approx(60.0)
    assert salary_score(None, None, 100000, 120000) == NEUTRAL_SALARY


def test_work_mode_compatibility() -> None:
    """Remote seekers tolerate hybrid far better than on-site."""

    assert work_mode_score(WorkMode.REMOTE, WorkMode.REMOTE) == 100.0
    assert work_mode_score(WorkMode.REMOTE, WorkMode.HYBRID) > work_mode_score(WorkMode.REMOTE, WorkMode.ONSITE)


def test_related_industries() -> None:
    """Industries in one family score between identical and unrelated."""

    assert industry_score("fintech", "banking") == 75.0
    assert industry_score("software", "software") == 100.0
    assert industry_score("software", "agriculture") == 50.0
