"""Shared fixtures for the jobrank test suite."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import pytest

NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that tests can move forward."""

    def __init__(self, start: datetime = NOW) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **delta: float) -> None:
        self.current += timedelta(**delta)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session_factory(tmp_path):
    """Session factory over a fresh SQLite file with the schema created."""

    pytest.importorskip("sqlalchemy")
    from jobrank.db.models import Base
    from jobrank.db.session import build_engine, build_session_factory

    engine = build_engine(f"sqlite:///{tmp_path / 'jobrank.db'}")
    Base.metadata.create_all(engine)
    yield build_session_factory(engine)
    engine.dispose()


@pytest.fixture
def matching_engine(session_factory, clock):
    """Engine over the temporary database, driven by the fake clock."""

    from jobrank.core.settings import AppSettings
    from jobrank.matching.engine import MatchingEngine

    return MatchingEngine(session_factory, AppSettings(), clock=clock)


@pytest.fixture
def make_job() -> Callable[..., Any]:
    """Factory for in-memory job postings with sensible defaults."""

    import uuid

    from jobrank.matching.types import JobPosting, LivenessStatus

    def _make(**overrides: Any) -> JobPosting:
        values: dict[str, Any] = {
            "id": uuid.uuid4(),
            "title": "Senior React Engineer",
            "company": "Acme",
            "source": "greenhouse",
            "external_id": f"ext-{uuid.uuid4().hex[:8]}",
            "skills": ["React", "TypeScript", "CSS"],
            "requirements": ["5+ years of experience with React"],
            "trust_score": 95,
            "liveness_status": LivenessStatus.ACTIVE,
            "posted_at": NOW - timedelta(days=2),
            "expires_at": NOW + timedelta(days=30),
        }
        values.update(overrides)
        return JobPosting(**values)

    return _make


@pytest.fixture
def make_candidate() -> Callable[..., Any]:
    from jobrank.matching.types import CandidateProfile, WorkMode

    def _make(**overrides: Any) -> CandidateProfile:
        values: dict[str, Any] = {
            "id": 1,
            "skills": ["React", "TypeScript"],
            "experience": "Senior engineer with 7 years building React applications.",
            "industry": "software",
            "work_mode": WorkMode.REMOTE,
            "salary_min": 120000,
            "salary_max": 160000,
            "location": "San Francisco, CA",
        }
        values.update(overrides)
        return CandidateProfile(**values)

    return _make


def job_record(**overrides: Any) -> dict[str, Any]:
    """Scraper-shaped record used by ingestion tests."""

    record: dict[str, Any] = {
        "title": "Senior React Engineer",
        "company": "Acme",
        "source": "greenhouse",
        "externalId": "gh-1",
        "externalUrl": "https://boards.greenhouse.io/acme/jobs/1",
        "description": "<p>Build our design system.</p>",
        "skills": ["React", "TypeScript", "CSS"],
        "requirements": ["5+ years of experience with React"],
        "workType": "remote",
        "salaryMin": 140000,
        "salaryMax": 180000,
        "location": "Remote",
        "industry": "software",
        "postedDate": (NOW - timedelta(days=2)).isoformat(),
    }
    record.update(overrides)
    return record


@pytest.fixture
def record_factory() -> Callable[..., dict[str, Any]]:
    return job_record
