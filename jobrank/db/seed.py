"""Seed routines for a demo database."""
from __future__ import annotations

from datetime import timedelta

import structlog
from sqlalchemy import select

from jobrank.db.models import Base, CandidateRow
from jobrank.db.repository import JobRepository
from jobrank.db.session import get_engine, session_scope
from jobrank.ingestion.dedup import IngestStats
from jobrank.matching.engine import MatchingEngine, default_engine
from jobrank.matching.types import CandidateProfile, WorkMode
from jobrank.utils.time import now_utc

LOGGER = structlog.get_logger(__name__)

DEMO_CANDIDATES: tuple[tuple[str, CandidateProfile], ...] = (
    (
        "Ada Frontend",
        CandidateProfile(
            id=0,
            title="Senior Frontend Engineer",
            skills=["React", "TypeScript", "CSS", "GraphQL"],
            experience="Senior engineer with 7 years building React applications.",
            industry="software",
            work_mode=WorkMode.REMOTE,
            salary_min=120000,
            salary_max=160000,
            location="San Francisco, CA",
        ),
    ),
    (
        "Grace Data",
        CandidateProfile(
            id=0,
            title="Data Engineer",
            skills=["Python", "SQL", "Spark", "AWS"],
            experience="4 years of data pipeline work in fintech.",
            industry="fintech",
            work_mode=WorkMode.HYBRID,
            salary_min=110000,
            location="New York, NY",
        ),
    ),
)


def demo_jobs() -> list[dict[str, object]]:
    """Scraper-shaped records covering platform, direct-company and aggregator sources."""

    posted = now_utc() - timedelta(days=2)
    return [
        {
            "title": "Senior React Engineer",
            "company": "Acme",
            "source": "platform",
            "externalId": "acme-react-1",
            "description": "<p>Build our design system.</p><ul><li>React</li><li>TypeScript</li></ul>",
            "skills": ["React", "TypeScript", "CSS"],
            "requirements": ["5+ years of experience with React"],
            "workType": "remote",
            "salaryMin": 140000,
            "salaryMax": 180000,
            "location": "Remote",
            "industry": "software",
            "postedDate": posted.isoformat(),
        },
        {
            "title": "Data Engineer",
            "company": "Ledger Co",
            "source": "greenhouse",
            "externalId": "gh-4411",
            "externalUrl": "https://boards.greenhouse.io/ledger/jobs/4411",
            "description": "Own batch pipelines. Pay: $120k - $150k.",
            "skills": "Python, SQL, Airflow",
            "requirements": ["3+ years experience with Python"],
            "workType": "hybrid",
            "location": "Brooklyn, NY",
            "industry": "fintech",
            "postedDate": posted.isoformat(),
        },
        {
            "title": "Frontend Developer",
            "company": "Agency",
            "source": "arbeitnow",
            "externalId": "an-77",
            "externalUrl": "https://www.arbeitnow.com/jobs/an-77",
            "description": "Vue and JavaScript for client sites.",
            "skills": ["Vue", "JavaScript"],
            "location": "Berlin, Germany",
            "postedDate": (posted - timedelta(days=20)).isoformat(),
        },
    ]


def seed_demo_data(engine: MatchingEngine | None = None) -> IngestStats:
    """Create tables, then add demo candidates (once) and demo jobs."""

    Base.metadata.create_all(get_engine())
    with session_scope() as session:
        repository = JobRepository(session)
        existing = set(session.execute(select(CandidateRow.name)).scalars())
        for name, profile in DEMO_CANDIDATES:
            if name not in existing:
                repository.save_candidate_profile(name, profile)
    stats = (engine or default_engine()).ingest(demo_jobs())
    LOGGER.info("seed.complete", **stats.as_dict())
    return stats


def main() -> None:
    """Entry-point for CLI execution."""

    seed_demo_data()


if __name__ == "__main__":
    main()
