"""Persistence boundary between the matching core and the relational store."""
from __future__ import annotations

import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator

import structlog
from sqlalchemy import insert, or_, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from jobrank.core.errors import IngestionRecordError, RecordNotFound, StorageUnavailable
from jobrank.db.models import CandidateRow, InteractionRow, JobRow
from jobrank.matching.filters import RankingFilters
from jobrank.matching.personalization import InteractionKind, InteractionSignal
from jobrank.matching.types import (
    PLATFORM_SOURCE,
    CandidateProfile,
    JobPosting,
    JobStatus,
    LivenessStatus,
    WorkMode,
)
from jobrank.utils.time import as_utc

LOGGER = structlog.get_logger(__name__)

_RANKABLE_LIVENESS = (LivenessStatus.ACTIVE.value, LivenessStatus.UNKNOWN.value)


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    """Re-raise driver and ORM failures as ``StorageUnavailable``."""

    try:
        yield
    except SQLAlchemyError as exc:
        LOGGER.error("storage.unavailable", operation=operation, error=str(exc))
        raise StorageUnavailable(f"{operation} failed") from exc


def job_from_row(row: JobRow) -> JobPosting:
    return JobPosting(
        id=row.id,
        title=row.title,
        company=row.company,
        source=row.source,
        description=row.description or "",
        skills=list(row.skills or []),
        requirements=list(row.requirements or []),
        work_mode=WorkMode.parse(row.work_mode),
        salary_min=row.salary_min,
        salary_max=row.salary_max,
        location=row.location,
        industry=row.industry,
        external_id=row.external_id,
        external_url=row.external_url,
        trust_score=row.trust_score,
        liveness_status=LivenessStatus(row.liveness_status),
        last_liveness_check=as_utc(row.last_liveness_check),
        expires_at=as_utc(row.expires_at),
        status=JobStatus(row.status),
        posted_at=as_utc(row.posted_at),
    )


def candidate_from_row(row: CandidateRow) -> CandidateProfile:
    return CandidateProfile(
        id=row.id,
        skills=list(row.skills or []),
        experience=row.experience or "",
        industry=row.industry,
        work_mode=WorkMode.parse(row.work_mode),
        salary_min=row.salary_min,
        salary_max=row.salary_max,
        location=row.location,
        title=row.title,
    )


class JobRepository:
    """CRUD calls the matching core makes; every method may raise ``StorageUnavailable``."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def fetch_active_jobs(self, filters: RankingFilters | None, now: datetime) -> list[JobPosting]:
        """Active postings that are unexpired and not stale.

        Only the cheap predicates run in SQL; callers apply the remaining
        request filters in Python.
        """

        now = as_utc(now)  # type: ignore[assignment]
        stmt = select(JobRow).where(
            JobRow.status == JobStatus.ACTIVE.value,
            JobRow.liveness_status.in_(_RANKABLE_LIVENESS),
            or_(
                JobRow.source == PLATFORM_SOURCE,
                JobRow.expires_at.is_(None),
                JobRow.expires_at > now,
            ),
        )
        if filters is not None and filters.work_mode is not None:
            stmt = stmt.where(JobRow.work_mode == filters.work_mode.value)
        with _storage_errors("fetch_active_jobs"):
            rows = self.session.execute(stmt).scalars().all()
        return [job_from_row(row) for row in rows]

    def fetch_job(self, job_id: uuid.UUID) -> JobPosting:
        with _storage_errors("fetch_job"):
            row = self.session.get(JobRow, job_id)
        if row is None:
            raise RecordNotFound("job", job_id)
        return job_from_row(row)

    def find_job_id(self, source: str, external_id: str) -> uuid.UUID | None:
        stmt = select(JobRow.id).where(JobRow.source == source, JobRow.external_id == external_id)
        with _storage_errors("find_job_id"):
            return self.session.execute(stmt).scalar_one_or_none()

    def fetch_candidate_profile(self, candidate_id: int) -> CandidateProfile:
        with _storage_errors("fetch_candidate_profile"):
            row = self.session.get(CandidateRow, candidate_id)
        if row is None:
            raise RecordNotFound("candidate", candidate_id)
        return candidate_from_row(row)

    def fetch_candidate_profiles(self) -> list[CandidateProfile]:
        with _storage_errors("fetch_candidate_profiles"):
            rows = self.session.execute(select(CandidateRow).order_by(CandidateRow.id)).scalars().all()
        return [candidate_from_row(row) for row in rows]

    def fetch_interactions(self, candidate_id: int) -> list[InteractionSignal]:
        stmt = (
            select(InteractionRow.kind, JobRow.id, JobRow.title, JobRow.skills)
            .join(JobRow, InteractionRow.job_id == JobRow.id)
            .where(InteractionRow.candidate_id == candidate_id)
            .order_by(InteractionRow.id)
        )
        with _storage_errors("fetch_interactions"):
            rows = self.session.execute(stmt).all()
        return [
            InteractionSignal(kind=InteractionKind(kind), job_id=job_id, title=title, skills=list(skills or []))
            for kind, job_id, title, skills in rows
        ]

    def insert_job_if_absent(self, job: JobPosting) -> tuple[uuid.UUID, bool]:
        """Insert ``job`` unless ``(source, external_id)`` already exists.

        Returns the stored id and whether a row was inserted. Uses the
        dialect's ``ON CONFLICT DO NOTHING`` so concurrent batches cannot
        both insert the same key.
        """

        values = {
            "id": job.id or uuid.uuid4(),
            "source": job.source,
            "external_id": job.external_id,
            "external_url": job.external_url,
            "title": job.title,
            "company": job.company,
            "description": job.description,
            "skills": list(job.skills),
            "requirements": list(job.requirements),
            "work_mode": job.work_mode.value if job.work_mode else None,
            "salary_min": job.salary_min,
            "salary_max": job.salary_max,
            "location": job.location,
            "industry": job.industry,
            "trust_score": job.trust_score,
            "liveness_status": job.liveness_status.value,
            "last_liveness_check": as_utc(job.last_liveness_check),
            "expires_at": as_utc(job.expires_at),
            "status": job.status.value,
            "posted_at": as_utc(job.posted_at),
        }
        dialect = self.session.get_bind().dialect.name
        if dialect == "sqlite":
            stmt = sqlite_insert(JobRow).values(**values).on_conflict_do_nothing(
                index_elements=["source", "external_id"]
            )
        elif dialect == "postgresql":
            stmt = pg_insert(JobRow).values(**values).on_conflict_do_nothing(
                index_elements=["source", "external_id"]
            )
        else:
            stmt = None

        # A conflicting row can vanish between the insert and the lookup; one retry covers it.
        for _ in range(2):
            try:
                with _storage_errors("insert_job"):
                    if stmt is not None:
                        inserted = self.session.execute(stmt).rowcount == 1
                    else:
                        inserted = self._insert_generic(values)
            except StorageUnavailable as exc:
                if isinstance(exc.__cause__, IntegrityError):
                    raise IngestionRecordError(f"constraint violation: {exc.__cause__.orig}") from exc.__cause__
                raise
            if inserted:
                return values["id"], True
            existing = self.find_job_id(job.source, job.external_id or "")
            if existing is not None:
                return existing, False
        raise StorageUnavailable(f"job {job.source}/{job.external_id} neither inserted nor found")

    def _insert_generic(self, values: dict) -> bool:
        if self.find_job_id(values["source"], values["external_id"]) is not None:
            return False
        try:
            with self.session.begin_nested():
                self.session.execute(insert(JobRow).values(**values))
        except IntegrityError:
            return False
        return True

    def update_job_liveness(
        self,
        job_id: uuid.UUID,
        status: LivenessStatus,
        checked_at: datetime,
        *,
        expires_at: datetime | None = None,
    ) -> bool:
        """Set liveness and check time in one UPDATE; returns False when the job is gone."""

        values: dict[str, object] = {
            "liveness_status": status.value,
            "last_liveness_check": as_utc(checked_at),
        }
        if expires_at is not None:
            values["expires_at"] = as_utc(expires_at)
        stmt = update(JobRow).where(JobRow.id == job_id).values(**values)
        with _storage_errors("update_job_liveness"):
            return self.session.execute(stmt).rowcount > 0

    def sweep_expired(self, now: datetime) -> int:
        """Close active external postings whose expiry has passed; returns how many."""

        stmt = (
            update(JobRow)
            .where(
                JobRow.source != PLATFORM_SOURCE,
                JobRow.status == JobStatus.ACTIVE.value,
                JobRow.expires_at.is_not(None),
                JobRow.expires_at < as_utc(now),
            )
            .values(status=JobStatus.CLOSED.value, liveness_status=LivenessStatus.STALE.value)
            .execution_options(synchronize_session=False)
        )
        with _storage_errors("sweep_expired"):
            return self.session.execute(stmt).rowcount

    def fetch_liveness_candidates(self, scan_limit: int = 1000) -> list[JobPosting]:
        """Active external postings with a URL, least recently checked first."""

        stmt = (
            select(JobRow)
            .where(
                JobRow.source != PLATFORM_SOURCE,
                JobRow.status == JobStatus.ACTIVE.value,
                JobRow.external_url.is_not(None),
            )
            .order_by(JobRow.last_liveness_check.asc().nulls_first(), JobRow.created_at.asc())
            .limit(scan_limit)
        )
        with _storage_errors("fetch_liveness_candidates"):
            rows = self.session.execute(stmt).scalars().all()
        return [job_from_row(row) for row in rows]

    def save_candidate_profile(self, name: str, profile: CandidateProfile | None = None, **fields: object) -> int:
        """Insert a candidate profile and return its id."""

        if profile is not None:
            fields = {
                "skills": list(profile.skills),
                "experience": profile.experience,
                "industry": profile.industry,
                "work_mode": profile.work_mode.value if profile.work_mode else None,
                "salary_min": profile.salary_min,
                "salary_max": profile.salary_max,
                "location": profile.location,
                "title": profile.title,
                **fields,
            }
        if isinstance(fields.get("work_mode"), WorkMode):
            fields["work_mode"] = fields["work_mode"].value  # type: ignore[union-attr]
        row = CandidateRow(name=name, **fields)
        with _storage_errors("save_candidate_profile"):
            self.session.add(row)
            self.session.flush()
        return row.id

    def record_interaction(self, candidate_id: int, job_id: uuid.UUID, kind: InteractionKind) -> None:
        with _storage_errors("record_interaction"):
            self.session.add(InteractionRow(candidate_id=candidate_id, job_id=job_id, kind=kind.value))
            self.session.flush()
