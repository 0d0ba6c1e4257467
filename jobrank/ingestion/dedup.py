"""Deduplicated, chunked ingestion of scraped job batches."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

import structlog

from jobrank.core.errors import IngestionRecordError, StorageUnavailable, ValidationError
from jobrank.db.repository import JobRepository
from jobrank.db.session import SessionFactory, storage_scope
from jobrank.ingestion.liveness import LivenessTracker
from jobrank.ingestion.records import ExternalJobInput, parse_external_job
from jobrank.matching.types import JobPosting

LOGGER = structlog.get_logger(__name__)


@dataclass(slots=True)
class IngestStats:
    """Summary of an ingestion run."""

    inserted: int = 0
    duplicates: int = 0
    errors: int = 0

    def merge(self, other: "IngestStats") -> None:
        self.inserted += other.inserted
        self.duplicates += other.duplicates
        self.errors += other.errors

    def as_dict(self) -> dict[str, int]:
        """Return the ingestion result as a serialisable dictionary."""

        return {"inserted": self.inserted, "duplicates": self.duplicates, "errors": self.errors}


def _chunks(items: Sequence[Any], size: int) -> Iterable[Sequence[Any]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


class IngestionDeduplicator:
    """Upsert scraped records by ``(source, external_id)``.

    New keys are inserted with source-derived trust, ``unknown`` liveness and
    a fresh expiry; known keys are reconfirmed. Records are written in
    chunks, each in its own transaction, so a failed chunk never discards
    earlier ones. Bad records are counted in ``errors`` and skipped.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        tracker: LivenessTracker,
        *,
        chunk_size: int = 100,
    ) -> None:
        self.session_factory = session_factory
        self.tracker = tracker
        self.chunk_size = max(1, chunk_size)

    def _posting(self, record: ExternalJobInput) -> JobPosting:
        state = self.tracker.initial_state(record.source)
        try:
            return JobPosting(
                title=record.title,
                company=record.company,
                source=record.source,
                description=record.description,
                skills=record.skills,
                requirements=record.requirements,
                work_mode=record.work_type,
                salary_min=record.salary_min,
                salary_max=record.salary_max,
                location=record.location,
                industry=record.industry,
                external_id=record.external_id,
                external_url=record.external_url,
                trust_score=state.trust_score,
                liveness_status=state.liveness_status,
                last_liveness_check=state.last_liveness_check,
                expires_at=state.expires_at,
                posted_at=record.posted_date,
            )
        except ValidationError as exc:
            raise IngestionRecordError(str(exc)) from exc

    def _upsert(self, repository: JobRepository, record: ExternalJobInput, stats: IngestStats) -> None:
        posting = self._posting(record)
        job_id, inserted = repository.insert_job_if_absent(posting)
        if inserted:
            stats.inserted += 1
        else:
            self.tracker.reconfirm(repository, job_id, is_platform=posting.is_platform)
            stats.duplicates += 1

    def _write_chunk(self, chunk: Sequence[tuple[int, ExternalJobInput]]) -> IngestStats:
        stats = IngestStats()
        with storage_scope(self.session_factory) as session:
            repository = JobRepository(session)
            for _, record in chunk:
                self._upsert(repository, record, stats)
        return stats

    def _replay_chunk(self, chunk: Sequence[tuple[int, ExternalJobInput]]) -> IngestStats:
        """Write a chunk one record per transaction, isolating the bad ones."""

        stats = IngestStats()
        for index, record in chunk:
            single = IngestStats()
            try:
                with storage_scope(self.session_factory) as session:
                    self._upsert(JobRepository(session), record, single)
            except IngestionRecordError as exc:
                LOGGER.warning("ingest.record.rejected", index=index, source=record.source, error=str(exc))
                single = IngestStats(errors=1)
            except StorageUnavailable as exc:
                LOGGER.error("ingest.record.storage_error", index=index, error=str(exc))
                single = IngestStats(errors=1)
            stats.merge(single)
        return stats

    def ingest(self, batch: Iterable[Mapping[str, Any]]) -> IngestStats:
        """Ingest one batch and return ``{inserted, duplicates, errors}``."""

        stats = IngestStats()
        parsed: list[tuple[int, ExternalJobInput]] = []
        for index, payload in enumerate(batch):
            try:
                parsed.append((index, parse_external_job(payload, index=index)))
            except IngestionRecordError as exc:
                LOGGER.warning("ingest.record.invalid", index=index, error=str(exc))
                stats.errors += 1

        for number, chunk in enumerate(_chunks(parsed, self.chunk_size)):
            try:
                chunk_stats = self._write_chunk(chunk)
            except IngestionRecordError as exc:
                LOGGER.warning("ingest.chunk.replay", chunk=number, error=str(exc))
                chunk_stats = self._replay_chunk(chunk)
            except StorageUnavailable as exc:
                LOGGER.error("ingest.chunk.failed", chunk=number, size=len(chunk), error=str(exc))
                chunk_stats = IngestStats(errors=len(chunk))
            stats.merge(chunk_stats)
            LOGGER.info("ingest.chunk.complete", chunk=number, **chunk_stats.as_dict())

        LOGGER.info("ingest.complete", **stats.as_dict())
        return stats
