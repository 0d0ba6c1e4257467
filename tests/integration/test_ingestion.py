"""Integration tests for deduplicated ingestion against SQLite."""
from __future__ import annotations

import threading
from datetime import timedelta

import pytest

pytest.importorskip("sqlalchemy")

from sqlalchemy import func, select

from jobrank.db.models import JobRow
from jobrank.db.repository import JobRepository
from jobrank.db.session import scoped
from jobrank.ingestion.dedup import IngestionDeduplicator
from jobrank.ingestion.liveness import LivenessTracker
from jobrank.matching.types import LivenessStatus


def _count(session_factory) -> int:
    with scoped(session_factory) as session:
        return session.execute(select(func.count()).select_from(JobRow)).scalar_one()


def _only_job(session_factory, external_id: str) -> JobRow:
    with scoped(session_factory) as session:
        return session.execute(select(JobRow).where(JobRow.external_id == external_id)).scalar_one()


def test_repeated_key_is_inserted_once_and_reconfirmed(matching_engine, session_factory, record_factory) -> None:
    """Two copies of one (source, externalId) insert one row and mark it active."""

    stats = matching_engine.ingest([record_factory(), record_factory(title="Senior React Engineer II")])

    assert stats.as_dict() == {"inserted": 1, "duplicates": 1, "errors": 0}
    assert _count(session_factory) == 1
    row = _only_job(session_factory, "gh-1")
    assert row.liveness_status == LivenessStatus.ACTIVE.value
    assert row.title == "Senior React Engineer"
    assert row.trust_score == 95


def test_new_external_postings_start_unknown(matching_engine, session_factory, record_factory) -> None:
    """Fresh external postings get source trust, unknown liveness and an expiry."""

    matching_engine.ingest([record_factory(source="arbeitnow", externalId="an-1")])

    row = _only_job(session_factory, "an-1")
    assert row.trust_score == 65
    assert row.liveness_status == LivenessStatus.UNKNOWN.value
    assert row.last_liveness_check is None
    assert row.expires_at is not None


def test_platform_postings_are_trusted_and_active(matching_engine, session_factory, record_factory) -> None:
    """Platform postings get trust 100, start active and carry no expiry."""

    matching_engine.ingest([record_factory(source="platform", externalId="p-1", externalUrl=None)])

    row = _only_job(session_factory, "p-1")
    assert row.trust_score == 100
    assert row.liveness_status == LivenessStatus.ACTIVE.value
    assert row.expires_at is None


def test_bad_records_are_counted_not_raised(matching_engine, session_factory, record_factory) -> None:
    """Invalid records are skipped while the rest of the batch lands."""

    batch = [
        record_factory(externalId="ok-1"),
        record_factory(externalId=None),
        "not a record",
        record_factory(externalId="ok-2", workType="spaceship"),
        record_factory(externalId="ok-3"),
    ]

    stats = matching_engine.ingest(batch)

    assert stats.as_dict() == {"inserted": 2, "duplicates": 0, "errors": 3}
    assert _count(session_factory) == 2


def test_reingestion_extends_expiry(session_factory, clock, record_factory) -> None:
    """Seeing a posting again pushes its expiry forward without touching trust."""

    deduplicator = IngestionDeduplicator(session_factory, LivenessTracker(expiry_days=60, clock=clock), chunk_size=2)
    deduplicator.ingest([record_factory()])
    first = _only_job(session_factory, "gh-1").expires_at

    clock.advance(days=10)
    stats = deduplicator.ingest([record_factory()])

    row = _only_job(session_factory, "gh-1")
    assert stats.duplicates == 1
    assert row.expires_at.replace(tzinfo=None) - first.replace(tzinfo=None) == timedelta(days=10)
    assert row.trust_score == 95


def test_chunks_commit_independently(session_factory, clock, record_factory) -> None:
    """Each chunk is its own transaction, so all chunks of a large batch land."""

    deduplicator = IngestionDeduplicator(session_factory, LivenessTracker(clock=clock), chunk_size=2)
    batch = [record_factory(externalId=f"gh-{index}") for index in range(5)]

    stats = deduplicator.ingest(batch)

    assert stats.inserted == 5
    with scoped(session_factory) as session:
        assert JobRepository(session).find_job_id("greenhouse", "gh-4") is not None


def test_storage_failure_counts_the_chunk_as_errors(tmp_path, clock, record_factory) -> None:
    """A database without the schema fails each chunk without raising."""

    from jobrank.db.session import build_engine, build_session_factory

    engine = build_engine(f"sqlite:///{tmp_path / 'empty.db'}")
    deduplicator = IngestionDeduplicator(build_session_factory(engine), LivenessTracker(clock=clock), chunk_size=10)

    stats = deduplicator.ingest([record_factory(), record_factory(externalId="gh-2")])

    assert stats.as_dict() == {"inserted": 0, "duplicates": 0, "errors": 2}
    engine.dispose()


def test_platform_reingestion_keeps_full_trust(matching_engine, session_factory, record_factory) -> None:
    """A platform posting seen twice stays one row with trust 100 and no expiry."""

    record = record_factory(source="platform", externalId="p-7", externalUrl=None)

    first = matching_engine.ingest([record])
    second = matching_engine.ingest([record])

    assert (first.inserted, second.duplicates) == (1, 1)
    assert _count(session_factory) == 1
    row = _only_job(session_factory, "p-7")
    assert row.trust_score == 100
    assert row.expires_at is None


def test_reingestion_stamps_the_liveness_check(matching_engine, session_factory, clock, record_factory) -> None:
    """A second sighting of the same key marks the row active and records when it was seen."""

    matching_engine.ingest([record_factory()])
    clock.advance(hours=5)

    stats = matching_engine.ingest([record_factory()])

    row = _only_job(session_factory, "gh-1")
    assert stats.duplicates == 1
    assert row.liveness_status == LivenessStatus.ACTIVE.value
    assert row.last_liveness_check.replace(tzinfo=None) == clock().replace(tzinfo=None)


def test_concurrent_batches_insert_one_row(session_factory, tmp_path, clock, record_factory) -> None:
    """Parallel engines ingesting one key against one database store it exactly once."""

    from jobrank.core.settings import AppSettings
    from jobrank.db.session import build_engine, build_session_factory
    from jobrank.ingestion.dedup import IngestStats
    from jobrank.matching.engine import MatchingEngine

    workers = 8
    barrier = threading.Barrier(workers)
    totals = IngestStats()
    lock = threading.Lock()
    db_engines = [build_engine(f"sqlite:///{tmp_path / 'jobrank.db'}") for _ in range(workers)]

    def worker(db_engine) -> None:
        engine = MatchingEngine(build_session_factory(db_engine), AppSettings(), clock=clock)
        barrier.wait()
        stats = engine.ingest([record_factory()])
        with lock:
            totals.merge(stats)

    threads = [threading.Thread(target=worker, args=(db_engine,)) for db_engine in db_engines]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    for db_engine in db_engines:
        db_engine.dispose()

    assert totals.as_dict() == {"inserted": 1, "duplicates": 7, "errors": 0}
    assert _count(session_factory) == 1
