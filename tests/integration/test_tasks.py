"""Integration tests for task bodies and the Celery wiring."""
from __future__ import annotations

from pathlib import Path

import pytest

pytest.importorskip("celery")

from jobrank.core.errors import ValidationError
from jobrank.tasks import jobs
from jobrank.tasks.queue import celery_app
from jobrank.tasks.schedules import get_beat_schedule

FIXTURE = Path(__file__).resolve().parents[1] / "fixtures" / "scraped_batch.json"


def test_beat_schedule_targets_registered_tasks() -> None:
    """Every periodic entry points at a task the app knows about."""

    schedule = get_beat_schedule()

    assert set(schedule) == {"expire-stale-jobs-hourly", "verify-liveness-every-six-hours"}
    for entry in schedule.values():
        assert entry["task"] in celery_app.tasks


def test_load_batch_accepts_wrapped_lists(tmp_path) -> None:
    """Batches may be a bare list or wrapped in a jobs key."""

    assert len(jobs.load_batch(FIXTURE)) == 3

    bare = tmp_path / "bare.json"
    bare.write_text('[{"title": "x"}]', encoding="utf-8")
    assert jobs.load_batch(bare) == [{"title": "x"}]

    broken = tmp_path / "broken.json"
    broken.write_text('{"jobs": "nope"}', encoding="utf-8")
    with pytest.raises(ValidationError):
        jobs.load_batch(broken)


def test_ingest_task_runs_eagerly(matching_engine, monkeypatch) -> None:
    """The Celery task delegates to the engine and returns its counters."""

    from jobrank.tasks.queue import ingest_batch_task

    monkeypatch.setattr(jobs, "default_engine", lambda: matching_engine)

    result = ingest_batch_task.apply(args=[jobs.load_batch(FIXTURE)]).get()

    assert result == {"inserted": 2, "duplicates": 0, "errors": 1}
