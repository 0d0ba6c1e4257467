"""Celery application wiring for background jobs."""
from __future__ import annotations

from typing import Any, Mapping, Sequence

import structlog
from celery import Celery

from jobrank.core.config import get_settings
from jobrank.tasks import jobs
from jobrank.tasks.schedules import get_beat_schedule

LOGGER = structlog.get_logger(__name__)


def _create_celery() -> Celery:
    """Instantiate the Celery app with configuration from settings."""

    settings = get_settings()
    app = Celery("jobrank")
    app.conf.broker_url = str(settings.redis_url)
    app.conf.result_backend = str(settings.redis_url)
    app.conf.task_default_queue = "default"
    app.conf.timezone = settings.timezone
    app.conf.enable_utc = True
    app.conf.task_always_eager = settings.celery_eager
    app.conf.task_serializer = "json"
    app.conf.accept_content = ["json"]
    app.conf.result_serializer = "json"
    app.conf.beat_schedule = get_beat_schedule()
    return app


celery_app = _create_celery()


@celery_app.task(name="jobrank.tasks.queue.ingest_batch_task")
def ingest_batch_task(records: Sequence[Mapping[str, Any]]) -> dict[str, int]:
    """Celery task that ingests one scraped batch."""

    result = jobs.ingest_batch(list(records))
    LOGGER.info("tasks.ingest_batch.completed", **result)
    return result


@celery_app.task(name="jobrank.tasks.queue.expire_stale_jobs_task")
def expire_stale_jobs_task() -> int:
    """Celery task that closes expired external postings."""

    closed = jobs.expire_stale_jobs()
    LOGGER.info("tasks.expire.completed", closed=closed)
    return closed


@celery_app.task(name="jobrank.tasks.queue.verify_liveness_task")
def verify_liveness_task() -> dict[str, int]:
    """Celery task that probes postings due for a liveness check."""

    result = jobs.verify_liveness()
    LOGGER.info("tasks.liveness.completed", **result)
    return result


__all__ = ["celery_app", "ingest_batch_task", "expire_stale_jobs_task", "verify_liveness_task"]
