"""Celery beat schedule definitions."""
from __future__ import annotations

from datetime import timedelta

from celery.schedules import crontab


def get_beat_schedule() -> dict[str, dict[str, object]]:
    """Return the periodic expiry sweep and liveness probe schedule."""

    return {
        "expire-stale-jobs-hourly": {
            "task": "jobrank.tasks.queue.expire_stale_jobs_task",
            "schedule": crontab(minute=0),
            "args": [],
        },
        "verify-liveness-every-six-hours": {
            "task": "jobrank.tasks.queue.verify_liveness_task",
            "schedule": timedelta(hours=6),
            "args": [],
        },
    }


__all__ = ["get_beat_schedule"]
