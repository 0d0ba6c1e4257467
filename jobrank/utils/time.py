"""Time utility helpers."""
from __future__ import annotations

from datetime import datetime, timezone


def now_utc() -> datetime:
    """Return the current UTC timestamp with timezone info."""

    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Return ``value`` as an aware UTC datetime.

    SQLite hands back naive datetimes for ``DateTime(timezone=True)`` columns;
    those are stored as UTC and are re-tagged here.
    """

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def age_in_days(value: datetime, now: datetime) -> float:
    """Return the non-negative age of ``value`` relative to ``now`` in days."""

    delta = as_utc(now) - as_utc(value)  # type: ignore[operator]
    return max(0.0, delta.total_seconds() / 86400.0)

