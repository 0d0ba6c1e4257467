"""Background job bodies for ingestion, expiry and liveness probing."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Sequence

import structlog

from jobrank.core.errors import ValidationError
from jobrank.matching.engine import default_engine

LOGGER = structlog.get_logger(__name__)


def load_batch(path: str | Path) -> list[Mapping[str, Any]]:
    """Read a scraper batch from a JSON file holding a list or ``{"jobs": [...]}``."""

    with Path(path).open("r", encoding="utf-8") as handle:
        data = json.load(handle)
    if isinstance(data, Mapping):
        data = data.get("jobs", [])
    if not isinstance(data, list):
        raise ValidationError(f"{path} does not contain a list of job records")
    return data


def ingest_batch(records: Sequence[Mapping[str, Any]]) -> dict[str, int]:
    """Run one batch through the deduplicator."""

    LOGGER.info("ingest.start", records=len(records))
    stats = default_engine().ingest(records)
    return stats.as_dict()


def expire_stale_jobs() -> int:
    return default_engine().expire_stale_jobs()


def verify_liveness() -> dict[str, int]:
    stats = default_engine().verify_liveness()
    return stats.as_dict()
