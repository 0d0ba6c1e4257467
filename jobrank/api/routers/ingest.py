"""Ingestion and expiry endpoints."""
from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel, Field

from jobrank.api.dependencies import get_matching_engine
from jobrank.matching.engine import MatchingEngine

LOGGER = structlog.get_logger(__name__)

router = APIRouter(tags=["ingest"])


class IngestRequest(BaseModel):
    """Scraper batch accepted by the ingest endpoint."""

    jobs: list[dict[str, Any]] = Field(default_factory=list)


@router.post("/ingest")
def ingest(
    payload: IngestRequest = Body(...),
    engine: MatchingEngine = Depends(get_matching_engine),
) -> dict[str, int]:
    """Ingest a batch synchronously and return the counters."""

    stats = engine.ingest(payload.jobs)
    LOGGER.info("api.ingest", **stats.as_dict())
    return stats.as_dict()


@router.post("/jobs/expire")
def expire(engine: MatchingEngine = Depends(get_matching_engine)) -> dict[str, int]:
    """Close external postings whose expiry has passed."""

    return {"closed": engine.expire_stale_jobs()}
