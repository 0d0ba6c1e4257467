"""Ranking endpoints."""
from __future__ import annotations

import uuid
from typing import Any

from fastapi import APIRouter, Depends, Query

from jobrank.api.dependencies import get_matching_engine
from jobrank.core.errors import ValidationError
from jobrank.matching.engine import MatchingEngine
from jobrank.matching.types import WorkMode

router = APIRouter(tags=["matches"])


@router.get("/candidates/{candidate_id}/matches")
def candidate_matches(
    candidate_id: int,
    work_mode: str | None = Query(default=None),
    location: str | None = Query(default=None),
    min_salary: int | None = Query(default=None, ge=0),
    limit: int | None = Query(default=None, ge=1),
    engine: MatchingEngine = Depends(get_matching_engine),
) -> dict[str, Any]:
    """Ranked job recommendations for a candidate."""

    mode = WorkMode.parse(work_mode) if work_mode else None
    filters = engine.filters(work_mode=mode, location=location, min_salary=min_salary, limit=limit)
    results = engine.rank_jobs_for_candidate(candidate_id, filters)
    return {
        "candidate_id": candidate_id,
        "count": len(results),
        "results": [result.as_dict() for result in results],
    }


@router.get("/jobs/{job_id}/candidates")
def job_candidates(
    job_id: str,
    limit: int | None = Query(default=None, ge=1),
    engine: MatchingEngine = Depends(get_matching_engine),
) -> dict[str, Any]:
    """Ranked candidates for a job."""

    try:
        parsed = uuid.UUID(job_id)
    except ValueError as exc:
        raise ValidationError(f"invalid job id {job_id!r}") from exc
    results = engine.rank_candidates_for_job(parsed, limit=limit)
    return {"job_id": str(parsed), "count": len(results), "results": [result.as_dict() for result in results]}
