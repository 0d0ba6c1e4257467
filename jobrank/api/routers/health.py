"""Health check endpoints."""
from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from jobrank.api.dependencies import get_matching_engine
from jobrank.matching.engine import MatchingEngine

LOGGER = structlog.get_logger(__name__)

router = APIRouter(tags=["health"], include_in_schema=False)


@router.get("/healthz")
def healthz() -> dict[str, str]:
    """Liveness probe to confirm the API process is running."""

    return {"status": "ok"}


@router.get("/readyz")
def readyz(engine: MatchingEngine = Depends(get_matching_engine)) -> dict[str, str]:
    """Readiness probe that checks the database answers."""

    session = engine.session_factory()
    try:
        session.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        LOGGER.warning("readyz.database_unavailable", error=str(exc))
        raise HTTPException(status_code=503, detail="database unavailable") from exc
    finally:
        session.close()
    return {"status": "ready"}
