"""FastAPI application instance."""
from __future__ import annotations

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from jobrank.api.routers import health, ingest, matches
from jobrank.core.errors import RecordNotFound, StorageUnavailable, ValidationError
from jobrank.core.logging import configure_logging

configure_logging()
LOGGER = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    LOGGER.info("app.startup")
    yield
    LOGGER.info("app.shutdown")


app = FastAPI(title="jobrank", lifespan=lifespan)

app.include_router(health.router)
app.include_router(matches.router)
app.include_router(ingest.router)


@app.exception_handler(RecordNotFound)
async def _not_found(request: Request, exc: RecordNotFound) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ValidationError)
async def _invalid(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(StorageUnavailable)
async def _storage_down(request: Request, exc: StorageUnavailable) -> JSONResponse:
    LOGGER.error("api.storage_unavailable", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=503, content={"detail": "storage unavailable"})
