"""Command-line interface for jobrank."""
from __future__ import annotations

import argparse
import json
import sys
import uuid
from typing import Any

import structlog

from jobrank.core.errors import JobRankError
from jobrank.core.logging import configure_logging

LOGGER = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI commands."""

    parser = argparse.ArgumentParser(prog="jr")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("bootstrap", help="Create tables and seed demo candidates and jobs")

    ingest_parser = subparsers.add_parser("ingest", help="Ingest a JSON batch of scraped jobs")
    ingest_parser.add_argument("--file", required=True, help="Path to a JSON list of job records")

    subparsers.add_parser("expire", help="Close external jobs past their expiry")
    subparsers.add_parser("verify-liveness", help="Probe external jobs due for a liveness check")

    rank_parser = subparsers.add_parser("rank", help="Rank jobs for a candidate")
    rank_parser.add_argument("--candidate", type=int, required=True, help="Candidate id")
    rank_parser.add_argument("--work-mode", choices=["remote", "hybrid", "onsite"], default=None)
    rank_parser.add_argument("--location", default=None)
    rank_parser.add_argument("--min-salary", type=int, default=None)
    rank_parser.add_argument("--limit", type=int, default=None, help="Page size")

    candidates_parser = subparsers.add_parser("rank-candidates", help="Rank candidates for a job")
    candidates_parser.add_argument("--job", required=True, help="Job id (UUID)")
    candidates_parser.add_argument("--limit", type=int, default=None)

    return parser


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2, default=str))


def _dispatch(namespace: argparse.Namespace) -> None:
    from jobrank.matching.engine import default_engine
    from jobrank.matching.types import WorkMode
    from jobrank.tasks import jobs

    if namespace.command == "bootstrap":
        from jobrank.db.seed import seed_demo_data

        _emit(seed_demo_data().as_dict())
    elif namespace.command == "ingest":
        _emit(jobs.ingest_batch(jobs.load_batch(namespace.file)))
    elif namespace.command == "expire":
        _emit({"closed": jobs.expire_stale_jobs()})
    elif namespace.command == "verify-liveness":
        _emit(jobs.verify_liveness())
    elif namespace.command == "rank":
        engine = default_engine()
        filters = engine.filters(
            work_mode=WorkMode.parse(namespace.work_mode),
            location=namespace.location,
            min_salary=namespace.min_salary,
            limit=namespace.limit,
        )
        results = engine.rank_jobs_for_candidate(namespace.candidate, filters)
        _emit([result.as_dict() for result in results])
    elif namespace.command == "rank-candidates":
        results = default_engine().rank_candidates_for_job(uuid.UUID(namespace.job), limit=namespace.limit)
        _emit([result.as_dict() for result in results])


def main(args: list[str] | None = None) -> None:
    """CLI entry point."""

    configure_logging()
    parser = build_parser()
    namespace = parser.parse_args(args=args)

    if namespace.command is None:
        parser.print_help()
        sys.exit(1)
    try:
        _dispatch(namespace)
    except (JobRankError, ValueError, OSError) as exc:
        LOGGER.error("cli.failed", command=namespace.command, error=str(exc))
        sys.exit(2)


if __name__ == "__main__":
    main()
