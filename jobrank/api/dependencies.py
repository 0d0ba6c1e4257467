"""FastAPI dependencies."""
from __future__ import annotations

from jobrank.matching.engine import MatchingEngine, default_engine


def get_matching_engine() -> MatchingEngine:
    """Return the process-wide engine; tests override this dependency."""

    return default_engine()
