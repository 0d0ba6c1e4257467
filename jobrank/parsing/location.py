"""Location normalization helpers."""
from __future__ import annotations

import re
from dataclasses import dataclass

REMOTE_KEYWORDS = ("remote", "anywhere", "distributed", "work from home", "wfh")
HYBRID_KEYWORDS = ("hybrid", "flexible")


@dataclass(frozen=True)
class LocationParts:
    """A location string split into its comma segments."""

    raw: str
    normalized: str
    city: str | None
    region: str | None
    is_remote: bool
    is_hybrid: bool


def _contains(text: str, keywords: tuple[str, ...]) -> bool:
    return any(re.search(rf"\b{re.escape(keyword)}\b", text) for keyword in keywords)


def parse_location(location: str | None) -> LocationParts:
    """Lower-case a location and split it into city and region segments."""

    raw = (location or "").strip()
    normalized = " ".join(raw.lower().split())
    segments = [segment.strip() for segment in normalized.split(",") if segment.strip()]
    is_remote = _contains(normalized, REMOTE_KEYWORDS)
    is_hybrid = not is_remote and _contains(normalized, HYBRID_KEYWORDS)
    return LocationParts(
        raw=raw,
        normalized=normalized,
        city=segments[0] if segments else None,
        region=segments[1] if len(segments) > 1 else None,
        is_remote=is_remote,
        is_hybrid=is_hybrid,
    )


def infer_work_mode(location: str | None) -> str | None:
    """Guess ``remote``/``hybrid`` from location text; ``None`` when it says nothing."""

    parts = parse_location(location)
    if parts.is_remote:
        return "remote"
    if parts.is_hybrid:
        return "hybrid"
    return None
