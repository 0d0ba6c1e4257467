"""Personalization from a candidate's past saved/applied/hidden jobs."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from jobrank.matching.types import JobPosting
from jobrank.matching.vocabulary import canonical_skill
from jobrank.utils.text import tokenize

NEUTRAL_PERSONALIZATION = 0.5
SKILL_SIMILARITY_WEIGHT = 0.7
TITLE_SIMILARITY_WEIGHT = 0.3


class InteractionKind(str, Enum):
    SAVED = "saved"
    APPLIED = "applied"
    HIDDEN = "hidden"


INTERACTION_WEIGHTS: dict[InteractionKind, float] = {
    InteractionKind.SAVED: 0.6,
    InteractionKind.APPLIED: 1.0,
    InteractionKind.HIDDEN: -1.0,
}


@dataclass(slots=True)
class InteractionSignal:
    """A past interaction, carrying enough of the job to compare postings."""

    kind: InteractionKind
    job_id: uuid.UUID | None = None
    title: str = ""
    skills: list[str] = field(default_factory=list)


def _jaccard(left: set[str], right: set[str]) -> float:
    if not left or not right:
        return 0.0
    return len(left & right) / len(left | right)


def posting_similarity(signal: InteractionSignal, job: JobPosting) -> float:
    """Similarity in [0, 1] between a past posting and ``job``."""

    if signal.job_id is not None and job.id is not None and signal.job_id == job.id:
        return 1.0
    skills = _jaccard({canonical_skill(s) for s in signal.skills}, {canonical_skill(s) for s in job.skills})
    titles = _jaccard(tokenize(signal.title), tokenize(job.title))
    return SKILL_SIMILARITY_WEIGHT * skills + TITLE_SIMILARITY_WEIGHT * titles


def personalization_score(signals: Iterable[InteractionSignal], job: JobPosting) -> float:
    """Similarity-weighted average of interaction weights, mapped onto [0, 1].

    Saved and applied postings that resemble ``job`` pull the score above the
    neutral 0.5, hidden ones pull it below; no similar signal leaves it at 0.5.
    """

    weighted = 0.0
    total = 0.0
    for signal in signals:
        similarity = posting_similarity(signal, job)
        if similarity <= 0.0:
            continue
        weighted += similarity * INTERACTION_WEIGHTS[signal.kind]
        total += similarity
    if total == 0.0:
        return NEUTRAL_PERSONALIZATION
    score = NEUTRAL_PERSONALIZATION + NEUTRAL_PERSONALIZATION * (weighted / total)
    return max(0.0, min(1.0, score))
