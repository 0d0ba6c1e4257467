"""Hybrid ranking: semantic fit folded with recency, trust and personalization."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Mapping, Sequence

import structlog

from jobrank.ingestion.liveness import effective_liveness
from jobrank.matching.context import score_context
from jobrank.matching.experience import score_experience
from jobrank.matching.explain import build_explanation
from jobrank.matching.personalization import (
    NEUTRAL_PERSONALIZATION,
    InteractionSignal,
    personalization_score,
)
from jobrank.matching.skills import score_skills
from jobrank.matching.types import CandidateProfile, JobPosting, LivenessStatus, MatchResult
from jobrank.matching.vectors import SkillEmbedder
from jobrank.utils.time import age_in_days, now_utc

LOGGER = structlog.get_logger(__name__)

SEMANTIC_WEIGHT = 0.45
RECENCY_WEIGHT = 0.25
LIVENESS_WEIGHT = 0.20
PERSONALIZATION_WEIGHT = 0.10

SKILL_WEIGHT = 0.45
EXPERIENCE_WEIGHT = 0.30
CONTEXT_WEIGHT = 0.25

MIN_MATCH_SCORE = 0.6
VERIFIED_TRUST_THRESHOLD = 85
NEUTRAL_RECENCY = 0.5


@dataclass(frozen=True, slots=True)
class HybridComponents:
    """The four [0, 1] inputs of the final score."""

    semantic: float
    recency: float
    liveness: float
    personalization: float = NEUTRAL_PERSONALIZATION


def _unit(value: float) -> float:
    return max(0.0, min(1.0, value))


def hybrid_score(components: HybridComponents) -> float:
    """``0.45*semantic + 0.25*recency + 0.20*liveness + 0.10*personalization``."""

    return _unit(
        SEMANTIC_WEIGHT * components.semantic
        + RECENCY_WEIGHT * components.recency
        + LIVENESS_WEIGHT * components.liveness
        + PERSONALIZATION_WEIGHT * components.personalization
    )


def semantic_score(skill: float, experience: float, context: float) -> float:
    """Blend 0-100 skill, experience and context scores into [0, 1]."""

    return _unit((SKILL_WEIGHT * skill + EXPERIENCE_WEIGHT * experience + CONTEXT_WEIGHT * context) / 100.0)


def recency_score(posted_at: datetime | None, now: datetime, half_life_days: float) -> float:
    """Exponential decay by posting age: 1.0 when new, 0.5 after one half-life."""

    if posted_at is None:
        return NEUTRAL_RECENCY
    return _unit(0.5 ** (age_in_days(posted_at, now) / half_life_days))


def liveness_score(trust_score: int, liveness: LivenessStatus, stale_factor: float = 0.5) -> float:
    score = trust_score / 100.0
    if liveness is LivenessStatus.STALE:
        score *= stale_factor
    return _unit(score)


def job_sort_key(result: MatchResult) -> tuple:
    """Final score descending, then trust descending, then newest posting first."""

    posted = -result.posted_at.timestamp() if result.posted_at else float("inf")
    return (-result.final_score, -result.trust_score, posted, str(result.job_id))


def candidate_sort_key(result: MatchResult) -> tuple:
    return (-result.final_score, result.candidate_id)


class HybridRanker:
    """Score candidate/job pairs and order them.

    Stateless apart from configuration and the embedder's memo, so one
    instance can serve concurrent requests.
    """

    def __init__(
        self,
        *,
        skill_mode: str = "lexical",
        embedder: SkillEmbedder | None = None,
        half_life_days: float = 14.0,
        stale_factor: float = 0.5,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self.skill_mode = skill_mode
        self.embedder = embedder or (SkillEmbedder() if skill_mode == "semantic" else None)
        self.half_life_days = half_life_days
        self.stale_factor = stale_factor
        self._clock = clock

    def score_pair(
        self,
        candidate: CandidateProfile,
        job: JobPosting,
        signals: Sequence[InteractionSignal] = (),
        *,
        now: datetime | None = None,
    ) -> MatchResult:
        """Compute the full MatchResult for one pair, without threshold filtering."""

        now = now or self._clock()
        skills = score_skills(
            candidate.skills,
            job.skills,
            job.requirements,
            mode=self.skill_mode,
            embedder=self.embedder,
        )
        experience = score_experience(candidate.experience, job.full_text)
        context = score_context(candidate, job)
        liveness = effective_liveness(job, now)

        components = HybridComponents(
            semantic=semantic_score(skills.score, experience.score, context.score),
            recency=recency_score(job.posted_at, now, self.half_life_days),
            liveness=liveness_score(job.trust_score, liveness, self.stale_factor),
            personalization=personalization_score(signals, job),
        )
        final = hybrid_score(components)
        verified = liveness is LivenessStatus.ACTIVE and job.trust_score >= VERIFIED_TRUST_THRESHOLD

        return MatchResult(
            candidate_id=candidate.id,
            job_id=job.id,  # type: ignore[arg-type]
            skill_score=skills.score,
            experience_score=experience.score,
            context_score=context.score,
            semantic_score=components.semantic,
            recency_score=components.recency,
            liveness_score=components.liveness,
            personalization_score=components.personalization,
            final_score=final,
            matched_skills=tuple(skills.matched_skills),
            explanation=build_explanation(skills, experience.score, context, final, verified_active=verified),
            is_verified_active=verified,
            is_direct_from_company=job.trust_score >= VERIFIED_TRUST_THRESHOLD,
            trust_score=job.trust_score,
            posted_at=job.posted_at,
            title=job.title,
            company=job.company,
        )

    def rank_jobs(
        self,
        candidate: CandidateProfile,
        jobs: Iterable[JobPosting],
        signals: Sequence[InteractionSignal] = (),
        *,
        now: datetime | None = None,
    ) -> list[MatchResult]:
        """Rank jobs for a candidate, dropping any below ``MIN_MATCH_SCORE``.

        Ties on final score go to the higher trust score, then the newer posting.
        """

        now = now or self._clock()
        results = [self.score_pair(candidate, job, signals, now=now) for job in jobs]
        kept = [result for result in results if result.final_score >= MIN_MATCH_SCORE]
        kept.sort(key=job_sort_key)
        LOGGER.debug("rank.jobs", candidate_id=candidate.id, scored=len(results), kept=len(kept))
        return kept

    def rank_candidates(
        self,
        job: JobPosting,
        candidates: Iterable[CandidateProfile],
        signals: Mapping[int, Sequence[InteractionSignal]] | None = None,
        *,
        now: datetime | None = None,
    ) -> list[MatchResult]:
        """Rank candidates for one job with the same scoring and cutoff."""

        now = now or self._clock()
        signals = signals or {}
        results = [
            self.score_pair(candidate, job, signals.get(candidate.id, ()), now=now) for candidate in candidates
        ]
        kept = [result for result in results if result.final_score >= MIN_MATCH_SCORE]
        kept.sort(key=candidate_sort_key)
        LOGGER.debug("rank.candidates", job_id=str(job.id), scored=len(results), kept=len(kept))
        return kept
