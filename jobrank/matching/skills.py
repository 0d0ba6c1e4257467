"""Skill compatibility scoring."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from jobrank.matching.vectors import SkillEmbedder
from jobrank.matching.vocabulary import are_synonyms, find_known_skills
from jobrank.utils.text import contains_phrase, normalize_term

EXACT_WEIGHT = 0.7
PARTIAL_WEIGHT = 0.2
CORE_WEIGHT = 0.1
SEMANTIC_MATCH_THRESHOLD = 0.6
MIN_SUBSTRING_LENGTH = 3
CORE_LEADING_SKILLS = 3
NEUTRAL_SKILL_SCORE = 50.0


@dataclass(slots=True)
class SkillMatch:
    """Outcome of comparing a candidate's skills with one job."""

    score: float
    exact: list[str] = field(default_factory=list)
    partial: list[str] = field(default_factory=list)
    core_total: int = 0
    core_matched: int = 0

    @property
    def matched_skills(self) -> list[str]:
        return [*self.exact, *self.partial]

    @property
    def exact_count(self) -> int:
        return len(self.exact)

    @property
    def partial_count(self) -> int:
        return len(self.partial)


def _clean(skills: Sequence[str]) -> list[str]:
    return [skill.strip() for skill in skills if skill and skill.strip()]


def _is_core(position: int, skill: str, requirements_text: str) -> bool:
    return position < CORE_LEADING_SKILLS or contains_phrase(requirements_text, skill)


def _score(exact: int, partial: int, total: int, core_matched: int, core_total: int) -> float:
    core_ratio = core_matched / core_total if core_total else 1.0
    raw = 100.0 * (
        EXACT_WEIGHT * (exact / total) + PARTIAL_WEIGHT * (partial / total) + CORE_WEIGHT * core_ratio
    )
    return max(0.0, min(100.0, raw))


def _lexical_kind(job_skill: str, candidate_skills: Sequence[str]) -> str | None:
    target = normalize_term(job_skill)
    lowered = [normalize_term(skill) for skill in candidate_skills]
    if target in lowered:
        return "exact"
    if any(are_synonyms(target, skill) for skill in lowered):
        return "exact"
    if len(target) >= MIN_SUBSTRING_LENGTH:
        for skill in lowered:
            if len(skill) >= MIN_SUBSTRING_LENGTH and (skill in target or target in skill):
                return "partial"
    return None


def _semantic_kind(job_skill: str, candidate_skills: Sequence[str], embedder: SkillEmbedder) -> str | None:
    target = normalize_term(job_skill)
    best = 0.0
    for skill in candidate_skills:
        lowered = normalize_term(skill)
        if lowered == target or are_synonyms(lowered, target):
            return "exact"
        best = max(best, embedder.similarity(lowered, target))
    if best > SEMANTIC_MATCH_THRESHOLD:
        return "partial"
    return None


def score_skills(
    candidate_skills: Sequence[str],
    job_skills: Sequence[str],
    requirements: Sequence[str] = (),
    *,
    mode: str = "lexical",
    embedder: SkillEmbedder | None = None,
) -> SkillMatch:
    """Score a candidate's skills against a job's required skills on a 0-100 scale.

    Each job skill is matched at most once, preferring an exact or synonym
    match over a partial one. Lexical mode treats substring overlap between
    terms of three or more characters as partial; semantic mode treats a
    vector similarity above ``SEMANTIC_MATCH_THRESHOLD`` as partial. When a
    job lists no skills, the skills named in its requirements are used
    instead, and a job with neither scores ``NEUTRAL_SKILL_SCORE``.
    """

    if mode not in {"lexical", "semantic"}:
        raise ValueError(f"unknown skill match mode: {mode!r}")
    candidates = _clean(candidate_skills)
    requirement_lines = _clean(requirements)
    requirements_text = " ".join(requirement_lines)

    targets = _clean(job_skills)
    if not targets:
        if mode == "semantic":
            targets = requirement_lines
        else:
            targets = find_known_skills(requirements_text)
    if not targets:
        return SkillMatch(score=NEUTRAL_SKILL_SCORE)

    if mode == "semantic" and embedder is None:
        embedder = SkillEmbedder()

    result = SkillMatch(score=0.0)
    for position, job_skill in enumerate(targets):
        if mode == "semantic":
            kind = _semantic_kind(job_skill, candidates, embedder)  # type: ignore[arg-type]
        else:
            kind = _lexical_kind(job_skill, candidates)
        if kind == "exact":
            result.exact.append(job_skill)
        elif kind == "partial":
            result.partial.append(job_skill)
        if _is_core(position, job_skill, requirements_text):
            result.core_total += 1
            if kind is not None:
                result.core_matched += 1

    result.score = _score(
        len(result.exact), len(result.partial), len(targets), result.core_matched, result.core_total
    )
    return result
