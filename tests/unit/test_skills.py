"""Tests for skill compatibility scoring."""
from __future__ import annotations

import pytest

pytest.importorskip("numpy")
pytest.importorskip("sklearn")

from jobrank.matching.skills import NEUTRAL_SKILL_SCORE, score_skills
from jobrank.matching.vectors import SkillEmbedder


def test_exact_match_on_half_the_skills_scores_forty() -> None:
    """One exact hit out of two core skills yields 0.7*0.5 + 0.1*0.5."""

    result = score_skills(["React", "TypeScript"], ["react", "node.js"])

    assert result.score == pytest.approx(40.0)
    assert result.exact == ["react"]
    assert result.partial == []
    assert result.core_total == 2
    assert result.core_matched == 1


def test_synonyms_count_as_exact_matches() -> None:
    """Aliases such as JS and PostgreSQL resolve to their synonym group."""

    result = score_skills(["JS", "PostgreSQL"], ["JavaScript", "SQL"])

    assert result.exact_count == 2
    assert result.score == pytest.approx(80.0)


def test_substring_overlap_is_partial() -> None:
    """A candidate skill containing the job skill counts as a partial match."""

    result = score_skills(["React Native"], ["React"])

    assert result.partial == ["React"]
    assert result.score == pytest.approx(30.0)


def test_each_job_skill_is_matched_once() -> None:
    """Several candidate spellings of one skill do not inflate the score."""

    result = score_skills(["react", "React.js", "reactjs"], ["React"])

    assert result.matched_skills == ["React"]
    assert result.score == pytest.approx(80.0)


def test_job_without_skills_or_requirements_is_neutral() -> None:
    """Missing job data falls back to the neutral skill score."""

    result = score_skills(["Python"], [], [])

    assert result.score == NEUTRAL_SKILL_SCORE
    assert result.matched_skills == []


def test_requirements_supply_skills_when_list_is_empty() -> None:
    """Known skills named in requirement text become the targets."""

    result = score_skills(["Python"], [], ["Strong Python and SQL skills"])

    assert result.exact == ["python"]
    assert result.score == pytest.approx(40.0)


def test_requirement_mentions_mark_later_skills_as_core() -> None:
    """Skills past the first three are core when the requirements mention them."""

    result = score_skills(
        ["Kubernetes"],
        ["Python", "SQL", "Airflow", "Kubernetes"],
        ["Experience running Kubernetes in production"],
    )

    assert result.core_total == 4
    assert result.core_matched == 1


def test_semantic_mode_matches_related_frameworks() -> None:
    """Vue and React sit close together in the embedding space."""

    result = score_skills(["Vue"], ["React"], mode="semantic", embedder=SkillEmbedder())

    assert result.partial == ["React"]
    assert result.score == pytest.approx(30.0)


def test_semantic_mode_rejects_unrelated_skills() -> None:
    """Design and orchestration skills share no embedding axes."""

    result = score_skills(["Figma"], ["Kubernetes"], mode="semantic")

    assert result.matched_skills == []
    assert result.score == 0.0


def test_unknown_mode_is_rejected() -> None:
    """Only lexical and semantic matching exist."""

    with pytest.raises(ValueError):
        score_skills(["Python"], ["Python"], mode="fuzzy")
