"""Tests for interaction-based personalization."""
from __future__ import annotations

import uuid

import pytest

from jobrank.matching.personalization import (
    NEUTRAL_PERSONALIZATION,
    InteractionKind,
    InteractionSignal,
    personalization_score,
    posting_similarity,
)


def test_no_history_is_neutral(make_job) -> None:
    """Candidates without interactions get the neutral 0.5."""

    assert personalization_score([], make_job()) == NEUTRAL_PERSONALIZATION


def test_applying_to_similar_jobs_raises_the_score(make_job) -> None:
    """Similar applied postings push the score above neutral."""

    signal = InteractionSignal(
        InteractionKind.APPLIED, uuid.uuid4(), "React Engineer", ["React", "TypeScript"]
    )

    assert personalization_score([signal], make_job()) > NEUTRAL_PERSONALIZATION


def test_hiding_similar_jobs_lowers_the_score(make_job) -> None:
    """Similar hidden postings push the score below neutral."""

    signal = InteractionSignal(InteractionKind.HIDDEN, uuid.uuid4(), "React Engineer", ["React", "CSS"])

    assert personalization_score([signal], make_job()) < NEUTRAL_PERSONALIZATION


def test_unrelated_history_is_ignored(make_job) -> None:
    """Signals with no overlap carry no weight."""

    signal = InteractionSignal(InteractionKind.HIDDEN, uuid.uuid4(), "Nurse", ["Triage"])

    assert personalization_score([signal], make_job()) == NEUTRAL_PERSONALIZATION


def test_same_posting_is_fully_similar(make_job) -> None:
    """An interaction with the posting itself has similarity 1."""

    job = make_job()
    signal = InteractionSignal(InteractionKind.APPLIED, job.id, "", [])

    assert posting_similarity(signal, job) == 1.0
    assert personalization_score([signal], job) == pytest.approx(1.0)
