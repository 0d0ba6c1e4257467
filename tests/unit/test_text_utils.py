"""Tests for text helpers and the skill vocabulary."""
from __future__ import annotations

import pytest

from jobrank.matching.vocabulary import are_synonyms, canonical_skill, find_known_skills
from jobrank.utils.text import (
    clean_whitespace,
    contains_phrase,
    dedupe_preserving_order,
    split_list,
    tokenize,
)


def test_clean_whitespace() -> None:
    """Runs of whitespace collapse to one space."""

    assert clean_whitespace("  a\n\tb   c ") == "a b c"


def test_contains_phrase_respects_word_boundaries() -> None:
    """Phrases only match as whole words, including symbol-heavy ones."""

    assert contains_phrase("I write C++ daily", "c++")
    assert contains_phrase("Senior Engineer", "senior")
    assert not contains_phrase("JavaScript developer", "java")


def test_split_list() -> None:
    """Comma strings and sequences both become stripped lists."""

    assert split_list("Python, SQL,, Airflow ") == ["Python", "SQL", "Airflow"]
    assert split_list(["React", " ", None]) == ["React"]
    assert split_list(None) == []
    with pytest.raises(TypeError):
        split_list(42)


def test_dedupe_preserving_order() -> None:
    """Case-insensitive duplicates keep their first spelling."""

    assert dedupe_preserving_order(["React", "react", "Vue", "REACT"]) == ["React", "Vue"]


def test_tokenize() -> None:
    """Tokens keep language symbols and drop trailing dots."""

    assert tokenize("Senior C# / Node.js engineer.") == {"senior", "c#", "node.js", "engineer"}


def test_vocabulary_synonyms() -> None:
    """Aliases map onto one canonical skill."""

    assert canonical_skill("K8s") == "kubernetes"
    assert canonical_skill("Elixir") == "elixir"
    assert are_synonyms("nodejs", "JavaScript")
    assert not are_synonyms("typescript", "javascript")


def test_find_known_skills_in_prose() -> None:
    """Known skills are returned canonically in order of appearance."""

    text = "You will use Postgres, Python and k8s; experience with ML is a plus. Let's go!"

    assert find_known_skills(text) == ["sql", "python", "kubernetes", "machine learning"]
