"""Fixed skill vocabulary: synonym groups and phrase lookup."""
from __future__ import annotations

import re

from jobrank.utils.text import normalize_term

SKILL_SYNONYMS: dict[str, tuple[str, ...]] = {
    "javascript": ("js", "javascript", "ecmascript", "node.js", "nodejs", "node"),
    "typescript": ("ts", "typescript"),
    "python": ("python", "python3", "py"),
    "react": ("react", "reactjs", "react.js"),
    "vue": ("vue", "vuejs", "vue.js"),
    "angular": ("angular", "angularjs"),
    "sql": ("sql", "mysql", "postgresql", "postgres", "sqlite"),
    "aws": ("aws", "amazon web services", "ec2", "s3", "lambda"),
    "docker": ("docker", "containerization", "containers"),
    "kubernetes": ("kubernetes", "k8s", "container orchestration"),
    "golang": ("go", "golang"),
    "csharp": ("c#", "csharp", ".net", "dotnet"),
    "machine learning": ("machine learning", "ml"),
    "gcp": ("gcp", "google cloud", "google cloud platform"),
}

_ALIAS_TO_CANONICAL: dict[str, str] = {
    alias: canonical for canonical, aliases in SKILL_SYNONYMS.items() for alias in aliases
}


def canonical_skill(skill: str) -> str:
    """Return the synonym-group name for ``skill``, or the normalised skill itself."""

    term = normalize_term(skill)
    return _ALIAS_TO_CANONICAL.get(term, term)


def are_synonyms(left: str, right: str) -> bool:
    """True when both terms belong to the same synonym group."""

    left_key = normalize_term(left)
    right_key = normalize_term(right)
    if left_key not in _ALIAS_TO_CANONICAL or right_key not in _ALIAS_TO_CANONICAL:
        return False
    return _ALIAS_TO_CANONICAL[left_key] == _ALIAS_TO_CANONICAL[right_key]


def _alias_pattern(alias: str) -> re.Pattern[str]:
    return re.compile(r"(?<![a-z0-9])" + re.escape(alias) + r"(?![a-z0-9])")


def find_known_skills(text: str, vocabulary: set[str] | frozenset[str] | None = None) -> list[str]:
    """Return canonical skills mentioned in free text, in order of first appearance.

    ``vocabulary`` extends the synonym aliases with extra canonical terms, for
    example the keys of an embedding table.
    """

    lowered = normalize_term(text)
    if not lowered:
        return []
    candidates: dict[str, str] = dict(_ALIAS_TO_CANONICAL)
    for term in vocabulary or ():
        candidates.setdefault(term, term)
    # Single-letter and two-letter aliases like "go" or "ts" are too noisy in prose.
    found: list[tuple[int, str]] = []
    for alias, canonical in candidates.items():
        if len(alias) < 3 and alias not in {"c#", "js", "ml"}:
            continue
        match = _alias_pattern(alias).search(lowered)
        if match:
            found.append((match.start(), canonical))
    found.sort()
    ordered: list[str] = []
    for _, canonical in found:
        if canonical not in ordered:
            ordered.append(canonical)
    return ordered
