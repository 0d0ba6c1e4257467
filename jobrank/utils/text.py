"""Text processing helpers."""
from __future__ import annotations

import re
from typing import Iterable

_TOKEN_PATTERN = re.compile(r"[a-z0-9][a-z0-9+#.]*")


def clean_whitespace(value: str) -> str:
    """Collapse multiple whitespace characters into single spaces."""

    return re.sub(r"\s+", " ", value).strip()


def normalize_term(value: str) -> str:
    """Lower-case and whitespace-normalise a skill or keyword."""

    return clean_whitespace(value or "").lower()


def contains_phrase(text: str, phrase: str) -> bool:
    """Return True when ``phrase`` occurs in ``text`` on word boundaries (case-insensitive)."""

    phrase = normalize_term(phrase)
    if not phrase:
        return False
    pattern = r"(?<![a-z0-9])" + re.escape(phrase) + r"(?![a-z0-9])"
    return re.search(pattern, text.lower()) is not None


def tokenize(text: str) -> set[str]:
    """Return the set of lower-case word tokens in ``text``."""

    return {token.rstrip(".") for token in _TOKEN_PATTERN.findall((text or "").lower())}


def split_list(value: object) -> list[str]:
    """Coerce a comma-separated string or an iterable into a list of stripped strings."""

    if value is None:
        return []
    if isinstance(value, str):
        items: Iterable[object] = value.split(",")
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = value
    else:
        raise TypeError(f"expected string or list, got {type(value).__name__}")
    return [str(item).strip() for item in items if item is not None and str(item).strip()]


def dedupe_preserving_order(values: Iterable[str]) -> list[str]:
    """Drop case-insensitive duplicates while keeping first occurrences."""

    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        key = normalize_term(value)
        if key and key not in seen:
            seen.add(key)
            result.append(value)
    return result
