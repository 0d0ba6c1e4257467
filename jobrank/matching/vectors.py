"""Vector similarity and deterministic skill embeddings."""
from __future__ import annotations

import threading
from typing import Mapping, Sequence

import numpy as np
from cachetools import LRUCache
from numpy.typing import NDArray
from sklearn.feature_extraction.text import HashingVectorizer

from jobrank.matching.vocabulary import canonical_skill, find_known_skills
from jobrank.utils.text import normalize_term

SKILL_AXES: tuple[str, ...] = (
    "frontend",
    "backend",
    "data",
    "cloud",
    "mobile",
    "ml",
    "systems",
    "design",
    "management",
    "security",
)

SKILL_EMBEDDINGS: dict[str, tuple[float, ...]] = {
    "javascript": (0.9, 0.5, 0.0, 0.0, 0.2, 0.0, 0.0, 0.1, 0.0, 0.0),
    "typescript": (0.9, 0.5, 0.0, 0.0, 0.1, 0.0, 0.1, 0.0, 0.0, 0.0),
    "react": (1.0, 0.1, 0.0, 0.0, 0.3, 0.0, 0.0, 0.3, 0.0, 0.0),
    "vue": (1.0, 0.1, 0.0, 0.0, 0.1, 0.0, 0.0, 0.3, 0.0, 0.0),
    "angular": (1.0, 0.2, 0.0, 0.0, 0.1, 0.0, 0.0, 0.2, 0.0, 0.0),
    "html": (0.9, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.4, 0.0, 0.0),
    "css": (0.8, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.6, 0.0, 0.0),
    "python": (0.0, 0.8, 0.6, 0.1, 0.0, 0.5, 0.1, 0.0, 0.0, 0.0),
    "java": (0.0, 0.9, 0.2, 0.1, 0.3, 0.0, 0.2, 0.0, 0.0, 0.0),
    "golang": (0.0, 0.9, 0.1, 0.4, 0.0, 0.0, 0.4, 0.0, 0.0, 0.0),
    "csharp": (0.1, 0.9, 0.1, 0.1, 0.1, 0.0, 0.2, 0.0, 0.0, 0.0),
    "ruby": (0.1, 0.9, 0.1, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0),
    "php": (0.3, 0.9, 0.1, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0),
    "rust": (0.0, 0.5, 0.0, 0.1, 0.0, 0.0, 1.0, 0.0, 0.0, 0.2),
    "c++": (0.0, 0.4, 0.0, 0.0, 0.0, 0.1, 1.0, 0.0, 0.0, 0.1),
    "sql": (0.0, 0.5, 1.0, 0.0, 0.0, 0.1, 0.0, 0.0, 0.0, 0.0),
    "mongodb": (0.0, 0.6, 0.8, 0.1, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0),
    "redis": (0.0, 0.6, 0.6, 0.2, 0.0, 0.0, 0.2, 0.0, 0.0, 0.0),
    "spark": (0.0, 0.2, 1.0, 0.3, 0.0, 0.4, 0.1, 0.0, 0.0, 0.0),
    "pandas": (0.0, 0.1, 1.0, 0.0, 0.0, 0.5, 0.0, 0.0, 0.0, 0.0),
    "machine learning": (0.0, 0.1, 0.6, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 0.0),
    "tensorflow": (0.0, 0.1, 0.5, 0.0, 0.0, 1.0, 0.1, 0.0, 0.0, 0.0),
    "pytorch": (0.0, 0.1, 0.5, 0.0, 0.0, 1.0, 0.1, 0.0, 0.0, 0.0),
    "aws": (0.0, 0.3, 0.1, 1.0, 0.0, 0.0, 0.2, 0.0, 0.0, 0.2),
    "gcp": (0.0, 0.3, 0.2, 1.0, 0.0, 0.0, 0.2, 0.0, 0.0, 0.2),
    "azure": (0.0, 0.3, 0.1, 1.0, 0.0, 0.0, 0.2, 0.0, 0.0, 0.2),
    "docker": (0.0, 0.4, 0.0, 0.9, 0.0, 0.0, 0.4, 0.0, 0.0, 0.1),
    "kubernetes": (0.0, 0.3, 0.0, 1.0, 0.0, 0.0, 0.4, 0.0, 0.0, 0.1),
    "terraform": (0.0, 0.1, 0.0, 1.0, 0.0, 0.0, 0.2, 0.0, 0.0, 0.1),
    "linux": (0.0, 0.3, 0.0, 0.5, 0.0, 0.0, 0.9, 0.0, 0.0, 0.3),
    "swift": (0.2, 0.1, 0.0, 0.0, 1.0, 0.0, 0.1, 0.2, 0.0, 0.0),
    "kotlin": (0.1, 0.4, 0.0, 0.0, 1.0, 0.0, 0.1, 0.1, 0.0, 0.0),
    "react native": (0.6, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.2, 0.0, 0.0),
    "figma": (0.3, 0.0, 0.0, 0.0, 0.1, 0.0, 0.0, 1.0, 0.0, 0.0),
    "ux": (0.3, 0.0, 0.0, 0.0, 0.1, 0.0, 0.0, 1.0, 0.2, 0.0),
    "agile": (0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 1.0, 0.0),
    "project management": (0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.1, 1.0, 0.0),
    "leadership": (0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 1.0, 0.1),
    "cybersecurity": (0.0, 0.1, 0.0, 0.3, 0.0, 0.0, 0.4, 0.0, 0.0, 1.0),
    "penetration testing": (0.0, 0.1, 0.0, 0.1, 0.0, 0.0, 0.4, 0.0, 0.0, 1.0),
}

HASHED_DIMENSIONS = 256
MEMO_SIZE = 4096


def cosine_similarity(vector_a: NDArray[np.float64], vector_b: NDArray[np.float64]) -> float:
    """Return cosine similarity between two vectors; 0.0 when either is all zeros."""

    denom = float(np.linalg.norm(vector_a) * np.linalg.norm(vector_b))
    if denom == 0.0:
        return 0.0
    return float(np.dot(vector_a, vector_b) / denom)


class SkillEmbedder:
    """Map skill strings to fixed-length vectors.

    A vector is ``[axes | hashed]``: known skills (after synonym
    canonicalisation) fill the hand-built axis block, phrases mentioning known
    skills take the mean of those axis vectors, and any other term gets a
    character-trigram pseudo-vector in the hashed block. The function is pure
    and deterministic, so it can be swapped for a different table. The most
    recent ``memo_size`` vectors are memoised.
    """

    def __init__(
        self,
        table: Mapping[str, Sequence[float]] | None = None,
        *,
        hashed_dimensions: int = HASHED_DIMENSIONS,
        memo_size: int = MEMO_SIZE,
    ) -> None:
        source = SKILL_EMBEDDINGS if table is None else table
        self._table = {
            canonical_skill(name): np.asarray(values, dtype=np.float64) for name, values in source.items()
        }
        widths = {vector.shape[0] for vector in self._table.values()}
        if len(widths) > 1:
            raise ValueError("embedding table vectors must share one length")
        self._axis_width = widths.pop() if widths else 0
        self._hasher = HashingVectorizer(
            analyzer="char_wb",
            ngram_range=(3, 3),
            n_features=hashed_dimensions,
            alternate_sign=False,
            norm="l2",
        )
        self._hashed_width = hashed_dimensions
        self._vocabulary = frozenset(self._table)
        self._memo: LRUCache[str, NDArray[np.float64]] = LRUCache(maxsize=memo_size)
        self._memo_lock = threading.Lock()

    @property
    def dimensions(self) -> int:
        return self._axis_width + self._hashed_width

    def embed(self, skill: str) -> NDArray[np.float64]:
        """Return the vector for one skill string or free-text phrase."""

        key = normalize_term(skill)
        with self._memo_lock:
            cached = self._memo.get(key)
        if cached is not None:
            return cached

        vector = np.zeros(self.dimensions, dtype=np.float64)
        canonical = canonical_skill(key)
        if canonical in self._table:
            vector[: self._axis_width] = self._table[canonical]
        else:
            mentioned = [name for name in find_known_skills(key, self._vocabulary) if name in self._table]
            if mentioned:
                vector[: self._axis_width] = np.mean([self._table[name] for name in mentioned], axis=0)
            elif key:
                hashed = self._hasher.transform([key]).toarray()[0]
                vector[self._axis_width :] = hashed
        with self._memo_lock:
            self._memo[key] = vector
        return vector

    def similarity(self, left: str, right: str) -> float:
        """Cosine similarity between the vectors of two skill strings."""

        return cosine_similarity(self.embed(left), self.embed(right))
