"""Cosine similarity and exhaustive best-match search."""
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from ragbot.exceptions import DimensionMismatch
from ragbot.rag.store_json import Record


@dataclass(frozen=True)
class Match:
    """The best-scoring record for a query."""

    text: str
    score: float
    index: int


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between two equal-length vectors.

    Returns 0.0 when either vector has zero magnitude.

    Raises:
        DimensionMismatch: If the vectors differ in length
    """
    vec_a = np.asarray(a, dtype=np.float64)
    vec_b = np.asarray(b, dtype=np.float64)

    if vec_a.shape != vec_b.shape:
        raise DimensionMismatch(
            f"Cannot compare vectors of length {vec_a.size} and {vec_b.size}"
        )

    norm_a = np.linalg.norm(vec_a)
    norm_b = np.linalg.norm(vec_b)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    similarity = np.dot(vec_a, vec_b) / (norm_a * norm_b)
    return float(np.clip(similarity, -1.0, 1.0))


def best_match(
    query: Sequence[float], records: Sequence[Record]
) -> Optional[Match]:
    """Scan every record once and keep the strictly highest similarity.

    Ties keep the earliest record. Returns None when there are no records.
    """
    best: Optional[Match] = None

    for index, record in enumerate(records):
        score = cosine_similarity(query, record.embedding)
        if best is None or score > best.score:
            best = Match(text=record.text, score=score, index=index)

    return best


def is_relevant(match: Optional[Match], threshold: float) -> bool:
    """A match counts as context only when it scores strictly above threshold."""
    return match is not None and match.score > threshold
