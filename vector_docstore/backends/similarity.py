"""Exact cosine similarity ranking for the in-memory backend."""

from dataclasses import dataclass, field
from typing import Generic, Iterable, List, Optional, Sequence, Tuple, TypeVar

import numpy as np

T = TypeVar('T')


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two equal-length vectors.

    Returns 0.0 when either vector has zero norm. Raises ValueError when the
    lengths differ.
    """
    vec_a = np.asarray(a, dtype=np.float64)
    vec_b = np.asarray(b, dtype=np.float64)
    if vec_a.shape != vec_b.shape:
        raise ValueError(
            f"Vector length mismatch: {vec_a.shape[0]} != {vec_b.shape[0]}"
        )

    norm_a = np.linalg.norm(vec_a)
    norm_b = np.linalg.norm(vec_b)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    similarity = np.dot(vec_a, vec_b) / (norm_a * norm_b)
    return float(np.clip(similarity, -1.0, 1.0))


@dataclass
class ScoredCandidate(Generic[T]):
    """A candidate paired with its similarity to the query."""

    item: T
    score: float


@dataclass
class Ranking(Generic[T]):
    """Ranked, truncated hits plus the candidates that could not be scored."""

    hits: List[ScoredCandidate[T]] = field(default_factory=list)
    skipped: List[T] = field(default_factory=list)


def rank(
    query: Sequence[float],
    candidates: Iterable[Tuple[T, Optional[Sequence[float]]]],
    top_k: int,
) -> Ranking[T]:
    """Score candidates against the query and keep the best ``top_k``.

    Candidates without an embedding are left out entirely. Candidates whose
    embedding length differs from the query are skipped and reported in
    ``Ranking.skipped``. Equal scores keep the order the candidates were
    enumerated in, and truncation happens only after sorting.
    """
    if top_k < 1:
        raise ValueError("top_k must be a positive integer")

    scored: List[ScoredCandidate[T]] = []
    skipped: List[T] = []
    for item, embedding in candidates:
        if embedding is None:
            continue
        try:
            score = cosine_similarity(query, embedding)
        except ValueError:
            skipped.append(item)
            continue
        scored.append(ScoredCandidate(item=item, score=score))

    # sorted() is stable, so ties keep enumeration order
    ordered = sorted(scored, key=lambda candidate: -candidate.score)
    return Ranking(hits=ordered[:top_k], skipped=skipped)
