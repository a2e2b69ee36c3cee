# memhub/knowledge_base/retrieval/similarity.py
"""Vector similarity helpers for in-process ranking."""

import math
from typing import Iterable, Optional, Sequence


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine of the angle between two vectors of equal length.

    Returns 0.0 when either vector has zero magnitude.

    Raises:
        ValueError: vectors differ in length
    """
    if len(a) != len(b):
        raise ValueError(f"Vector dimension mismatch: {len(a)} != {len(b)}")

    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for x, y in zip(a, b):
        dot += x * y
        norm_a += x * x
        norm_b += y * y

    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    return dot / (math.sqrt(norm_a) * math.sqrt(norm_b))


def best_similarity(query_vectors: Iterable[Sequence[float]], candidate: Sequence[float]) -> Optional[float]:
    """
    Highest cosine similarity between *candidate* and any query vector.

    Query vectors of a different dimension are ignored; None means no
    query vector was comparable.
    """
    best: Optional[float] = None
    for query_vector in query_vectors:
        if len(query_vector) != len(candidate):
            continue
        score = cosine_similarity(query_vector, candidate)
        if best is None or score > best:
            best = score
    return best
