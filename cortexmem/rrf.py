"""Reciprocal Rank Fusion of two ranked result lists."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable


def rrf_fuse(
    fts_ranks: Iterable[tuple[int, int]],
    vec_ranks: Iterable[tuple[int, int]],
    k: int,
) -> list[tuple[int, float]]:
    """Combine two lists of ``(id, rank)`` pairs into ``(id, score)`` pairs.

    Each appearance contributes ``1 / (k + rank)``; the result is sorted by
    score, highest first.
    """
    scores: dict[int, float] = defaultdict(float)
    for ranks in (fts_ranks, vec_ranks):
        for item_id, rank in ranks:
            scores[item_id] += 1.0 / (k + rank)
    return sorted(scores.items(), key=lambda pair: pair[1], reverse=True)