"""Hybrid full-text and vector search with rank fusion and score boosts."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from .rrf import rrf_fuse

logger = logging.getLogger(__name__)

RRF_K = 60
FTS_FETCH_LIMIT = 50
VEC_FETCH_LIMIT = 50

ACCESS_BOOST_PER_HIT = 0.1
ACCESS_BOOST_CAP = 2.0
FEEDBACK_BOOST_PER_HIT = 0.1
FEEDBACK_BOOST_CAP = 2.0
RECENCY_DECAY_RATE = 0.01

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class SearchParams:
    """A search query with optional project, type and scope filters."""

    query: str
    project: str | None = None
    obs_type: str | None = None
    scope: str | None = None
    limit: int = 10


@dataclass
class SearchResult:
    """One ranked search hit."""

    id: int
    title: str
    obs_type: str
    concepts: list[str] | None
    created_at: str
    score: float


def compute_recency_factor(updated_at: str) -> float:
    """Factor in (0, 1] that decays with whole days since the last update."""
    try:
        updated = datetime.strptime(updated_at, TIMESTAMP_FORMAT)
    except ValueError:
        return 1.0
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    days = max((now - updated).days, 0)
    return 1.0 / (1.0 + days * RECENCY_DECAY_RATE)


def apply_boosts(
    rrf_score: float, updated_at: str, access_count: int, feedback_count: int
) -> float:
    """Scale a fused score by recency, access count and search feedback."""
    access_factor = min(1.0 + ACCESS_BOOST_PER_HIT * access_count, ACCESS_BOOST_CAP)
    feedback_factor = min(1.0 + FEEDBACK_BOOST_PER_HIT * feedback_count, FEEDBACK_BOOST_CAP)
    return rrf_score * compute_recency_factor(updated_at) * access_factor * feedback_factor


class HybridSearcher:
    """Searches observations by text and, when a model is present, by embedding."""

    def __init__(self, db: Any, embed_mgr: Any = None) -> None:
        self.db = db
        self.embed_mgr = embed_mgr

    def _vector_ranks(self, query: str) -> list[tuple[int, int]]:
        mgr = self.embed_mgr
        if mgr is None:
            return []
        if not mgr.is_model_available():
            logger.info("Embedding model not loaded, downloading on first use")
            try:
                mgr.download_model()
            except Exception:
                pass
        if not mgr.is_model_available():
            return []
        try:
            embedding = mgr.embed(query)
        except Exception:
            return []
        hits = self.db.search_vector(embedding, VEC_FETCH_LIMIT)
        return [(hit.rowid, rank) for rank, hit in enumerate(hits)]

    def _feedback_count(self, obs_id: int) -> int:
        try:
            return self.db.get_feedback_count(obs_id)
        except Exception as exc:
            logger.warning("Failed to get feedback count for obs %s: %s", obs_id, exc)
            return 0

    def search(self, params: SearchParams) -> list[SearchResult]:
        """Return up to ``params.limit`` matching observations, best first."""
        fts_hits = self.db.search_fts(params.query, params.project, FTS_FETCH_LIMIT)
        fts_ranks = [(hit.rowid, rank) for rank, hit in enumerate(fts_hits)]
        fused = rrf_fuse(fts_ranks, self._vector_ranks(params.query), RRF_K)

        results: list[SearchResult] = []
        for obs_id, rrf_score in fused:
            if len(results) >= params.limit:
                break
            obs = self.db.get_observation(obs_id)
            if obs is None or obs.deleted_at is not None:
                continue
            if params.obs_type is not None and obs.obs_type != params.obs_type:
                continue
            if params.scope is not None and obs.scope != params.scope:
                continue
            if params.project is not None and obs.project != params.project:
                continue

            score = apply_boosts(
                rrf_score, obs.updated_at, obs.access_count, self._feedback_count(obs.id)
            )
            results.append(
                SearchResult(
                    id=obs.id,
                    title=obs.title,
                    obs_type=obs.obs_type,
                    concepts=obs.concepts,
                    created_at=obs.created_at,
                    score=score,
                )
            )

        results.sort(key=lambda result: result.score, reverse=True)
        return results