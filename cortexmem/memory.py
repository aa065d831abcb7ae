"""Saving observations with auto-tagging, de-duplication, indexing and embedding."""

from __future__ import annotations

import contextlib
import logging
from dataclasses import dataclass, replace
from typing import Any

from . import autotag
from .dedup import DedupResult, DedupStatus, check_dedup
from .records import NewObservation

logger = logging.getLogger(__name__)

AUTO_FACT_LIMIT = 3


@dataclass
class SaveResult:
    """Where an observation ended up and whether a vector was stored for it."""

    id: int
    dedup_status: DedupResult
    was_embedded: bool


def _search_text(obs: NewObservation) -> str:
    parts = [obs.title, obs.content, *(obs.concepts or []), *(obs.facts or [])]
    return "\n".join(part for part in parts if part)


class MemoryManager:
    """Stores observations in a database and, when available, their embeddings."""

    def __init__(self, db: Any, embed_mgr: Any = None) -> None:
        self.db = db
        self.embed_mgr = embed_mgr

    def save_observation(self, obs: NewObservation) -> SaveResult:
        """Save an observation, skipping recent duplicates and upserting by topic key."""
        obs = self._autotag(obs)
        status = check_dedup(self.db, obs)

        if status.status is DedupStatus.HASH_MATCH:
            return SaveResult(status.existing_id, status, False)

        if status.status is DedupStatus.TOPIC_KEY_UPSERT:
            obs_id = self.db.upsert_observation(obs)
            with contextlib.suppress(Exception):
                self.db.remove_from_fts(obs_id)
        else:
            obs_id = self.db.insert_observation(obs)

        self.db.sync_observation_to_fts(obs_id)
        return SaveResult(obs_id, status, self._try_embed(obs_id, obs))

    @staticmethod
    def _autotag(obs: NewObservation) -> NewObservation:
        concepts = obs.concepts
        facts = obs.facts
        if not concepts:
            keywords = autotag.extract_keywords(
                f"{obs.title} {obs.content}", autotag.DEFAULT_KEYWORD_LIMIT
            )
            if keywords:
                concepts = keywords
        if not facts:
            extracted = autotag.extract_facts(obs.content, AUTO_FACT_LIMIT)
            if extracted:
                facts = extracted
        return replace(obs, concepts=concepts, facts=facts)

    def _try_embed(self, obs_id: int, obs: NewObservation) -> bool:
        mgr = self.embed_mgr
        if mgr is None:
            return False

        if not mgr.is_model_available():
            logger.info("Embedding model not loaded, downloading on first use")
            try:
                mgr.download_model()
            except Exception:
                return False

        try:
            embedding = mgr.embed(_search_text(obs))
        except Exception:
            return False

        with contextlib.suppress(Exception):
            self.db.delete_vector(obs_id)
        try:
            self.db.insert_vector(obs_id, embedding)
        except Exception:
            return False
        return True