"""Duplicate detection for observations about to be saved."""

from __future__ import annotations

import enum
import hashlib
from dataclasses import dataclass
from typing import Any

from .records import NewObservation

DEDUP_WINDOW_MINUTES = 15


class DedupStatus(enum.Enum):
    NEW_CONTENT = "new_content"
    HASH_MATCH = "hash_match"
    TOPIC_KEY_UPSERT = "topic_key_upsert"


@dataclass(frozen=True)
class DedupResult:
    """Outcome of a duplicate check; ``existing_id`` names the matched observation."""

    status: DedupStatus
    existing_id: int | None = None

    @classmethod
    def new_content(cls) -> DedupResult:
        return cls(DedupStatus.NEW_CONTENT)

    @classmethod
    def hash_match(cls, existing_id: int) -> DedupResult:
        return cls(DedupStatus.HASH_MATCH, existing_id)

    @classmethod
    def topic_key_upsert(cls, existing_id: int) -> DedupResult:
        return cls(DedupStatus.TOPIC_KEY_UPSERT, existing_id)


def compute_content_hash(content: str) -> str:
    """Hex SHA-256 digest of the UTF-8 encoded content."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def check_dedup(db: Any, obs: NewObservation) -> DedupResult:
    """Classify an observation as an exact recent duplicate, a topic upsert or new.

    An identical content hash within the time window wins over a topic key match
    in the same project.
    """
    existing = db.find_by_content_hash(compute_content_hash(obs.content), DEDUP_WINDOW_MINUTES)
    if existing is not None:
        return DedupResult.hash_match(existing.id)

    if obs.topic_key is not None:
        existing = db.find_by_topic_key(obs.project, obs.topic_key)
        if existing is not None:
            return DedupResult.topic_key_upsert(existing.id)

    return DedupResult.new_content()