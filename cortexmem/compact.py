"""Apply tier promotion and archival to stored observations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .decay import TierActionKind, evaluate_tier

PROJECT_LIST_LIMIT = 10_000


@dataclass
class CompactionStats:
    """Counts of observations promoted, archived and left unchanged."""

    promoted: int = 0
    archived: int = 0
    unchanged: int = 0


def run_compaction(db: Any, project: str | None = None) -> CompactionStats:
    """Evaluate every active observation (of one project, or all) and apply the result."""
    if project is not None:
        observations = db.list_observations(project, PROJECT_LIST_LIMIT)
    else:
        observations = db.list_all_active_observations()

    stats = CompactionStats()
    for obs in observations:
        action = evaluate_tier(obs)
        if action.kind is TierActionKind.PROMOTE:
            db.update_tier(obs.id, action.tier)
            stats.promoted += 1
        elif action.kind is TierActionKind.ARCHIVE:
            db.soft_delete(obs.id)
            stats.archived += 1
        else:
            stats.unchanged += 1
    return stats