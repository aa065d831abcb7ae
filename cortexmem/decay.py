"""Tier promotion and archival rules for observations."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime, timezone

from .records import Observation

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class TierActionKind(enum.Enum):
    PROMOTE = "promote"
    ARCHIVE = "archive"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class TierAction:
    """What to do with an observation; ``tier`` is set for promotions."""

    kind: TierActionKind
    tier: str | None = None

    @classmethod
    def promote(cls, tier: str) -> TierAction:
        return cls(TierActionKind.PROMOTE, tier)

    @classmethod
    def archive(cls) -> TierAction:
        return cls(TierActionKind.ARCHIVE)

    @classmethod
    def unchanged(cls) -> TierAction:
        return cls(TierActionKind.UNCHANGED)


def days_since(datetime_str: str) -> int:
    """Whole days elapsed since a UTC timestamp; 0 if unparseable or in the future."""
    try:
        then = datetime.strptime(datetime_str, TIMESTAMP_FORMAT)
    except ValueError:
        return 0
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return max((now - then).days, 0)


def evaluate_tier(obs: Observation) -> TierAction:
    """Decide whether an observation is promoted, archived or left alone.

    Buffer entries move to working after two accesses and are archived after
    30 idle days; working entries move to core after five accesses or three
    revisions and are archived after 90 idle days; core is never touched.
    """
    idle_days = days_since(obs.updated_at)

    if obs.tier == "buffer":
        if obs.access_count >= 2:
            return TierAction.promote("working")
        if idle_days >= 30:
            return TierAction.archive()
    elif obs.tier == "working":
        if obs.access_count >= 5 or obs.revision_count >= 3:
            return TierAction.promote("core")
        if idle_days >= 90:
            return TierAction.archive()
    return TierAction.unchanged()