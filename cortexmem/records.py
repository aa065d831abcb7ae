"""Observation and session records and their JSON-ready dictionary form."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


def _field(data: dict[str, Any], key: str, kind: type, optional: bool = False) -> Any:
    value = data.get(key)
    if value is None:
        if optional:
            return None
        raise ValueError(f"missing field {key!r}")
    if kind is int and isinstance(value, bool) or not isinstance(value, kind):
        raise ValueError(f"field {key!r} must be {kind.__name__}")
    return value


def _string_list(data: dict[str, Any], key: str) -> list[str] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"field {key!r} must be a list of strings")
    return list(value)


@dataclass
class NewObservation:
    """An observation that has not been stored yet."""

    project: str
    title: str
    content: str
    obs_type: str
    concepts: list[str] | None = None
    facts: list[str] | None = None
    files: list[str] | None = None
    topic_key: str | None = None
    scope: str = "project"
    session_id: int | None = None


@dataclass
class Observation:
    """A stored observation."""

    id: int
    project: str
    obs_type: str
    title: str
    content: str
    scope: str
    tier: str
    access_count: int
    revision_count: int
    content_hash: str
    created_at: str
    updated_at: str
    session_id: int | None = None
    topic_key: str | None = None
    concepts: list[str] | None = None
    facts: list[str] | None = None
    files: list[str] | None = None
    deleted_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the observation as a dictionary with a ``type`` key."""
        return {
            "id": self.id,
            "session_id": self.session_id,
            "project": self.project,
            "topic_key": self.topic_key,
            "type": self.obs_type,
            "title": self.title,
            "content": self.content,
            "concepts": None if self.concepts is None else list(self.concepts),
            "facts": None if self.facts is None else list(self.facts),
            "files": None if self.files is None else list(self.files),
            "scope": self.scope,
            "tier": self.tier,
            "access_count": self.access_count,
            "revision_count": self.revision_count,
            "content_hash": self.content_hash,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "deleted_at": self.deleted_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Observation:
        """Build an observation from its dictionary form; raise ValueError if invalid."""
        if not isinstance(data, dict):
            raise ValueError("observation must be an object")
        return cls(
            id=_field(data, "id", int),
            session_id=_field(data, "session_id", int, optional=True),
            project=_field(data, "project", str),
            topic_key=_field(data, "topic_key", str, optional=True),
            obs_type=_field(data, "type", str),
            title=_field(data, "title", str),
            content=_field(data, "content", str),
            concepts=_string_list(data, "concepts"),
            facts=_string_list(data, "facts"),
            files=_string_list(data, "files"),
            scope=_field(data, "scope", str),
            tier=_field(data, "tier", str),
            access_count=_field(data, "access_count", int),
            revision_count=_field(data, "revision_count", int),
            content_hash=_field(data, "content_hash", str),
            created_at=_field(data, "created_at", str),
            updated_at=_field(data, "updated_at", str),
            deleted_at=_field(data, "deleted_at", str, optional=True),
        )


@dataclass
class Session:
    """A working session of an agent in a project directory."""

    id: int
    project: str
    directory: str
    started_at: str
    ended_at: str | None = None
    summary: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the session as a dictionary."""
        return {
            "id": self.id,
            "project": self.project,
            "directory": self.directory,
            "started_at": self.started_at,
            "ended_at": self.ended_at,
            "summary": self.summary,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Session:
        """Build a session from its dictionary form; raise ValueError if invalid."""
        if not isinstance(data, dict):
            raise ValueError("session must be an object")
        return cls(
            id=_field(data, "id", int),
            project=_field(data, "project", str),
            directory=_field(data, "directory", str),
            started_at=_field(data, "started_at", str),
            ended_at=_field(data, "ended_at", str, optional=True),
            summary=_field(data, "summary", str, optional=True),
        )