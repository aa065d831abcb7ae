"""Exchange observations between machines through chunk files in a git repository."""

from __future__ import annotations

import json
import os
import subprocess
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .records import Observation, Session


@dataclass
class SyncChunk:
    """A batch of observations and sessions taken from one machine."""

    chunk_id: str
    source: str
    project: str
    exported_at: str
    observations: list[Observation] = field(default_factory=list)
    sessions: list[Session] = field(default_factory=list)

    def _to_dict(self) -> dict[str, Any]:
        return {
            "chunk_id": self.chunk_id,
            "source": self.source,
            "project": self.project,
            "exported_at": self.exported_at,
            "observations": [obs.to_dict() for obs in self.observations],
            "sessions": [session.to_dict() for session in self.sessions],
        }

    def to_json(self) -> str:
        """Return the chunk as indented JSON."""
        return json.dumps(self._to_dict(), indent=2, ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> SyncChunk:
        """Parse a chunk from JSON; raise ValueError if it is malformed."""
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("chunk must be an object")
        strings = {}
        for key in ("chunk_id", "source", "project", "exported_at"):
            value = data.get(key)
            if not isinstance(value, str):
                raise ValueError(f"field {key!r} must be a string")
            strings[key] = value
        observations = data.get("observations")
        sessions = data.get("sessions")
        if not isinstance(observations, list):
            raise ValueError("field 'observations' must be a list")
        if not isinstance(sessions, list):
            raise ValueError("field 'sessions' must be a list")
        return cls(
            **strings,
            observations=[Observation.from_dict(item) for item in observations],
            sessions=[Session.from_dict(item) for item in sessions],
        )


def _hostname() -> str:
    return os.environ.get("HOSTNAME") or os.environ.get("COMPUTERNAME") or "unknown"


def create_chunk(db: Any, project: str | None = None) -> SyncChunk:
    """Gather every observation and session (of one project, or all) into a new chunk."""
    return SyncChunk(
        chunk_id=str(uuid.uuid4()),
        source=_hostname(),
        project=project if project is not None else "all",
        exported_at=datetime.now(timezone.utc).isoformat(),
        observations=list(db.list_all_observations_for_export(project)),
        sessions=list(db.list_all_sessions_for_export(project)),
    )


def import_chunk(db: Any, json_text: str) -> int:
    """Load a chunk's observations into the database; return how many were new.

    A chunk that has been seen before is skipped entirely.
    """
    chunk = SyncChunk.from_json(json_text)
    if not db.record_sync_chunk(chunk.chunk_id):
        return 0
    return sum(1 for obs in chunk.observations if db.import_observation(obs))


def capture_mutation(
    db: Any, entity: str, entity_key: str, op: str, payload: str, project: str
) -> int:
    """Record a write for replication and return its sequence number."""
    return db.insert_sync_mutation(entity, entity_key, op, payload, project)


def _git(args: list[str], cwd: Path) -> subprocess.CompletedProcess:
    return subprocess.run(["git", *args], cwd=cwd, capture_output=True)


def _check(result: subprocess.CompletedProcess, action: str) -> None:
    if result.returncode != 0:
        stderr = (result.stderr or b"").decode("utf-8", errors="replace")
        raise RuntimeError(f"git {action} failed: {stderr}")


def sync_via_git(db: Any, sync_dir: str | os.PathLike, project: str) -> tuple[int, int]:
    """Write a chunk, commit and push, pull, then load chunks; return (written, loaded)."""
    sync_dir = Path(sync_dir)
    chunks_dir = sync_dir / "chunks" / project
    chunks_dir.mkdir(parents=True, exist_ok=True)

    chunk = create_chunk(db, project)
    (chunks_dir / f"{chunk.chunk_id}.json").write_text(chunk.to_json(), encoding="utf-8")
    written = len(chunk.observations)

    _check(_git(["add", "."], sync_dir), "add")

    commit = _git(["commit", "-m", f"sync: {project} chunk {chunk.chunk_id}"], sync_dir)
    if commit.returncode == 0:
        _check(_git(["push"], sync_dir), "push")

    _check(_git(["pull", "--rebase"], sync_dir), "pull")

    loaded = 0
    for path in sorted(chunks_dir.iterdir()):
        if path.suffix == ".json":
            loaded += import_chunk(db, path.read_text(encoding="utf-8"))
    return written, loaded


def init_sync_repo(sync_dir: str | os.PathLike, remote_url: str | None = None) -> None:
    """Clone the remote into the directory, or start an empty repository there."""
    sync_dir = Path(sync_dir)
    if (sync_dir / ".git").exists():
        return
    sync_dir.mkdir(parents=True, exist_ok=True)
    if remote_url is not None:
        _check(_git(["clone", remote_url, "."], sync_dir), "clone")
    else:
        _check(_git(["init"], sync_dir), "init")