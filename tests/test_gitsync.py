import json
import subprocess
from dataclasses import replace
from datetime import datetime
from unittest.mock import patch

import pytest

from cortexmem.gitsync import (
    SyncChunk,
    capture_mutation,
    create_chunk,
    import_chunk,
    init_sync_repo,
    sync_via_git,
)
from cortexmem.records import Observation, Session


class FakeDb:
    def __init__(self):
        self.observations = []
        self.sessions = []
        self.chunks = set()
        self.mutations = []

    def add_observation(self, **overrides):
        values = dict(
            id=len(self.observations) + 1,
            project="proj",
            obs_type="decision",
            title="Test obs",
            content="Content",
            scope="project",
            tier="buffer",
            access_count=0,
            revision_count=1,
            content_hash=f"hash-{len(self.observations) + 1}",
            created_at="2026-03-09 00:00:00",
            updated_at="2026-03-09 00:00:00",
        )
        values.update(overrides)
        obs = Observation(**values)
        self.observations.append(obs)
        return obs

    def create_session(self, project, directory):
        session = Session(len(self.sessions) + 1, project, directory, "2026-03-09 00:00:00")
        self.sessions.append(session)
        return session.id

    def list_all_observations_for_export(self, project):
        return [o for o in self.observations if project is None or o.project == project]

    def list_all_sessions_for_export(self, project):
        return [s for s in self.sessions if project is None or s.project == project]

    def record_sync_chunk(self, chunk_id):
        if chunk_id in self.chunks:
            return False
        self.chunks.add(chunk_id)
        return True

    def import_observation(self, obs):
        if any(o.content_hash == obs.content_hash for o in self.observations):
            return False
        self.observations.append(replace(obs, id=len(self.observations) + 1))
        return True

    def insert_sync_mutation(self, entity, entity_key, op, payload, project):
        self.mutations.append((entity, entity_key, op, payload, project))
        return len(self.mutations)


def obs_json(obs_id, title, content, content_hash, created):
    return {
        "id": obs_id,
        "session_id": None,
        "project": "proj",
        "topic_key": None,
        "type": "decision",
        "title": title,
        "content": content,
        "concepts": None,
        "facts": None,
        "files": None,
        "scope": "project",
        "tier": "buffer",
        "access_count": 0,
        "revision_count": 1,
        "content_hash": content_hash,
        "created_at": created,
        "updated_at": created,
        "deleted_at": None,
    }


def chunk_json(chunk_id, source, exported_at, observations):
    return json.dumps(
        {
            "chunk_id": chunk_id,
            "source": source,
            "project": "proj",
            "exported_at": exported_at,
            "observations": observations,
            "sessions": [],
        }
    )


def test_should_create_chunk_from_observations():
    db = FakeDb()
    db.add_observation(title="Test obs", content="Content")
    chunk = create_chunk(db, "proj")
    assert chunk.chunk_id
    assert chunk.project == "proj"
    assert len(chunk.observations) == 1
    assert chunk.observations[0].title == "Test obs"
    assert chunk.observations[0].content == "Content"


def test_should_create_chunk_with_sessions():
    db = FakeDb()
    db.create_session("proj", "/tmp/dir")
    chunk = create_chunk(db, "proj")
    assert len(chunk.sessions) == 1
    assert chunk.sessions[0].project == "proj"


def test_should_create_empty_chunk_for_unknown_project():
    db = FakeDb()
    db.add_observation()
    chunk = create_chunk(db, "nonexistent")
    assert chunk.observations == []
    assert chunk.sessions == []


def test_chunk_without_project_is_labelled_all():
    chunk = create_chunk(FakeDb(), None)
    assert chunk.project == "all"


def test_chunk_ids_are_unique_and_timestamp_parses():
    db = FakeDb()
    first = create_chunk(db, "proj")
    second = create_chunk(db, "proj")
    assert first.chunk_id != second.chunk_id
    assert datetime.fromisoformat(first.exported_at).utcoffset().total_seconds() == 0


def test_chunk_source_comes_from_hostname(monkeypatch):
    monkeypatch.setenv("HOSTNAME", "test-host")
    assert create_chunk(FakeDb(), "proj").source == "test-host"
    monkeypatch.delenv("HOSTNAME")
    monkeypatch.delenv("COMPUTERNAME", raising=False)
    assert create_chunk(FakeDb(), "proj").source == "unknown"


def test_should_import_chunk_with_dedup():
    db = FakeDb()
    text = chunk_json(
        "test-chunk-001",
        "test-host",
        "2026-03-09T00:00:00+00:00",
        [obs_json(1, "Imported obs", "Imported content", "abc123unique", "2026-03-09T00:00:00")],
    )
    assert import_chunk(db, text) == 1
    assert import_chunk(db, text) == 0


def test_should_dedup_observations_by_content_hash():
    db = FakeDb()
    chunk1 = chunk_json(
        "chunk-aaa",
        "host-a",
        "2026-03-09T00:00:00+00:00",
        [obs_json(1, "Obs A", "Same content", "shared-hash-999", "2026-03-09T00:00:00")],
    )
    chunk2 = chunk_json(
        "chunk-bbb",
        "host-b",
        "2026-03-09T01:00:00+00:00",
        [obs_json(2, "Obs B", "Same content", "shared-hash-999", "2026-03-09T01:00:00")],
    )
    assert import_chunk(db, chunk1) == 1
    assert import_chunk(db, chunk2) == 0


def test_should_roundtrip_chunk_export_import():
    source_db = FakeDb()
    target_db = FakeDb()
    source_db.add_observation(
        title="Roundtrip test",
        content="Roundtrip content",
        obs_type="insight",
        concepts=["rust", "sync"],
        files=["src/main.rs"],
        topic_key="roundtrip-key",
    )
    chunk = create_chunk(source_db, "proj")
    assert import_chunk(target_db, chunk.to_json()) == 1

    target = target_db.list_all_observations_for_export("proj")
    assert len(target) == 1
    assert target[0].title == "Roundtrip test"
    assert target[0].content == "Roundtrip content"
    assert target[0].concepts == ["rust", "sync"]
    assert target[0].files == ["src/main.rs"]
    assert target[0].topic_key == "roundtrip-key"


def test_chunk_json_round_trip_preserves_everything():
    db = FakeDb()
    db.add_observation(title="Ünïcode", concepts=["a"])
    db.create_session("proj", "/tmp/dir")
    chunk = create_chunk(db, "proj")
    assert SyncChunk.from_json(chunk.to_json()) == chunk


def test_observation_json_uses_type_key():
    db = FakeDb()
    db.add_observation(obs_type="pattern")
    data = json.loads(create_chunk(db, "proj").to_json())
    assert data["observations"][0]["type"] == "pattern"


@pytest.mark.parametrize(
    "text",
    ["not json", "[]", json.dumps({"chunk_id": 1}), chunk_json("c", "s", "t", [{"id": 1}])],
)
def test_import_rejects_malformed_chunk(text):
    with pytest.raises(ValueError):
        import_chunk(FakeDb(), text)


def test_capture_mutation_records_and_returns_sequence():
    db = FakeDb()
    seq = capture_mutation(db, "observation", "7", "insert", "{}", "proj")
    assert seq == 1
    assert db.mutations == [("observation", "7", "insert", "{}", "proj")]


def completed(returncode=0, stderr=b""):
    return subprocess.CompletedProcess(["git"], returncode, b"", stderr)


def test_init_sync_repo_runs_git_init(tmp_path):
    target = tmp_path / "repo"
    with patch("cortexmem.gitsync.subprocess.run", return_value=completed()) as run:
        init_sync_repo(target, None)
    assert target.is_dir()
    assert run.call_args.args[0] == ["git", "init"]
    assert run.call_args.kwargs["cwd"] == target


def test_init_sync_repo_clones_remote(tmp_path):
    target = tmp_path / "clone"
    with patch("cortexmem.gitsync.subprocess.run", return_value=completed()) as run:
        init_sync_repo(target, "https://example.com/memory.git")
    assert target.is_dir()
    assert run.call_args.args[0] == ["git", "clone", "https://example.com/memory.git", "."]
    assert run.call_args.kwargs["cwd"] == target


def test_init_sync_repo_skips_existing_repository(tmp_path):
    (tmp_path / ".git").mkdir()
    with patch("cortexmem.gitsync.subprocess.run") as run:
        init_sync_repo(tmp_path, None)
    assert run.call_count == 0
    assert [path.name for path in tmp_path.iterdir()] == [".git"]


def test_init_sync_repo_reports_failure(tmp_path):
    with patch("cortexmem.gitsync.subprocess.run", return_value=completed(1, b"boom")):
        with pytest.raises(RuntimeError, match="git init failed: boom"):
            init_sync_repo(tmp_path, None)


def test_sync_via_git_exports_commits_and_imports(tmp_path):
    db = FakeDb()
    db.add_observation()
    db.add_observation(title="Second")
    calls = []

    def fake_run(args, **kwargs):
        calls.append(args[1])
        return completed()

    with patch("cortexmem.gitsync.subprocess.run", side_effect=fake_run):
        written, loaded = sync_via_git(db, tmp_path, "proj")

    assert written == 2
    assert loaded == 0
    assert calls == ["add", "commit", "push", "pull"]
    files = list((tmp_path / "chunks" / "proj").glob("*.json"))
    assert len(files) == 1
    assert len(SyncChunk.from_json(files[0].read_text(encoding="utf-8")).observations) == 2


def test_sync_via_git_imports_foreign_chunks(tmp_path):
    db = FakeDb()
    chunks_dir = tmp_path / "chunks" / "proj"
    chunks_dir.mkdir(parents=True)
    (chunks_dir / "remote.json").write_text(
        chunk_json(
            "remote",
            "host-b",
            "2026-03-09T00:00:00+00:00",
            [obs_json(1, "Remote", "Remote content", "remote-hash", "2026-03-09T00:00:00")],
        )
    )
    (chunks_dir / "notes.txt").write_text("ignored")

    def fake_run(args, **kwargs):
        return completed(1) if args[1] == "commit" else completed()

    with patch("cortexmem.gitsync.subprocess.run", side_effect=fake_run):
        written, loaded = sync_via_git(db, tmp_path, "proj")

    assert (written, loaded) == (0, 1)
    assert db.observations[0].title == "Remote"


def test_sync_via_git_reports_push_failure(tmp_path):
    def fake_run(args, **kwargs):
        return completed(1, b"rejected") if args[1] == "push" else completed()

    with patch("cortexmem.gitsync.subprocess.run", side_effect=fake_run):
        with pytest.raises(RuntimeError, match="git push failed: rejected"):
            sync_via_git(FakeDb(), tmp_path, "proj")