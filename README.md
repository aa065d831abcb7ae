# cortexmem

Persistent memory for AI coding agents. Agents record *observations*
(decisions, discoveries, bug fixes, patterns) per project; cortexmem tags
them automatically, skips duplicates, ages them through memory tiers, ranks
them with a fused full-text + vector search, and replicates them between
machines through a git repository or a sync server.

Install with `pip install .`; the only runtime dependency is `httpx`
(used by cloud sync). Tests: `pip install .[test]` then `pytest`.

## What you supply

cortexmem holds the memory logic, not the storage. Every function that
takes a `db` argument calls methods on the object you pass:

| Used by | Database methods called |
|---------|-------------------------|
| `cortexmem.memory.MemoryManager.save_observation` / `cortexmem.dedup.check_dedup` | `find_by_content_hash`, `find_by_topic_key`, `insert_observation`, `upsert_observation`, `remove_from_fts`, `sync_observation_to_fts`, `delete_vector`, `insert_vector` |
| `cortexmem.hybrid.HybridSearcher.search` | `search_fts`, `search_vector` (hits with a `rowid`), `get_observation`, `get_feedback_count` |
| `cortexmem.compact.run_compaction` | `list_observations`, `list_all_active_observations`, `update_tier`, `soft_delete` |
| `cortexmem.gitsync` | `list_all_observations_for_export`, `list_all_sessions_for_export`, `record_sync_chunk`, `import_observation`, `insert_sync_mutation` |
| `cortexmem.cloudsync` | `list_unacked_mutations`, `ack_mutations`, `get_sync_state`, `update_sync_state`, `import_observation`, `soft_delete`, `hard_delete` |

An embedding manager is optional wherever it is accepted. When given, it
must offer `is_model_available()`, `download_model()` and `embed(text)`;
without one, saving skips vectors and search ranks by full text alone.

## Records

`cortexmem.records` defines the data passed around:

- `NewObservation` — an observation to be saved (`project`, `title`,
  `content`, `obs_type`, optional `concepts`, `facts`, `files`,
  `topic_key`, `scope` defaulting to `"project"`, `session_id`).
- `Observation` — a stored observation, with `tier`, `access_count`,
  `revision_count`, `content_hash`, timestamps and `deleted_at`.
  `to_dict()` / `Observation.from_dict(data)` convert to and from the JSON
  form, where the type is under the key `"type"`; `from_dict` raises
  `ValueError` on missing or mistyped fields.
- `Session` — with the same `to_dict()` / `from_dict()` pair.

## Auto-tagging

```python
from cortexmem.autotag import extract_keywords, extract_facts

text = (
    "The authentication middleware validates Bearer tokens on every request. "
    "Tokens expire after 24 hours and can be refreshed using the refresh endpoint."
)
extract_keywords(text, 5)   # most frequent non-stop-words, at most 8 whatever the limit
extract_facts(text, 3)      # declarative sentences, each ending in "."
```

Keywords are counted by a simple suffix stem and reported in the form first
seen. Facts are the text split on `.`; pieces under 20 bytes, questions, and
pieces starting with `TODO` or `FIXME` are skipped.

## Saving observations

```python
from cortexmem.memory import MemoryManager
from cortexmem.records import NewObservation

manager = MemoryManager(db, None)
result = manager.save_observation(NewObservation(
    project="myproject",
    title="Auth decision",
    content="Chose JWT over sessions for stateless auth",
    obs_type="decision",
    topic_key="architecture/auth",
))
result.id, result.dedup_status.status, result.was_embedded
```

Missing or empty concepts and facts are filled in by auto-tagging (up to
6 keywords from title and content, up to 3 facts from content). Then
`cortexmem.dedup.check_dedup` decides, returning a `DedupResult` whose
`status` is a `DedupStatus`:

1. `HASH_MATCH` — identical content (SHA-256, see `compute_content_hash`)
   was saved in the last 15 minutes; the existing id is returned and nothing
   is written;
2. `TOPIC_KEY_UPSERT` — same project and `topic_key` as an existing
   observation, which is updated in place;
3. `NEW_CONTENT` — a new observation is inserted.

After a write the full-text index is refreshed and, if an embedding manager
is present, the vector is (re)stored.

## Memory tiers

New observations start in `buffer`. `cortexmem.decay.evaluate_tier(obs)`
returns a `TierAction` (`kind` is a `TierActionKind`; `tier` is set for
promotions), and `cortexmem.compact.run_compaction(db, project)` applies it
to every active observation of a project, or of all projects when
`project` is `None`:

| Tier    | Promoted when                                   | Archived (soft-deleted) when |
|---------|-------------------------------------------------|------------------------------|
| buffer  | accessed 2+ times → `working`                   | not updated for 30 days      |
| working | accessed 5+ times or revised 3+ times → `core`  | not updated for 90 days      |
| core    | never                                           | never                        |

```python
from cortexmem.compact import run_compaction

stats = run_compaction(db, "myproject")
stats.promoted, stats.archived, stats.unchanged
```

Timestamps are read as `YYYY-MM-DD HH:MM:SS` in UTC; unparseable ones count
as 0 days old.

## Hybrid search

```python
from cortexmem.hybrid import HybridSearcher, SearchParams

searcher = HybridSearcher(db, None)
for hit in searcher.search(SearchParams(query="authentication", project="myproject", limit=10)):
    print(hit.id, hit.title, hit.obs_type, hit.score)
```

Up to 50 full-text and 50 vector hits are combined with Reciprocal Rank
Fusion (`cortexmem.rrf.rrf_fuse`, k = 60). Deleted observations and those
not matching the `project`, `obs_type` or `scope` filters are dropped. Each
score is then multiplied by a recency factor `1 / (1 + 0.01 × days)` and by
access and feedback boosts of `1 + 0.1 × count`, each capped at 2
(`apply_boosts`, `compute_recency_factor`); results come back best first.

## Git sync

```python
from pathlib import Path
from cortexmem.gitsync import init_sync_repo, sync_via_git

sync_dir = Path.home() / ".cortexmem-sync"
init_sync_repo(sync_dir, None)          # or a remote URL to clone
exported, imported = sync_via_git(db, sync_dir, "myproject")
```

`sync_via_git` writes a `SyncChunk` (`create_chunk`) as
`chunks/<project>/<chunk_id>.json`, runs `git add`, `git commit`, `git push`
(only when the commit succeeded) and `git pull --rebase`, then imports every
chunk file with `import_chunk`. Chunks already recorded are skipped, and
each observation counts as imported only if the database accepts it. A
failing git command raises `RuntimeError` with git's error output.
`capture_mutation` records a write for later replication.

## Cloud sync

```python
from cortexmem.cloudsync import SyncConfig, sync_once

config = SyncConfig(server_url="https://sync.example.com", api_key="placeholder")
pushed, pulled = await sync_once(db, config)
```

`push` sends up to 100 unacknowledged mutations to `POST /sync/push` and
acknowledges them; `pull` fetches `GET /sync/pull?since_seq=N` and applies
each mutation with `apply_remote_mutation` (observation insert/upsert,
soft delete, hard delete; unknown kinds are logged and skipped). Both send
the key as a bearer token and store progress under the sync state key
`"cloud"`. Connection failures, non-success statuses and malformed
responses raise `SyncError`.

## Terminal screens

`cortexmem.tui` holds the state and drawing logic of a terminal browser:

- `cortexmem.tui.app.App(server)` keeps the current screen, a stack of
  previous screens (`push_screen`, `pop_screen`) and `should_quit`. Screens
  are the dataclasses `Dashboard`, `Search`, `SearchResults`,
  `ObservationDetail`, `Timeline`, `Sessions` and `SessionDetail`. Keys are
  `KeyEvent(Key.ESC)`, `KeyEvent.from_char("q")` and so on.
- `cortexmem.tui.widgets` has the `Color` palette and `Segment` (text with
  colours); `title_bar` and `help_bar` build styled lines.
- `cortexmem.tui.screens.dashboard`, `.search` and `.detail` each turn the
  app state into a list of lines (lists of `Segment`) and handle keys:
  `s` or `/` opens search, `n` opens the session list, `Enter` runs a
  search or opens a result, `j`/`k` or the arrows move and scroll, `t`
  opens the timeline around an observation, `Esc` goes back, `q` quits.

The `server` object must offer `call_stats`, `call_list_sessions`,
`call_search`, `call_get` and `call_timeline`.

## What this package does not do

- It has no database: schema, full-text index, vector index and queries
  are the caller's `db` object.
- It computes no embeddings itself.
- It has no command-line program and no server to expose the memory to
  agents.
- The terminal screens produce lines of styled text but nothing draws them
  on a terminal or reads the keyboard; there is no event loop to run. The
  session list, session detail and timeline screens exist only as state in
  `cortexmem.tui.app` — the dashboard and detail screens push them, but
  nothing renders them or handles keys on them.