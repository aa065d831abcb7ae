"""Push local mutations to a sync server and apply the ones it sends back."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from .records import Observation

logger = logging.getLogger(__name__)

PUSH_BATCH_LIMIT = 100
SYNC_STATE_KEY = "cloud"

_PULL_FIELDS: dict[str, type] = {
    "seq": int,
    "entity": str,
    "entity_key": str,
    "op": str,
    "project": str,
    "occurred_at": str,
}
_INTEGER = re.compile(r"[+-]?\d+")


class SyncError(Exception):
    """Raised when talking to the sync server or applying its data fails."""


@dataclass
class SyncConfig:
    """Where the sync server lives and the key used to reach it."""

    server_url: str
    api_key: str

    @property
    def base_url(self) -> str:
        return self.server_url.rstrip("/")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _mutation_payload(mutation: Any) -> dict[str, Any]:
    try:
        payload = json.loads(mutation.payload)
    except ValueError as exc:
        logger.warning("failed to parse payload of mutation %s as JSON: %s", mutation.seq, exc)
        payload = {}
    return {
        "entity": mutation.entity,
        "entity_key": mutation.entity_key,
        "op": mutation.op,
        "payload": payload,
        "project": mutation.project,
        "occurred_at": mutation.occurred_at,
    }


async def _send(method: str, url: str, config: SyncConfig, action: str, **kwargs: Any) -> Any:
    headers = {"Authorization": f"Bearer {config.api_key}"}
    async with httpx.AsyncClient() as client:
        try:
            response = await client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            raise SyncError("failed to connect to sync server") from exc

    if not response.is_success:
        status = f"{response.status_code} {response.reason_phrase}".strip()
        raise SyncError(f"{action} failed with status {status}: {response.text}")

    try:
        return response.json()
    except ValueError as exc:
        raise SyncError(f"failed to parse {action} response") from exc


async def push(db: Any, config: SyncConfig) -> int:
    """Send unacknowledged local mutations; return how many the server accepted."""
    mutations = list(db.list_unacked_mutations(PUSH_BATCH_LIMIT))
    if not mutations:
        return 0

    last_local_seq = mutations[-1].seq
    body = {"mutations": [_mutation_payload(m) for m in mutations]}
    data = await _send("POST", f"{config.base_url}/sync/push", config, "push", json=body)

    if not (
        isinstance(data, dict) and _is_int(data.get("accepted")) and _is_int(data.get("last_seq"))
    ):
        raise SyncError("failed to parse push response")

    db.ack_mutations(last_local_seq)
    state = db.get_sync_state(SYNC_STATE_KEY)
    last_pulled = state.last_pulled_seq if state is not None else 0
    db.update_sync_state(SYNC_STATE_KEY, data["last_seq"], last_pulled, None)
    return data["accepted"]


def _valid_pulled(item: Any) -> bool:
    if not isinstance(item, dict) or "payload" not in item:
        return False
    for key, kind in _PULL_FIELDS.items():
        value = item.get(key)
        if kind is int and not _is_int(value):
            return False
        if kind is str and not isinstance(value, str):
            return False
    return True


def _entity_id(mutation: Mapping[str, Any]) -> int:
    key = mutation["entity_key"]
    if not _INTEGER.fullmatch(key):
        raise SyncError(f"invalid entity_key for {mutation['op']}")
    return int(key)


def apply_remote_mutation(db: Any, mutation: Mapping[str, Any]) -> None:
    """Apply one mutation received from the server to the local database."""
    entity, op = mutation["entity"], mutation["op"]
    if entity == "observation" and op in ("insert", "upsert"):
        try:
            obs = Observation.from_dict(mutation["payload"])
        except ValueError as exc:
            raise SyncError(
                "failed to deserialize observation from mutation payload"
            ) from exc
        db.import_observation(obs)
    elif entity == "observation" and op == "soft_delete":
        db.soft_delete(_entity_id(mutation))
    elif entity == "observation" and op == "hard_delete":
        db.hard_delete(_entity_id(mutation))
    else:
        logger.warning("unknown mutation type, skipping: entity=%s op=%s", entity, op)


async def pull(db: Any, config: SyncConfig) -> int:
    """Fetch mutations newer than the last pull and apply them; return how many arrived."""
    state = db.get_sync_state(SYNC_STATE_KEY)
    since_seq = state.last_pulled_seq if state is not None else 0

    data = await _send(
        "GET",
        f"{config.base_url}/sync/pull",
        config,
        "pull",
        params={"since_seq": since_seq},
    )
    mutations = data.get("mutations") if isinstance(data, dict) else None
    if not isinstance(mutations, list) or not all(_valid_pulled(m) for m in mutations):
        raise SyncError("failed to parse pull response")

    max_seq = since_seq
    for mutation in mutations:
        max_seq = max(max_seq, mutation["seq"])
        try:
            apply_remote_mutation(db, mutation)
        except Exception as exc:
            logger.warning(
                "failed to apply remote mutation seq=%s entity=%s op=%s: %s",
                mutation["seq"],
                mutation["entity"],
                mutation["op"],
                exc,
            )

    last_pushed = state.last_pushed_seq if state is not None else 0
    db.update_sync_state(SYNC_STATE_KEY, last_pushed, max_seq, None)
    return len(mutations)


async def sync_once(db: Any, config: SyncConfig) -> tuple[int, int]:
    """Push, then pull; return (pushed, pulled)."""
    pushed = await push(db, config)
    pulled = await pull(db, config)
    return pushed, pulled