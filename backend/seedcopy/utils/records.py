"""Record keys and append-only inserts.

Key layout (all user-scoped keys end with a millisecond timestamp so a
prefix scan returns one user's records in creation order):

  user_profile:{user_id}
  user_stats:{user_id}                 counter hash
  generation:{user_id}:{ts_ms}
  feedback:{user_id}:{ts_ms}
  saved:{user_id}:{ts_ms}
  training:{user_id}:{ts_ms}
"""

import time
from datetime import datetime, timezone
from typing import Callable

from seedcopy.utils.kv_store import KVStore

GENERATION = "generation"
FEEDBACK = "feedback"
SAVED = "saved"
TRAINING = "training"

MAX_INSERT_ATTEMPTS = 1000


def now_ms() -> int:
    return int(time.time() * 1000)


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def profile_key(user_id: str) -> str:
    return f"user_profile:{user_id}"


def stats_key(user_id: str) -> str:
    return f"user_stats:{user_id}"


def user_prefix(kind: str, user_id: str) -> str:
    return f"{kind}:{user_id}:"


async def insert_unique(
    store: KVStore,
    kind: str,
    user_id: str,
    build: Callable[[str], dict],
) -> str:
    """Insert a new record under ``{kind}:{user_id}:{ts}`` without overwriting.

    ``build`` receives the chosen key and returns the record to store (records
    carry their own key as ``id``). On a same-millisecond collision the
    timestamp is bumped until a free key is found.
    """
    ts = now_ms()
    for _ in range(MAX_INSERT_ATTEMPTS):
        key = f"{kind}:{user_id}:{ts}"
        if await store.add(key, build(key)):
            return key
        ts += 1
    raise RuntimeError(f"Could not allocate a free {kind} key for user {user_id}")
