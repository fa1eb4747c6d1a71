"""Namespaced key-value store used for every persisted record.

Two backends share the ``KVStore`` interface:

  RedisKVStore   redis.asyncio, JSON values, SCAN-based prefix scan,
                 SET NX for append-only records, HINCRBY for counters
  MemoryKVStore  process-local dicts for development and tests

``settings.kv_backend`` picks the backend; ``get_kv_store`` is the FastAPI
dependency and ``close_kv_store`` is called on shutdown.
"""

import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Optional

import redis.asyncio as redis

from seedcopy.config import settings

logger = logging.getLogger(__name__)

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


class KVStore(ABC):
    """Opaque durable map of string keys to JSON objects."""

    @abstractmethod
    async def get(self, key: str) -> Optional[dict]:
        ...

    @abstractmethod
    async def set(self, key: str, value: dict) -> None:
        ...

    @abstractmethod
    async def add(self, key: str, value: dict) -> bool:
        """Store ``value`` only if ``key`` is free. Returns False on collision."""

    @abstractmethod
    async def get_by_prefix(self, prefix: str) -> list[tuple[str, dict]]:
        """Return ``(key, value)`` pairs for every key starting with ``prefix``."""

    @abstractmethod
    async def increment(self, key: str, field: str, amount: int = 1) -> int:
        """Atomically add ``amount`` to a counter field and return the new value."""

    @abstractmethod
    async def get_counters(self, key: str) -> dict[str, int]:
        ...

    @abstractmethod
    async def ping(self) -> bool:
        ...

    async def close(self) -> None:
        return None


class RedisKVStore(KVStore):

    def __init__(self, client: redis.Redis, namespace: str = ""):
        self._client = client
        self._namespace = f"{namespace}:" if namespace else ""

    def _key(self, key: str) -> str:
        return f"{self._namespace}{key}"

    async def get(self, key: str) -> Optional[dict]:
        raw = await self._client.get(self._key(key))
        return json.loads(raw) if raw else None

    async def set(self, key: str, value: dict) -> None:
        await self._client.set(self._key(key), json.dumps(value, ensure_ascii=False))

    async def add(self, key: str, value: dict) -> bool:
        created = await self._client.set(
            self._key(key),
            json.dumps(value, ensure_ascii=False),
            nx=True,
        )
        return bool(created)

    async def get_by_prefix(self, prefix: str) -> list[tuple[str, dict]]:
        pattern = _GLOB_SPECIAL.sub(r"\\\1", self._key(prefix)) + "*"
        keys = []
        async for key in self._client.scan_iter(match=pattern):
            keys.append(key)
        if not keys:
            return []

        keys.sort()
        values = await self._client.mget(keys)
        strip = len(self._namespace)
        return [
            (key[strip:], json.loads(raw))
            for key, raw in zip(keys, values)
            if raw is not None
        ]

    async def increment(self, key: str, field: str, amount: int = 1) -> int:
        return int(await self._client.hincrby(self._key(key), field, amount))

    async def get_counters(self, key: str) -> dict[str, int]:
        raw = await self._client.hgetall(self._key(key))
        return {name: int(value) for name, value in raw.items()}

    async def ping(self) -> bool:
        return bool(await self._client.ping())

    async def close(self) -> None:
        await self._client.aclose()


class MemoryKVStore(KVStore):
    """In-memory backend. Values are copied through JSON on the way in and out
    so callers can't mutate stored records by reference."""

    def __init__(self):
        self._data: dict[str, str] = {}
        self._counters: dict[str, dict[str, int]] = {}

    async def get(self, key: str) -> Optional[dict]:
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None

    async def set(self, key: str, value: dict) -> None:
        self._data[key] = json.dumps(value, ensure_ascii=False)

    async def add(self, key: str, value: dict) -> bool:
        if key in self._data:
            return False
        self._data[key] = json.dumps(value, ensure_ascii=False)
        return True

    async def get_by_prefix(self, prefix: str) -> list[tuple[str, dict]]:
        return [
            (key, json.loads(self._data[key]))
            for key in sorted(self._data)
            if key.startswith(prefix)
        ]

    async def increment(self, key: str, field: str, amount: int = 1) -> int:
        counters = self._counters.setdefault(key, {})
        counters[field] = counters.get(field, 0) + amount
        return counters[field]

    async def get_counters(self, key: str) -> dict[str, int]:
        return dict(self._counters.get(key, {}))

    async def ping(self) -> bool:
        return True

    def keys(self) -> list[str]:
        return sorted(self._data)


# Global store instance
_store: Optional[KVStore] = None


def build_kv_store() -> KVStore:
    if settings.kv_backend == "memory":
        logger.warning("Using in-memory key-value store; data is lost on restart")
        return MemoryKVStore()
    if settings.kv_backend != "redis":
        raise ValueError(f"Unknown kv_backend: {settings.kv_backend!r}")

    client = redis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        max_connections=50,
    )
    return RedisKVStore(client, namespace=settings.kv_namespace)


async def get_kv_store() -> KVStore:
    """Get or create the process-wide store."""
    global _store
    if _store is None:
        _store = build_kv_store()
    return _store


async def close_kv_store():
    """Close the store connection (call on app shutdown)."""
    global _store
    if _store:
        await _store.close()
        _store = None
