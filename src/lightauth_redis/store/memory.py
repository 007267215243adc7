"""In-memory KeyValueStore for tests and local development."""

from __future__ import annotations

from lightauth_redis.errors import StoreUnavailableError


class InMemoryKeyValueStore:
    """Dict-backed store with the same semantics as the Redis adapter.

    Hashes and sets share one keyspace, as they do in Redis. Writing a hash
    field to a key holding a set (or the reverse) is rejected the way Redis
    rejects it with WRONGTYPE.
    """

    def __init__(self) -> None:
        self._hashes: dict[str, dict[str, str]] = {}
        self._sets: dict[str, set[str]] = {}
        self._closed = False

    def _check_open(self) -> None:
        if self._closed:
            raise StoreUnavailableError("store is closed")

    def _check_type(self, key: str, expected: str) -> None:
        other = self._sets if expected == "hash" else self._hashes
        if key in other:
            raise StoreUnavailableError(
                f"WRONGTYPE operation against key {key!r} "
                "holding the wrong kind of value"
            )

    async def exists(self, key: str) -> bool:
        self._check_open()
        return key in self._hashes or key in self._sets

    async def hset(self, key: str, mapping: dict[str, str]) -> None:
        self._check_open()
        self._check_type(key, "hash")
        self._hashes.setdefault(key, {}).update(mapping)

    async def hget(self, key: str, field: str) -> str | None:
        self._check_open()
        self._check_type(key, "hash")
        return self._hashes.get(key, {}).get(field)

    async def hgetall(self, key: str) -> dict[str, str]:
        self._check_open()
        self._check_type(key, "hash")
        return dict(self._hashes.get(key, {}))

    async def sadd(self, key: str, *members: str) -> int:
        self._check_open()
        self._check_type(key, "set")
        current = self._sets.setdefault(key, set())
        before = len(current)
        current.update(members)
        return len(current) - before

    async def smembers(self, key: str) -> set[str]:
        self._check_open()
        self._check_type(key, "set")
        return set(self._sets.get(key, set()))

    async def keys_with_prefix(self, prefix: str) -> list[str]:
        self._check_open()
        keys = [k for k in self._hashes if k.startswith(prefix)]
        keys.extend(k for k in self._sets if k.startswith(prefix))
        return keys

    async def close(self) -> None:
        self._closed = True
