"""Protocol for the key-value store primitives the data provider consumes.

Every call is an independent round trip; nothing here is atomic across keys.
Implementations raise StoreUnavailableError for transport failures.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """Hash records, unordered string sets, and key enumeration by prefix."""

    async def exists(self, key: str) -> bool:
        """Return True if ``key`` holds any value."""
        ...

    async def hset(self, key: str, mapping: dict[str, str]) -> None:
        """Overwrite the given fields of the hash at ``key``."""
        ...

    async def hget(self, key: str, field: str) -> str | None:
        """Get one hash field, or None if the key or field is absent."""
        ...

    async def hgetall(self, key: str) -> dict[str, str]:
        """Get every field of the hash at ``key`` (empty if absent)."""
        ...

    async def sadd(self, key: str, *members: str) -> int:
        """Add members to the set at ``key``; returns how many were new."""
        ...

    async def smembers(self, key: str) -> set[str]:
        """Get every member of the set at ``key`` (empty if absent)."""
        ...

    async def keys_with_prefix(self, prefix: str) -> list[str]:
        """List every key starting with ``prefix``."""
        ...

    async def close(self) -> None:
        """Release the underlying connection."""
        ...
