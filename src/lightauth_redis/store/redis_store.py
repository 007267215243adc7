"""Redis-backed KeyValueStore."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from lightauth_redis.errors import StoreUnavailableError

if TYPE_CHECKING:
    from lightauth_redis.config.models import RedisConfig

logger = logging.getLogger(__name__)

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


def _escape_glob(text: str) -> str:
    """Escape characters that SCAN MATCH treats as glob syntax."""
    return _GLOB_SPECIAL.sub(r"\\\1", text)


@contextmanager
def _translate_errors(operation: str, key: str) -> Iterator[None]:
    try:
        yield
    except RedisError as e:
        logger.warning(
            "redis_operation_failed",
            extra={"redis.operation": operation, "redis.key": key, "error": str(e)},
        )
        raise StoreUnavailableError(f"redis {operation} {key!r} failed: {e}") from e


class RedisKeyValueStore:
    """KeyValueStore over an injected ``redis.asyncio.Redis`` client.

    The client must be created with ``decode_responses=True``. Lifecycle is
    owned by whoever constructs this store; ``close()`` closes the client.
    """

    def __init__(self, client: aioredis.Redis, *, scan_count: int = 500) -> None:
        self._client = client
        self._scan_count = scan_count

    @classmethod
    def from_config(cls, config: RedisConfig) -> RedisKeyValueStore:
        """Build a client from configuration (URL takes precedence)."""
        options: dict[str, object] = {
            "socket_timeout": config.socket_timeout,
            "decode_responses": True,
        }
        if config.password is not None:
            options["password"] = config.password.get_secret_value()
        if config.url:
            client = aioredis.Redis.from_url(config.url, **options)
        else:
            client = aioredis.Redis(
                host=config.host, port=config.port, db=config.db, **options
            )
        return cls(client, scan_count=config.key_scan_count)

    @property
    def client(self) -> aioredis.Redis:
        return self._client

    async def exists(self, key: str) -> bool:
        with _translate_errors("EXISTS", key):
            return bool(await self._client.exists(key))

    async def hset(self, key: str, mapping: dict[str, str]) -> None:
        with _translate_errors("HSET", key):
            await self._client.hset(key, mapping=mapping)

    async def hget(self, key: str, field: str) -> str | None:
        with _translate_errors("HGET", key):
            return await self._client.hget(key, field)

    async def hgetall(self, key: str) -> dict[str, str]:
        with _translate_errors("HGETALL", key):
            return await self._client.hgetall(key)

    async def sadd(self, key: str, *members: str) -> int:
        if not members:
            return 0
        with _translate_errors("SADD", key):
            return await self._client.sadd(key, *members)

    async def smembers(self, key: str) -> set[str]:
        with _translate_errors("SMEMBERS", key):
            return set(await self._client.smembers(key))

    async def keys_with_prefix(self, prefix: str) -> list[str]:
        pattern = f"{_escape_glob(prefix)}*"
        with _translate_errors("SCAN", pattern):
            # SCAN may return a key more than once across iterations
            seen: dict[str, None] = {}
            async for key in self._client.scan_iter(
                match=pattern, count=self._scan_count
            ):
                seen[key] = None
            return list(seen)

    async def close(self) -> None:
        with _translate_errors("CLOSE", ""):
            await self._client.aclose()
