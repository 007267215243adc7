"""Key-value store backends.

- KeyValueStore: protocol of the primitives the data provider consumes
- RedisKeyValueStore: production backend over redis.asyncio
- InMemoryKeyValueStore: dict-backed backend for tests
"""

from lightauth_redis.store.memory import InMemoryKeyValueStore
from lightauth_redis.store.protocols import KeyValueStore
from lightauth_redis.store.redis_store import RedisKeyValueStore

__all__ = [
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "RedisKeyValueStore",
]
