"""Data provider facade for the lightauth application.

Exposes the four operations the application consumes:

- create(entity): allocate an ID, assign it, and write the entity
- edit(entity): re-write an existing entity
- get_client_data(): every Path keyed by URL, with Invoices
- get_server_data(): every Route keyed by Name, with Clients and Invoices

The store handle is injected; whoever builds the Database owns its
lifecycle (``close()`` or ``async with``).
"""

from __future__ import annotations

import logging
from types import TracebackType

from lightauth_redis.allocator import (
    DEFAULT_ID_LENGTH,
    DEFAULT_MAX_ATTEMPTS,
    IdentifierAllocator,
)
from lightauth_redis.config.models import LightauthConfig
from lightauth_redis.errors import CorruptRecordError
from lightauth_redis.graph.reader import GraphReader
from lightauth_redis.graph.types import Entity, Path, Route
from lightauth_redis.graph.writer import GraphWriter, require_parent
from lightauth_redis.store.protocols import KeyValueStore
from lightauth_redis.store.redis_store import RedisKeyValueStore

logger = logging.getLogger(__name__)


class Database:
    """Persists the lightauth entity graph in a KeyValueStore."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        id_length: int = DEFAULT_ID_LENGTH,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        self._store = store
        self._allocator = IdentifierAllocator(
            store, id_length=id_length, max_attempts=max_attempts
        )
        self._writer = GraphWriter(store)
        self._reader = GraphReader(store)

    @classmethod
    def from_config(cls, config: LightauthConfig) -> Database:
        """Build a Database over Redis from configuration."""
        store = RedisKeyValueStore.from_config(config.redis)
        return cls(
            store,
            id_length=config.allocator.id_length,
            max_attempts=config.allocator.max_attempts,
        )

    @property
    def store(self) -> KeyValueStore:
        return self._store

    async def create(self, entity: Entity) -> str:
        """Allocate a fresh ID for ``entity``, assign it, and persist it.

        The write follows allocation immediately to narrow the window in
        which a concurrent allocator could pick the same ID.

        An entity missing a required parent is rejected before an ID is
        allocated, so a failed create never leaves an unpersisted ID on it.
        """
        require_parent(entity)
        entity_id = await self._allocator.allocate(entity.kind)
        entity.id = entity_id
        await self._writer.write(entity)
        logger.info(
            "entity_created",
            extra={"entity.kind": entity.kind.value, "entity.id": entity_id},
        )
        return entity_id

    async def edit(self, entity: Entity) -> None:
        """Overwrite every field of ``entity`` and re-sync its index sets.

        On failure the record may be partially updated.
        """
        await self._writer.write(entity)

    async def get_client_data(self) -> dict[str, Path]:
        """Reconstruct every Path, keyed by URL."""
        try:
            return await self._reader.read_all_path_trees()
        except CorruptRecordError as e:
            _log_corrupt(e)
            raise

    async def get_server_data(self) -> dict[str, Route]:
        """Reconstruct every Route, keyed by Name."""
        try:
            return await self._reader.read_all_route_trees()
        except CorruptRecordError as e:
            _log_corrupt(e)
            raise

    async def close(self) -> None:
        await self._store.close()

    async def __aenter__(self) -> Database:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()


def _log_corrupt(error: CorruptRecordError) -> None:
    logger.warning(
        "corrupt_record",
        extra={"record.key": error.key, "record.field": error.field},
    )


def connect_database(
    host: str = "localhost",
    port: int = 6379,
    password: str | None = None,
    db: int = 0,
) -> Database:
    """Create a Redis-backed Database from connection parameters.

    The connection is established lazily on the first operation.
    """
    config = LightauthConfig.model_validate(
        {"redis": {"host": host, "port": port, "password": password, "db": db}}
    )
    return Database.from_config(config)
