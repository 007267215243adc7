"""Write path: flatten one entity into its hash record and index sets."""

from __future__ import annotations

import logging
from collections import defaultdict

from lightauth_redis.errors import OrphanEntityError
from lightauth_redis.graph.types import Client, Entity, Invoice
from lightauth_redis.store.protocols import KeyValueStore

logger = logging.getLogger(__name__)


class GraphWriter:
    """Blind-overwrites entity records and re-syncs their index sets.

    There is no read-before-write and no field diffing: every write rewrites
    every field. A failure partway through leaves the record and index sets
    partially updated; nothing is rolled back.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    async def write(self, entity: Entity) -> None:
        if not entity.id:
            raise ValueError(f"cannot write {entity.kind.value} without an ID")
        _check_parents(entity)

        key = entity.record_key()
        await self._store.hset(key, entity.to_record())

        # One SADD per index set
        grouped: defaultdict[str, list[str]] = defaultdict(list)
        for index_key, member_id in entity.relations_to_sync():
            grouped[index_key].append(member_id)
        for index_key, member_ids in grouped.items():
            await self._store.sadd(index_key, *member_ids)

        logger.debug(
            "entity_written",
            extra={
                "entity.kind": entity.kind.value,
                "entity.id": entity.id,
                "index_sets": len(grouped),
            },
        )


def require_parent(entity: Entity) -> None:
    """Raise OrphanEntityError if ``entity`` needs a persisted parent it lacks."""
    if isinstance(entity, Client) and (entity.route is None or not entity.route.id):
        raise OrphanEntityError(
            f"Client {entity.id or '(new)'} must belong to a persisted Route"
        )


def _check_parents(entity: Entity) -> None:
    require_parent(entity)
    if isinstance(entity, Invoice):
        has_client = entity.client is not None and bool(entity.client.id)
        has_path = entity.path is not None and bool(entity.path.id)
        if has_client and has_path:
            logger.warning(
                "invoice_has_two_parents",
                extra={"entity.id": entity.id, "indexed_under": "client"},
            )
        elif not has_client and not has_path:
            logger.warning("invoice_has_no_parent", extra={"entity.id": entity.id})
