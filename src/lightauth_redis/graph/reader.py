"""Read path: rebuild complete forests from prefix scans and index sets.

Reconstruction trusts the reverse index sets for which children exist and
re-links every back-reference to the exact in-memory parent instance.

Reads are not isolated from concurrent writers. An index set can name a
child whose record has not been written yet; that surfaces as a
CorruptRecordError like any other unreadable record. Any failure aborts the
whole reconstruction and no partial mapping is returned.
"""

from __future__ import annotations

import logging

from lightauth_redis.errors import CorruptRecordError
from lightauth_redis.graph.types import (
    Client,
    EntityKind,
    Invoice,
    Path,
    Relation,
    Route,
)
from lightauth_redis.store.protocols import KeyValueStore

logger = logging.getLogger(__name__)


class GraphReader:
    """Full-snapshot reconstruction of Path-rooted and Route-rooted forests."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    async def read_all_path_trees(self) -> dict[str, Path]:
        """Return every Path keyed by URL, each with its Invoices attached.

        Invoices are keyed by their payment hash (hex) and point back at the
        Path that holds them. If two Paths share a URL the one scanned last
        (in key order) wins.
        """
        result: dict[str, Path] = {}
        for path_id in await self._scan_ids(EntityKind.PATH):
            fields = await self._fetch(EntityKind.PATH, path_id)
            path = Path.from_record(path_id, fields)

            for invoice_id in await self._members(Relation.PATH_INVOICES, path_id):
                invoice = await self._read_invoice(invoice_id)
                invoice.path = path
                path.invoices[invoice.payment_hash_hex] = invoice

            _register(result, path.url, path, EntityKind.PATH)

        logger.debug("path_trees_loaded", extra={"count": len(result)})
        return result

    async def read_all_route_trees(self) -> dict[str, Route]:
        """Return every Route keyed by Name, with Clients and their Invoices.

        Clients are keyed by token, Invoices by payment request. Each Client
        points back at its Route and each Invoice at its Client. If two Routes
        share a Name the one scanned last (in key order) wins.
        """
        result: dict[str, Route] = {}
        for route_id in await self._scan_ids(EntityKind.ROUTE):
            fields = await self._fetch(EntityKind.ROUTE, route_id)
            route = Route.from_record(route_id, fields)

            for client_id in await self._members(Relation.ROUTE_CLIENTS, route_id):
                client = await self._read_client(client_id)
                client.route = route
                route.clients[client.token] = client

            _register(result, route.name, route, EntityKind.ROUTE)

        logger.debug("route_trees_loaded", extra={"count": len(result)})
        return result

    async def _read_client(self, client_id: str) -> Client:
        fields = await self._fetch(EntityKind.CLIENT, client_id)
        client = Client.from_record(client_id, fields)
        for invoice_id in await self._members(Relation.CLIENT_INVOICES, client_id):
            invoice = await self._read_invoice(invoice_id)
            invoice.client = client
            client.invoices[invoice.payment_request] = invoice
        return client

    async def _read_invoice(self, invoice_id: str) -> Invoice:
        fields = await self._fetch(EntityKind.INVOICE, invoice_id)
        return Invoice.from_record(invoice_id, fields)

    async def _scan_ids(self, kind: EntityKind) -> list[str]:
        keys = await self._store.keys_with_prefix(kind.prefix)
        return sorted(key.removeprefix(kind.prefix) for key in keys)

    async def _members(self, relation: Relation, parent_id: str) -> list[str]:
        return sorted(await self._store.smembers(relation.key(parent_id)))

    async def _fetch(self, kind: EntityKind, entity_id: str) -> dict[str, str]:
        key = kind.record_key(entity_id)
        fields = await self._store.hgetall(key)
        if not fields:
            raise CorruptRecordError(f"{key} does not exist", key=key)
        return fields


def _register(
    result: dict[str, Path] | dict[str, Route],
    lookup: str,
    entity: Path | Route,
    kind: EntityKind,
) -> None:
    previous = result.get(lookup)
    if previous is not None:
        logger.warning(
            "duplicate_lookup_key",
            extra={
                "entity.kind": kind.value,
                "lookup": lookup,
                "replaced_id": previous.id,
                "kept_id": entity.id,
            },
        )
    result[lookup] = entity
