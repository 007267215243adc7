"""Entity types for the lightauth graph.

Paths and Routes are roots. A Route owns Clients; Clients and Paths own
Invoices. Children carry a non-owning back-reference to their parent, which
is excluded from equality and repr so cyclic graphs stay comparable.

Each kind knows how to flatten itself into a hash record (``to_record``),
which reverse index sets it belongs in (``relations_to_sync``), and how to
rebuild itself from a fetched record (``from_record``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import ClassVar, Protocol, runtime_checkable

from lightauth_redis.errors import CorruptRecordError
from lightauth_redis.graph.wire import (
    format_bool,
    format_hex,
    format_int,
    format_timestamp,
    parse_bool,
    parse_hex,
    parse_int,
    parse_timestamp,
)

# Zero value for timestamps that were never set
ZERO_TIME = datetime(1, 1, 1, tzinfo=UTC)


class EntityKind(Enum):
    """Entity kinds; the value is the record key namespace."""

    PATH = "Path"
    ROUTE = "Route"
    CLIENT = "Client"
    INVOICE = "Invoice"

    @property
    def prefix(self) -> str:
        return f"{self.value}:"

    def record_key(self, entity_id: str) -> str:
        return f"{self.value}:{entity_id}"


class Relation(Enum):
    """Reverse index sets listing child IDs under a parent ID."""

    PATH_INVOICES = "PathInvoices"  # Path -> Invoice
    CLIENT_INVOICES = "ClientInvoices"  # Client -> Invoice
    ROUTE_CLIENTS = "RouteClients"  # Route -> Client

    def key(self, parent_id: str) -> str:
        return f"{self.value}:{parent_id}"


# (index set key, member id)
IndexMembership = tuple[str, str]


@runtime_checkable
class Record(Protocol):
    """Capabilities shared by every persisted entity kind."""

    kind: ClassVar[EntityKind]
    id: str

    def record_key(self) -> str: ...

    def to_record(self) -> dict[str, str]: ...

    def relations_to_sync(self) -> list[IndexMembership]: ...


def _require(fields: dict[str, str], key: str, name: str) -> str:
    """Return a required field, raising CorruptRecordError if it is absent."""
    try:
        return fields[name]
    except KeyError:
        raise CorruptRecordError(
            f"{key} is missing field {name}", key=key, field=name
        ) from None


def _child_memberships(
    relation: Relation, parent_id: str, children: dict[str, Invoice] | dict[str, Client]
) -> list[IndexMembership]:
    index_key = relation.key(parent_id)
    return [(index_key, child.id) for child in children.values() if child.id]


class _Entity:
    """Shared record key behavior."""

    kind: ClassVar[EntityKind]

    def record_key(self) -> str:
        return self.kind.record_key(self.id)  # type: ignore[attr-defined]


@dataclass
class Invoice(_Entity):
    """A payment request issued under a Client or a Path."""

    kind: ClassVar[EntityKind] = EntityKind.INVOICE

    id: str = ""
    payment_request: str = ""
    payment_hash: bytes = b""
    pre_image: bytes = b""
    fee: int = 0
    settled: bool = False
    claimed: bool = False
    expiration_time: datetime = ZERO_TIME
    # Exactly one parent is expected; Client wins if both are set.
    client: Client | None = field(default=None, repr=False, compare=False)
    path: Path | None = field(default=None, repr=False, compare=False)

    @property
    def payment_hash_hex(self) -> str:
        return format_hex(self.payment_hash)

    def to_record(self) -> dict[str, str]:
        return {
            "PaymentRequest": self.payment_request,
            "PaymentHash": format_hex(self.payment_hash),
            "PreImage": format_hex(self.pre_image),
            "Fee": format_int(self.fee),
            "Settled": format_bool(self.settled),
            "Claimed": format_bool(self.claimed),
            "ExpirationTime": format_timestamp(self.expiration_time),
        }

    def relations_to_sync(self) -> list[IndexMembership]:
        if self.client is not None and self.client.id:
            return [(Relation.CLIENT_INVOICES.key(self.client.id), self.id)]
        if self.path is not None and self.path.id:
            return [(Relation.PATH_INVOICES.key(self.path.id), self.id)]
        return []

    @classmethod
    def from_record(cls, entity_id: str, fields: dict[str, str]) -> Invoice:
        key = cls.kind.record_key(entity_id)
        return cls(
            id=entity_id,
            payment_request=_require(fields, key, "PaymentRequest"),
            payment_hash=parse_hex(
                _require(fields, key, "PaymentHash"), key=key, field="PaymentHash"
            ),
            pre_image=parse_hex(
                _require(fields, key, "PreImage"), key=key, field="PreImage"
            ),
            fee=parse_int(_require(fields, key, "Fee"), key=key, field="Fee"),
            settled=parse_bool(
                _require(fields, key, "Settled"), key=key, field="Settled"
            ),
            claimed=parse_bool(
                _require(fields, key, "Claimed"), key=key, field="Claimed"
            ),
            expiration_time=parse_timestamp(
                _require(fields, key, "ExpirationTime"),
                key=key,
                field="ExpirationTime",
            ),
        )


@dataclass
class Client(_Entity):
    """A token holder registered under a Route."""

    kind: ClassVar[EntityKind] = EntityKind.CLIENT

    id: str = ""
    token: str = ""
    expiration_time: datetime = ZERO_TIME
    route: Route | None = field(default=None, repr=False, compare=False)
    # payment_request -> Invoice
    invoices: dict[str, Invoice] = field(default_factory=dict)

    def to_record(self) -> dict[str, str]:
        return {
            "Token": self.token,
            "ExpirationTime": format_timestamp(self.expiration_time),
            "Route": self.route.id if self.route is not None else "",
        }

    def relations_to_sync(self) -> list[IndexMembership]:
        memberships = _child_memberships(
            Relation.CLIENT_INVOICES, self.id, self.invoices
        )
        if self.route is not None and self.route.id:
            memberships.append((Relation.ROUTE_CLIENTS.key(self.route.id), self.id))
        return memberships

    @classmethod
    def from_record(cls, entity_id: str, fields: dict[str, str]) -> Client:
        key = cls.kind.record_key(entity_id)
        return cls(
            id=entity_id,
            token=_require(fields, key, "Token"),
            expiration_time=parse_timestamp(
                _require(fields, key, "ExpirationTime"),
                key=key,
                field="ExpirationTime",
            ),
        )


@dataclass
class Route(_Entity):
    """Server-side root: a named, priced endpoint with its Clients."""

    kind: ClassVar[EntityKind] = EntityKind.ROUTE

    id: str = ""
    name: str = ""
    fee: int = 0
    max_invoices: int = 0
    mode: str = ""
    period: str = ""
    # token -> Client
    clients: dict[str, Client] = field(default_factory=dict)

    def to_record(self) -> dict[str, str]:
        return {
            "Name": self.name,
            "Fee": format_int(self.fee),
            "MaxInvoices": format_int(self.max_invoices),
            "Mode": self.mode,
            "Period": self.period,
        }

    def relations_to_sync(self) -> list[IndexMembership]:
        return _child_memberships(Relation.ROUTE_CLIENTS, self.id, self.clients)

    @classmethod
    def from_record(cls, entity_id: str, fields: dict[str, str]) -> Route:
        key = cls.kind.record_key(entity_id)
        return cls(
            id=entity_id,
            name=_require(fields, key, "Name"),
            fee=parse_int(_require(fields, key, "Fee"), key=key, field="Fee"),
            max_invoices=parse_int(
                _require(fields, key, "MaxInvoices"), key=key, field="MaxInvoices"
            ),
            mode=_require(fields, key, "Mode"),
            period=_require(fields, key, "Period"),
        )


@dataclass
class Path(_Entity):
    """Client-side root: a remote URL we pay to access, with its Invoices."""

    kind: ClassVar[EntityKind] = EntityKind.PATH

    id: str = ""
    url: str = ""
    fee: int = 0
    max_invoices: int = 0
    mode: str = ""
    time_period: str = ""
    token: str = ""
    local_expiration_time: datetime = ZERO_TIME
    sync_expiration_time: datetime = ZERO_TIME
    # payment hash (hex) -> Invoice
    invoices: dict[str, Invoice] = field(default_factory=dict)

    def to_record(self) -> dict[str, str]:
        # TimePeriod is stored under "Period", the same field name Routes use.
        return {
            "Fee": format_int(self.fee),
            "MaxInvoices": format_int(self.max_invoices),
            "Mode": self.mode,
            "URL": self.url,
            "Period": self.time_period,
            "Token": self.token,
            "LocalExpirationTime": format_timestamp(self.local_expiration_time),
            "SyncExpirationTime": format_timestamp(self.sync_expiration_time),
        }

    def relations_to_sync(self) -> list[IndexMembership]:
        return _child_memberships(Relation.PATH_INVOICES, self.id, self.invoices)

    @classmethod
    def from_record(cls, entity_id: str, fields: dict[str, str]) -> Path:
        key = cls.kind.record_key(entity_id)
        return cls(
            id=entity_id,
            url=_require(fields, key, "URL"),
            fee=parse_int(_require(fields, key, "Fee"), key=key, field="Fee"),
            max_invoices=parse_int(
                _require(fields, key, "MaxInvoices"), key=key, field="MaxInvoices"
            ),
            mode=_require(fields, key, "Mode"),
            time_period=_require(fields, key, "Period"),
            token=_require(fields, key, "Token"),
            local_expiration_time=parse_timestamp(
                _require(fields, key, "LocalExpirationTime"),
                key=key,
                field="LocalExpirationTime",
            ),
            sync_expiration_time=parse_timestamp(
                _require(fields, key, "SyncExpirationTime"),
                key=key,
                field="SyncExpirationTime",
            ),
        )


Entity = Path | Route | Client | Invoice
