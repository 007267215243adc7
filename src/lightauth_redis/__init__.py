"""Redis data provider for lightauth.

Maps the lightauth entity graph (Paths and Routes at the root, Clients and
Invoices below them) onto Redis hash records plus reverse index sets, and
rebuilds the full graph from prefix scans and set membership.
"""

from lightauth_redis.allocator import IdentifierAllocator
from lightauth_redis.database import Database, connect_database
from lightauth_redis.errors import (
    AllocatorExhaustedError,
    CorruptRecordError,
    LightauthStoreError,
    OrphanEntityError,
    StoreUnavailableError,
)
from lightauth_redis.graph import (
    Client,
    EntityKind,
    GraphReader,
    GraphWriter,
    Invoice,
    Path,
    Route,
)

__all__ = [
    "AllocatorExhaustedError",
    "Client",
    "CorruptRecordError",
    "Database",
    "EntityKind",
    "GraphReader",
    "GraphWriter",
    "IdentifierAllocator",
    "Invoice",
    "LightauthStoreError",
    "OrphanEntityError",
    "Path",
    "Route",
    "StoreUnavailableError",
    "connect_database",
]
