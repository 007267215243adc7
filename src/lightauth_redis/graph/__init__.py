"""Entity graph types and the codec between the graph and flat store records.

Public API:
- Path, Route, Client, Invoice: entity types
- GraphWriter: single-entity write path
- GraphReader: full-forest read path for both root kinds
"""

from lightauth_redis.graph.reader import GraphReader
from lightauth_redis.graph.types import (
    Client,
    Entity,
    EntityKind,
    Invoice,
    Path,
    Record,
    Relation,
    Route,
)
from lightauth_redis.graph.writer import GraphWriter

__all__ = [
    "Client",
    "Entity",
    "EntityKind",
    "GraphReader",
    "GraphWriter",
    "Invoice",
    "Path",
    "Record",
    "Relation",
    "Route",
]
