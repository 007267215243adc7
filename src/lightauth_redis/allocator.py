"""Collision-checked random identifier allocation.

IDs are short random alphanumeric strings, unique within their kind's
namespace. Uniqueness comes from checking ``Kind:ID`` against the store
before handing the ID out, not from the generator.

Two concurrent allocators can still pick the same unused ID before either
writes it; callers narrow that window by writing immediately after
allocating.
"""

from __future__ import annotations

import logging
import secrets
import string

from lightauth_redis.errors import AllocatorExhaustedError
from lightauth_redis.graph.types import EntityKind
from lightauth_redis.store.protocols import KeyValueStore

logger = logging.getLogger(__name__)

ID_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
DEFAULT_ID_LENGTH = 16
DEFAULT_MAX_ATTEMPTS = 64


def generate_id(length: int = DEFAULT_ID_LENGTH) -> str:
    """Return a random alphanumeric string from a CSPRNG."""
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(length))


class IdentifierAllocator:
    """Allocates unused IDs per entity kind against a KeyValueStore."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        id_length: int = DEFAULT_ID_LENGTH,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        if id_length < 1:
            raise ValueError("id_length must be positive")
        if max_attempts < 1:
            raise ValueError("max_attempts must be positive")
        self._store = store
        self._id_length = id_length
        self._max_attempts = max_attempts

    async def allocate(self, kind: EntityKind) -> str:
        """Return an ID whose ``Kind:ID`` key does not exist yet.

        Collisions are retried, but not forever: for random IDs,
        ``max_attempts`` consecutive collisions means the existence check is
        not answering honestly, so AllocatorExhaustedError is raised instead
        of spinning. Failed existence checks are not retried here; they
        propagate at once as StoreUnavailableError and the caller decides
        whether to retry the whole create.
        """
        for attempt in range(1, self._max_attempts + 1):
            candidate = generate_id(self._id_length)
            if not await self._store.exists(kind.record_key(candidate)):
                return candidate
            logger.debug(
                "id_collision",
                extra={"entity.kind": kind.value, "attempt": attempt},
            )

        logger.error(
            "id_allocation_exhausted",
            extra={"entity.kind": kind.value, "attempts": self._max_attempts},
        )
        raise AllocatorExhaustedError(
            f"no unused {kind.value} ID after {self._max_attempts} attempts"
        )
