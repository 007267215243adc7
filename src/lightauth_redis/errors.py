"""Exception hierarchy for the lightauth Redis data provider."""


class LightauthStoreError(Exception):
    """Base class for all data provider errors."""


class StoreUnavailableError(LightauthStoreError):
    """A store primitive failed at the transport level.

    Raised immediately and never retried internally; the caller decides
    whether to retry the whole operation.
    """


class CorruptRecordError(LightauthStoreError, ValueError):
    """A stored record is missing or a field does not parse as its type."""

    def __init__(self, message: str, *, key: str, field: str | None = None):
        super().__init__(message)
        self.key = key
        self.field = field


class AllocatorExhaustedError(LightauthStoreError):
    """Identifier allocation hit its attempt cap without finding a free ID."""


class OrphanEntityError(LightauthStoreError, ValueError):
    """An entity that requires a parent was written without one."""
