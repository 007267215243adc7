"""Shared test fixtures and factories."""

from datetime import UTC, datetime

import pytest

from lightauth_redis.database import Database
from lightauth_redis.graph.types import Client, Invoice, Path, Route
from lightauth_redis.store.memory import InMemoryKeyValueStore

JAN_1 = datetime(2024, 1, 1, tzinfo=UTC)
FEB_1 = datetime(2024, 2, 1, tzinfo=UTC)


# =============================================================================
# Store Fixtures
# =============================================================================


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def database(store: InMemoryKeyValueStore) -> Database:
    return Database(store)


# =============================================================================
# Entity Factories
# =============================================================================


def make_path(**overrides) -> Path:
    values = {
        "url": "https://x",
        "fee": 10,
        "max_invoices": 5,
        "mode": "strict",
        "time_period": "daily",
        "token": "tok1",
        "local_expiration_time": JAN_1,
        "sync_expiration_time": JAN_1,
    }
    values.update(overrides)
    return Path(**values)


def make_route(**overrides) -> Route:
    values = {
        "name": "premium",
        "fee": 100,
        "max_invoices": 3,
        "mode": "time",
        "period": "hourly",
    }
    values.update(overrides)
    return Route(**values)


def make_client(route: Route | None = None, **overrides) -> Client:
    values = {"token": "client-token", "expiration_time": JAN_1, "route": route}
    values.update(overrides)
    return Client(**values)


def make_invoice(
    client: Client | None = None, path: Path | None = None, **overrides
) -> Invoice:
    values = {
        "payment_request": "lnbc1request",
        "payment_hash": bytes.fromhex("dead"),
        "pre_image": bytes.fromhex("beef"),
        "fee": 1,
        "settled": False,
        "claimed": False,
        "expiration_time": FEB_1,
        "client": client,
        "path": path,
    }
    values.update(overrides)
    return Invoice(**values)


def attach_to_path(path: Path, invoice: Invoice) -> Invoice:
    invoice.path = path
    path.invoices[invoice.payment_hash_hex] = invoice
    return invoice


def attach_to_client(client: Client, invoice: Invoice) -> Invoice:
    invoice.client = client
    client.invoices[invoice.payment_request] = invoice
    return invoice


def attach_to_route(route: Route, client: Client) -> Client:
    client.route = route
    route.clients[client.token] = client
    return client
