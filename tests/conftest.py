"""Pytest configuration and fixtures."""

import itertools
from datetime import datetime, timezone

import pytest

from bizvoice.models.common import TransactionType
from bizvoice.models.ledger import TransactionCreate
from bizvoice.services.business_analytics import BusinessAnalyticsService
from bizvoice.storage.kv_store import MemoryKeyValueStore
from bizvoice.storage.ledger_store import LedgerStore

# Friday 15 March 2024, noon UTC
FIXED_NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


class FixedClock:
    """Clock that returns a settable instant."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def sequential_ids(prefix: str = "id"):
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def ledger(store, clock) -> LedgerStore:
    return LedgerStore(store=store, clock=clock, id_factory=sequential_ids("tx"))


@pytest.fixture
def analytics(ledger, store, clock) -> BusinessAnalyticsService:
    return BusinessAnalyticsService(
        ledger,
        store=store,
        clock=clock,
        id_factory=sequential_ids("biz"),
    )


def make_transaction(
    tx_type: TransactionType,
    amount: float,
    category: str = "Other",
    date: datetime = FIXED_NOW,
    description: str = "",
    product_id: str = None,
) -> TransactionCreate:
    """Build a transaction input."""
    return TransactionCreate(
        type=tx_type,
        amount=amount,
        category=category,
        description=description,
        date=date,
        product_id=product_id,
    )
