"""Data storage layer."""

from bizvoice.storage.kv_store import (
    JsonFileKeyValueStore,
    KeyValueStore,
    MemoryKeyValueStore,
    load_collection,
    save_collection,
)
from bizvoice.storage.ledger_store import LedgerStore

__all__ = [
    "KeyValueStore",
    "MemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "load_collection",
    "save_collection",
    "LedgerStore",
]
