"""
Ledger Store

Reference implementation of the ledger contract consumed by the
analytics engine and the command executor: read-all, append, and
synchronous change notification.
"""

import logging
import uuid
from typing import Callable, Dict, List, Optional, Union

from bizvoice.errors import StorageCorruptionError
from bizvoice.models.ledger import Product, ProductCreate, Transaction, TransactionCreate
from bizvoice.storage.kv_store import (
    KeyValueStore,
    MemoryKeyValueStore,
    load_collection,
    save_collection,
)
from bizvoice.timeutil import Clock, local_now

logger = logging.getLogger(__name__)

TRANSACTIONS_KEY = "transactions"
PRODUCTS_KEY = "products"

Subscriber = Callable[[], None]


class LedgerStore:
    """Transactions and products with subscriber notification."""

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        clock: Optional[Clock] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self.store = store if store is not None else MemoryKeyValueStore()
        self.clock = clock or local_now
        self.id_factory = id_factory or (lambda: uuid.uuid4().hex)

        self._transactions: List[Transaction] = self._load(TRANSACTIONS_KEY, Transaction)
        self._products: List[Product] = self._load(PRODUCTS_KEY, Product)
        self._subscribers: Dict[int, Subscriber] = {}
        self._next_token = 0

    def _load(self, key: str, model) -> list:
        try:
            return load_collection(self.store, key, model) or []
        except StorageCorruptionError as e:
            logger.warning(f"Resetting {key}: {e.message}")
            return []

    # =========================================================================
    # Reads
    # =========================================================================

    def get_transactions(self) -> List[Transaction]:
        """All transactions in insertion order."""
        return list(self._transactions)

    def get_products(self) -> List[Product]:
        return list(self._products)

    def get_product(self, product_id: str) -> Optional[Product]:
        for product in self._products:
            if product.id == product_id:
                return product
        return None

    # =========================================================================
    # Mutations
    # =========================================================================

    def add_transaction(self, data: Union[TransactionCreate, dict]) -> Transaction:
        """Append a transaction, assigning its id (and date if missing)."""
        if isinstance(data, dict):
            data = TransactionCreate.model_validate(data)

        fields = data.model_dump()
        if fields["date"] is None:
            fields["date"] = self.clock()
        transaction = Transaction(id=self.id_factory(), **fields)

        self._transactions.append(transaction)
        save_collection(self.store, TRANSACTIONS_KEY, self._transactions)
        logger.info(f"Added {transaction.type.value} transaction {transaction.id}: {transaction.amount}")
        self._notify()
        return transaction

    def add_product(self, data: Union[ProductCreate, dict]) -> Product:
        """Append a product to the catalogue."""
        if isinstance(data, dict):
            data = ProductCreate.model_validate(data)

        product = Product(id=self.id_factory(), **data.model_dump())
        self._products.append(product)
        save_collection(self.store, PRODUCTS_KEY, self._products)
        logger.info(f"Added product {product.id}: {product.name}")
        self._notify()
        return product

    # =========================================================================
    # Subscriptions
    # =========================================================================

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a change callback.

        Callbacks run synchronously, in registration order, once per
        committed mutation. Returns an idempotent unsubscribe function.
        """
        token = self._next_token
        self._next_token += 1
        self._subscribers[token] = callback

        def unsubscribe():
            self._subscribers.pop(token, None)

        return unsubscribe

    def _notify(self):
        # Snapshot so callbacks may unsubscribe during the round
        for callback in list(self._subscribers.values()):
            callback()
