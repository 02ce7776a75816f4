"""
Ledger Models

Transactions and products held by the ledger store. The analytics
engine only reads these; the command executor appends transactions.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from bizvoice.models.common import TransactionType


class TransactionCreate(BaseModel):
    """Input for a new ledger transaction (id assigned by the store)."""

    type: TransactionType
    amount: float = Field(..., ge=0, description="Currency-agnostic amount")
    category: str = Field(..., description="Free-text category key")
    description: str = ""
    date: Optional[datetime] = Field(default=None, description="Defaults to now")
    payment_method: str = "Cash"
    product_id: Optional[str] = Field(default=None, description="Weak reference to a Product")


class Transaction(BaseModel):
    """A recorded income or expense."""

    id: str
    type: TransactionType
    amount: float = Field(..., ge=0)
    category: str
    description: str = ""
    date: datetime
    payment_method: str = "Cash"
    product_id: Optional[str] = None


class ProductCreate(BaseModel):
    """Input for a new catalogue product."""

    name: str
    category: str = "Other"
    sku: Optional[str] = None
    cost_price: float = Field(default=0.0, ge=0)
    selling_price: float = Field(default=0.0, ge=0)
    stock_quantity: float = Field(default=0.0, ge=0)
    low_stock_threshold: float = Field(default=0.0, ge=0)
    description: Optional[str] = None


class Product(ProductCreate):
    """A catalogue product."""

    id: str

    @property
    def is_low_stock(self) -> bool:
        return self.stock_quantity <= self.low_stock_threshold
