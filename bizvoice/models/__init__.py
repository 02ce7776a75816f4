"""bizvoice Data Models"""

from bizvoice.models.business import (
    ActivityCreate,
    BusinessActivity,
    BusinessKPI,
    BusinessMetrics,
    BusinessTask,
    CompanyResource,
    ResourceCreate,
    TaskCreate,
    TaskUpdate,
    TopProduct,
)
from bizvoice.models.common import (
    ActivityStatus,
    ActivityType,
    IntentKind,
    Language,
    ListeningState,
    ResourceStatus,
    ResourceType,
    TaskPriority,
    TaskStatus,
    TransactionType,
)
from bizvoice.models.ledger import Product, ProductCreate, Transaction, TransactionCreate
from bizvoice.models.voice import VoiceCommand

__all__ = [
    # Common
    "Language", "TransactionType", "IntentKind", "ListeningState",
    "TaskStatus", "TaskPriority", "ResourceType", "ResourceStatus",
    "ActivityType", "ActivityStatus",
    # Ledger
    "Transaction", "TransactionCreate", "Product", "ProductCreate",
    # Voice
    "VoiceCommand",
    # Business
    "BusinessKPI", "BusinessMetrics", "TopProduct",
    "BusinessTask", "TaskCreate", "TaskUpdate",
    "CompanyResource", "ResourceCreate",
    "BusinessActivity", "ActivityCreate",
]
