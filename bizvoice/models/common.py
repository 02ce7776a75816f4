"""Common types used across bizvoice."""

from enum import Enum


class Language(str, Enum):
    """Supported voice languages."""
    ENGLISH = "en"
    HINDI = "hi"
    MARATHI = "mr"


class TransactionType(str, Enum):
    """Ledger transaction direction."""
    INCOME = "income"
    EXPENSE = "expense"


class IntentKind(str, Enum):
    """What a voice command asks for."""
    ADD_TRANSACTION = "add_transaction"
    QUERY_DATA = "query_data"
    CHECK_STOCK = "check_stock"
    SHOW_ANALYTICS = "show_analytics"


class ListeningState(str, Enum):
    """Recognition session state."""
    IDLE = "idle"
    LISTENING = "listening"


class TaskStatus(str, Enum):
    """Business task status."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    OVERDUE = "overdue"


class TaskPriority(str, Enum):
    """Business task priority."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ResourceType(str, Enum):
    """Company resource kind."""
    SOFTWARE = "software"
    HARDWARE = "hardware"
    SUBSCRIPTION = "subscription"
    INVENTORY = "inventory"


class ResourceStatus(str, Enum):
    """Company resource status."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    EXPIRED = "expired"


class ActivityType(str, Enum):
    """Activity feed entry kind."""
    ORDER = "order"
    CLIENT = "client"
    PROJECT = "project"
    SALE = "sale"
    EXPENSE = "expense"
    TASK = "task"


class ActivityStatus(str, Enum):
    """Activity feed entry status."""
    COMPLETED = "completed"
    PENDING = "pending"
    FAILED = "failed"
