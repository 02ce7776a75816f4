"""
Business Analytics Models

Read models derived from the ledger (KPIs, metrics, top products) and the
task/resource/activity collections owned by the analytics service.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from bizvoice.models.common import (
    ActivityStatus,
    ActivityType,
    ResourceStatus,
    ResourceType,
    TaskPriority,
    TaskStatus,
)


class BusinessKPI(BaseModel):
    """Department expense share, as shown on the KPI chart."""
    name: str
    value: float
    color: str
    percentage: float = 0.0


class BusinessMetrics(BaseModel):
    """Month-over-month revenue metrics."""

    monthly_growth_rate: float = 0.0
    total_revenue: float = 0.0
    monthly_revenue: float = 0.0
    is_growth_positive: bool = True

    # Placeholders: estimated from income transaction counts, not from
    # customer, order or CRM data.
    customer_retention: float = Field(default=85.0, description="Placeholder, fixed value")
    new_clients: int = Field(default=0, description="Placeholder, floor(current month income count / 3)")
    orders_fulfilled: int = Field(default=0, description="Placeholder, current month income count")
    leads_converted: int = Field(default=0, description="Placeholder, floor(orders_fulfilled * 0.3)")


class TopProduct(BaseModel):
    """A product ranked by income revenue."""
    id: str
    name: str
    revenue: float
    quantity: int
    change: float = 0.0
    category: str


# ============================================================================
# Tasks
# ============================================================================

class TaskCreate(BaseModel):
    """Input for a new task."""
    title: str
    assignee: str
    deadline: datetime
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    department: str


class BusinessTask(TaskCreate):
    """A team task."""
    id: str


class TaskUpdate(BaseModel):
    """Partial task update; unset fields are left alone."""
    title: Optional[str] = None
    assignee: Optional[str] = None
    deadline: Optional[datetime] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    department: Optional[str] = None


# ============================================================================
# Resources
# ============================================================================

class ResourceCreate(BaseModel):
    """Input for a new company resource."""
    name: str
    type: ResourceType
    cost: float = Field(..., ge=0)
    status: ResourceStatus = ResourceStatus.ACTIVE
    renewal_date: Optional[datetime] = None
    quantity: Optional[int] = Field(default=None, ge=0)


class CompanyResource(ResourceCreate):
    """A software, hardware, subscription or inventory resource."""
    id: str


# ============================================================================
# Activities
# ============================================================================

class ActivityCreate(BaseModel):
    """Input for a new activity feed entry."""
    type: ActivityType
    description: str
    timestamp: datetime
    amount: Optional[float] = Field(default=None, ge=0)
    status: ActivityStatus = ActivityStatus.COMPLETED
    client: Optional[str] = None
    department: Optional[str] = None


class BusinessActivity(ActivityCreate):
    """An activity feed entry, either logged or synthesized from a transaction."""
    id: str
