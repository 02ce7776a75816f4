"""
Business Analytics Service

Derives dashboard read models from the ledger (department KPIs,
month-over-month metrics, top products, activity feed) and owns the
task, resource and activity collections.

Read models are recomputed on every call from a fresh ledger read;
nothing is cached. Mutations overwrite the whole persisted collection
and append an audit activity in the same call.
"""

import logging
import uuid
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel

from bizvoice.errors import StorageCorruptionError
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
    ResourceStatus,
    ResourceType,
    TaskPriority,
    TaskStatus,
    TransactionType,
)
from bizvoice.models.ledger import Transaction
from bizvoice.services.departments import get_department_color, map_category_to_department
from bizvoice.storage.kv_store import (
    KeyValueStore,
    MemoryKeyValueStore,
    load_collection,
    save_collection,
)
from bizvoice.storage.ledger_store import LedgerStore
from bizvoice.timeutil import Clock, align_to, local_now

logger = logging.getLogger(__name__)

TASKS_KEY = "business_tasks"
RESOURCES_KEY = "business_resources"
ACTIVITIES_KEY = "business_activities"

UNKNOWN_PRODUCT = "Unknown Product"
UNKNOWN_CATEGORY = "Other"

# Placeholder retention figure; there is no customer data to compute it from
CUSTOMER_RETENTION_PLACEHOLDER = 85.0

ModelT = TypeVar("ModelT", bound=BaseModel)


class BusinessAnalyticsService:
    """KPIs, metrics and team/resource tracking for the business dashboard."""

    def __init__(
        self,
        ledger: LedgerStore,
        store: Optional[KeyValueStore] = None,
        clock: Optional[Clock] = None,
        id_factory: Optional[Callable[[], str]] = None,
        kpi_limit: int = 4,
        top_products_limit: int = 5,
        activity_limit: int = 20,
        recent_transaction_activities: int = 10,
    ):
        self.ledger = ledger
        self.store = store if store is not None else MemoryKeyValueStore()
        self.clock = clock or local_now
        self.id_factory = id_factory or (lambda: str(uuid.uuid4()))

        self.kpi_limit = kpi_limit
        self.top_products_limit = top_products_limit
        self.activity_limit = activity_limit
        self.recent_transaction_activities = recent_transaction_activities

        self._tasks: List[BusinessTask] = self._load_seeded(
            TASKS_KEY, BusinessTask, self._default_tasks
        )
        self._resources: List[CompanyResource] = self._load_seeded(
            RESOURCES_KEY, CompanyResource, self._default_resources
        )
        self._activities: List[BusinessActivity] = self._load_seeded(
            ACTIVITIES_KEY, BusinessActivity, list, reseed_empty=False
        )

    # =========================================================================
    # Persistence
    # =========================================================================

    def _load_seeded(
        self,
        key: str,
        model: Type[ModelT],
        default_factory: Callable[[], List[ModelT]],
        reseed_empty: bool = True,
    ) -> List[ModelT]:
        """Load a collection, falling back to its seed when absent or unreadable."""
        try:
            items = load_collection(self.store, key, model)
        except StorageCorruptionError as e:
            logger.warning(f"Using default {key}: {e.message}")
            return default_factory()

        if items is None:
            return default_factory()

        if not items and reseed_empty:
            items = default_factory()
            save_collection(self.store, key, items)
        return items

    def _default_tasks(self) -> List[BusinessTask]:
        now = self.clock()
        return [
            BusinessTask(
                id="1",
                title="Review Q4 Financial Reports",
                assignee="Finance Team",
                deadline=now + timedelta(days=7),
                status=TaskStatus.IN_PROGRESS,
                priority=TaskPriority.HIGH,
                department="Finance",
            ),
            BusinessTask(
                id="2",
                title="Update Product Inventory",
                assignee="Operations Team",
                deadline=now + timedelta(days=3),
                status=TaskStatus.PENDING,
                priority=TaskPriority.MEDIUM,
                department="Operations",
            ),
            BusinessTask(
                id="3",
                title="Client Onboarding Process",
                assignee="Sales Team",
                deadline=now + timedelta(days=5),
                status=TaskStatus.COMPLETED,
                priority=TaskPriority.HIGH,
                department="Sales",
            ),
        ]

    def _default_resources(self) -> List[CompanyResource]:
        now = self.clock()
        return [
            CompanyResource(
                id="1",
                name="Office 365 Business",
                type=ResourceType.SUBSCRIPTION,
                cost=12.50,
                status=ResourceStatus.ACTIVE,
                renewal_date=now + timedelta(days=30),
            ),
            CompanyResource(
                id="2",
                name="Accounting Software",
                type=ResourceType.SOFTWARE,
                cost=29.99,
                status=ResourceStatus.ACTIVE,
                renewal_date=now + timedelta(days=60),
            ),
            CompanyResource(
                id="3",
                name="Office Supplies",
                type=ResourceType.INVENTORY,
                cost=250.00,
                status=ResourceStatus.ACTIVE,
                quantity=50,
            ),
        ]

    # =========================================================================
    # Ledger-derived read models
    # =========================================================================

    def calculate_business_kpis(self) -> List[BusinessKPI]:
        """Expense totals per department, largest first."""
        totals: Dict[str, float] = {}
        for transaction in self.ledger.get_transactions():
            if transaction.type != TransactionType.EXPENSE:
                continue
            department = map_category_to_department(transaction.category)
            totals[department] = totals.get(department, 0.0) + transaction.amount

        grand_total = sum(totals.values())

        kpis = [
            BusinessKPI(
                name=department,
                value=value,
                color=get_department_color(department),
                percentage=round(value / grand_total * 100, 1) if grand_total > 0 else 0.0,
            )
            for department, value in totals.items()
        ]
        # sorted() is stable, so ties keep first-seen department order
        kpis = sorted(kpis, key=lambda k: k.value, reverse=True)
        return kpis[:self.kpi_limit]

    def calculate_business_metrics(self) -> BusinessMetrics:
        """
        Current vs previous calendar month income.

        Months are taken in the clock's timezone. Growth is 0 when the
        previous month had no income, which also counts as positive.
        """
        now = self.clock()
        current_key = (now.year, now.month)
        previous_key = (now.year - 1, 12) if now.month == 1 else (now.year, now.month - 1)

        incomes = [
            t for t in self.ledger.get_transactions()
            if t.type == TransactionType.INCOME
        ]

        current_month: List[Transaction] = []
        previous_revenue = 0.0
        for transaction in incomes:
            local_date = align_to(transaction.date, now)
            month_key = (local_date.year, local_date.month)
            if month_key == current_key:
                current_month.append(transaction)
            elif month_key == previous_key:
                previous_revenue += transaction.amount

        current_revenue = sum(t.amount for t in current_month)

        if previous_revenue > 0:
            growth_rate = (current_revenue - previous_revenue) / previous_revenue * 100
        else:
            growth_rate = 0.0

        orders_fulfilled = len(current_month)

        return BusinessMetrics(
            monthly_growth_rate=growth_rate,
            total_revenue=sum(t.amount for t in incomes),
            monthly_revenue=current_revenue,
            is_growth_positive=growth_rate >= 0,
            customer_retention=CUSTOMER_RETENTION_PLACEHOLDER,
            new_clients=orders_fulfilled // 3,
            orders_fulfilled=orders_fulfilled,
            leads_converted=int(orders_fulfilled * 0.3),
        )

    def get_top_products(self) -> List[TopProduct]:
        """
        Products ranked by income revenue.

        Only income transactions that reference a product are counted;
        sales without a product_id do not appear in the ranking.
        """
        stats: Dict[str, Dict[str, float]] = {}
        for transaction in self.ledger.get_transactions():
            if transaction.type != TransactionType.INCOME or not transaction.product_id:
                continue
            entry = stats.setdefault(transaction.product_id, {"revenue": 0.0, "quantity": 0})
            entry["revenue"] += transaction.amount
            entry["quantity"] += 1

        catalog = {p.id: p for p in self.ledger.get_products()}

        ranked = []
        for product_id, entry in stats.items():
            product = catalog.get(product_id)
            ranked.append(TopProduct(
                id=product_id,
                name=product.name if product else UNKNOWN_PRODUCT,
                revenue=entry["revenue"],
                quantity=int(entry["quantity"]),
                change=0.0,  # no per-period history to compare against
                category=product.category if product else UNKNOWN_CATEGORY,
            ))

        ranked = sorted(ranked, key=lambda p: p.revenue, reverse=True)
        return ranked[:self.top_products_limit]

    # =========================================================================
    # Tasks
    # =========================================================================

    def get_tasks(self) -> List[BusinessTask]:
        return [task.model_copy() for task in self._tasks]

    def get_task(self, task_id: str) -> Optional[BusinessTask]:
        for task in self._tasks:
            if task.id == task_id:
                return task.model_copy()
        return None

    def add_task(self, task: Union[TaskCreate, dict]) -> BusinessTask:
        """Create a task with a fresh id and log it."""
        if isinstance(task, dict):
            task = TaskCreate.model_validate(task)

        new_task = BusinessTask(id=self.id_factory(), **task.model_dump())
        self._tasks.append(new_task)
        save_collection(self.store, TASKS_KEY, self._tasks)

        self.add_activity(ActivityCreate(
            type=ActivityType.TASK,
            description=f"New task created: {new_task.title}",
            timestamp=self.clock(),
            status=ActivityStatus.COMPLETED,
            department=new_task.department,
        ))
        logger.info(f"Added task {new_task.id}: {new_task.title}")
        return new_task.model_copy()

    def update_task(
        self,
        task_id: str,
        updates: Union[TaskUpdate, dict],
    ) -> Optional[BusinessTask]:
        """
        Merge updates into a task.

        Returns:
            The updated task, or None if no task has that id
        """
        index = next((i for i, t in enumerate(self._tasks) if t.id == task_id), None)
        if index is None:
            logger.debug(f"update_task: no task {task_id}")
            return None

        if isinstance(updates, TaskUpdate):
            changes = updates.model_dump(exclude_unset=True, exclude_none=True)
        else:
            changes = {k: v for k, v in updates.items() if k != "id"}

        merged = {**self._tasks[index].model_dump(), **changes}
        updated = BusinessTask.model_validate(merged)
        self._tasks[index] = updated
        save_collection(self.store, TASKS_KEY, self._tasks)

        self.add_activity(ActivityCreate(
            type=ActivityType.TASK,
            description=f"Task updated: {updated.title}",
            timestamp=self.clock(),
            status=ActivityStatus.COMPLETED,
            department=updated.department,
        ))
        return updated.model_copy()

    # =========================================================================
    # Resources
    # =========================================================================

    def get_resources(self) -> List[CompanyResource]:
        return [resource.model_copy() for resource in self._resources]

    def add_resource(self, resource: Union[ResourceCreate, dict]) -> CompanyResource:
        """Register a resource and log its cost as an expense activity."""
        if isinstance(resource, dict):
            resource = ResourceCreate.model_validate(resource)

        new_resource = CompanyResource(id=self.id_factory(), **resource.model_dump())
        self._resources.append(new_resource)
        save_collection(self.store, RESOURCES_KEY, self._resources)

        self.add_activity(ActivityCreate(
            type=ActivityType.EXPENSE,
            description=f"New resource added: {new_resource.name}",
            timestamp=self.clock(),
            amount=new_resource.cost,
            status=ActivityStatus.COMPLETED,
        ))
        logger.info(f"Added resource {new_resource.id}: {new_resource.name}")
        return new_resource.model_copy()

    # =========================================================================
    # Activities
    # =========================================================================

    def add_activity(self, activity: Union[ActivityCreate, dict]) -> BusinessActivity:
        """Append an explicit activity to the persisted log."""
        if isinstance(activity, dict):
            activity = ActivityCreate.model_validate(activity)

        new_activity = BusinessActivity(id=self.id_factory(), **activity.model_dump())
        self._activities.append(new_activity)
        save_collection(self.store, ACTIVITIES_KEY, self._activities)
        return new_activity.model_copy()

    def get_activities(self) -> List[BusinessActivity]:
        """
        Newest activities first.

        Merges the persisted log with activities synthesized from the most
        recent ledger transactions. Synthesized entries (ids "tx_<id>")
        are rebuilt on every call and never stored.
        """
        now = self.clock()
        merged = [a.model_copy() for a in self._activities] + self._activities_from_transactions(now)
        merged = sorted(merged, key=lambda a: align_to(a.timestamp, now), reverse=True)
        return merged[:self.activity_limit]

    def _activities_from_transactions(self, now: datetime) -> List[BusinessActivity]:
        recent = sorted(
            self.ledger.get_transactions(),
            key=lambda t: align_to(t.date, now),
            reverse=True,
        )[:self.recent_transaction_activities]

        activities = []
        for transaction in recent:
            is_income = transaction.type == TransactionType.INCOME
            activities.append(BusinessActivity(
                id=f"tx_{transaction.id}",
                type=ActivityType.SALE if is_income else ActivityType.EXPENSE,
                description=f"{'Sale' if is_income else 'Expense'}: {transaction.description}",
                timestamp=transaction.date,
                amount=transaction.amount,
                status=ActivityStatus.COMPLETED,
                client="Customer" if is_income else None,
                department=map_category_to_department(transaction.category),
            ))
        return activities

    # =========================================================================
    # Change notification
    # =========================================================================

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Be told when the ledger changes, to re-pull read models."""
        return self.ledger.subscribe(callback)
