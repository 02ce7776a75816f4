"""Tests for the business analytics service."""

import json
from datetime import datetime, timedelta, timezone

import pytest
from conftest import FIXED_NOW, FixedClock, make_transaction, sequential_ids

from bizvoice.models.business import ResourceCreate, TaskCreate, TaskUpdate
from bizvoice.models.common import (
    ActivityType,
    ResourceType,
    TaskPriority,
    TaskStatus,
    TransactionType,
)
from bizvoice.models.ledger import ProductCreate
from bizvoice.services.business_analytics import (
    ACTIVITIES_KEY,
    RESOURCES_KEY,
    TASKS_KEY,
    BusinessAnalyticsService,
)
from bizvoice.storage.kv_store import JsonFileKeyValueStore, MemoryKeyValueStore
from bizvoice.storage.ledger_store import LedgerStore

INCOME = TransactionType.INCOME
EXPENSE = TransactionType.EXPENSE


def sample_task(**overrides) -> TaskCreate:
    fields = dict(
        title="File GST return",
        assignee="Accounts",
        deadline=FIXED_NOW + timedelta(days=2),
        status=TaskStatus.PENDING,
        priority=TaskPriority.HIGH,
        department="Finance",
    )
    fields.update(overrides)
    return TaskCreate(**fields)


# =========================================================================
# KPIs
# =========================================================================

class TestBusinessKPIs:

    def test_department_aggregation(self, ledger, analytics):
        ledger.add_transaction(make_transaction(EXPENSE, 100, "Food"))
        ledger.add_transaction(make_transaction(EXPENSE, 50, "Shopping"))
        ledger.add_transaction(make_transaction(INCOME, 1000, "Sales"))

        kpis = analytics.calculate_business_kpis()

        assert [(k.name, k.value, k.percentage) for k in kpis] == [
            ("Operations", 100, 66.7),
            ("Marketing", 50, 33.3),
        ]
        assert kpis[0].color == "#f59e0b"

    def test_idempotent(self, ledger, analytics):
        for category, amount in [("Rent", 300), ("Salary", 500), ("Software", 80)]:
            ledger.add_transaction(make_transaction(EXPENSE, amount, category))

        assert analytics.calculate_business_kpis() == analytics.calculate_business_kpis()

    def test_top_four_only(self, ledger, analytics):
        for category, amount in [
            ("Rent", 500), ("Salary", 400), ("Marketing", 300),
            ("Software", 200), ("Insurance", 100),
        ]:
            ledger.add_transaction(make_transaction(EXPENSE, amount, category))

        kpis = analytics.calculate_business_kpis()

        assert [k.name for k in kpis] == ["Operations", "HR", "Marketing", "IT"]

    def test_ties_keep_first_seen_order(self, ledger, analytics):
        ledger.add_transaction(make_transaction(EXPENSE, 70, "Software"))
        ledger.add_transaction(make_transaction(EXPENSE, 70, "Rent"))

        assert [k.name for k in analytics.calculate_business_kpis()] == ["IT", "Operations"]

    def test_unmapped_category_goes_to_other(self, ledger, analytics):
        ledger.add_transaction(make_transaction(EXPENSE, 10, "Mystery"))

        kpi = analytics.calculate_business_kpis()[0]

        assert kpi.name == "Other"
        assert kpi.color == "#6b7280"
        assert kpi.percentage == 100.0

    def test_zero_total(self, ledger, analytics):
        ledger.add_transaction(make_transaction(EXPENSE, 0, "Rent"))

        kpis = analytics.calculate_business_kpis()

        assert kpis[0].percentage == 0.0

    def test_no_expenses(self, analytics):
        assert analytics.calculate_business_kpis() == []


# =========================================================================
# Metrics
# =========================================================================

class TestBusinessMetrics:

    def test_month_over_month_growth(self, ledger, analytics):
        ledger.add_transaction(make_transaction(INCOME, 300, date=datetime(2024, 3, 2, tzinfo=timezone.utc)))
        ledger.add_transaction(make_transaction(INCOME, 200, date=datetime(2024, 2, 10, tzinfo=timezone.utc)))
        ledger.add_transaction(make_transaction(INCOME, 999, date=datetime(2024, 1, 10, tzinfo=timezone.utc)))
        ledger.add_transaction(make_transaction(EXPENSE, 50, date=datetime(2024, 3, 3, tzinfo=timezone.utc)))

        metrics = analytics.calculate_business_metrics()

        assert metrics.monthly_revenue == 300
        assert metrics.monthly_growth_rate == pytest.approx(50.0)
        assert metrics.is_growth_positive is True
        assert metrics.total_revenue == 1499

    def test_zero_previous_month(self, ledger, analytics):
        ledger.add_transaction(make_transaction(INCOME, 300))

        metrics = analytics.calculate_business_metrics()

        assert metrics.monthly_growth_rate == 0
        assert metrics.is_growth_positive is True

    def test_decline_is_negative(self, ledger, analytics):
        ledger.add_transaction(make_transaction(INCOME, 50))
        ledger.add_transaction(make_transaction(INCOME, 200, date=datetime(2024, 2, 1, tzinfo=timezone.utc)))

        metrics = analytics.calculate_business_metrics()

        assert metrics.monthly_growth_rate == pytest.approx(-75.0)
        assert metrics.is_growth_positive is False

    def test_january_compares_with_december(self, store):
        clock = FixedClock(datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc))
        ledger = LedgerStore(store=store, clock=clock)
        analytics = BusinessAnalyticsService(ledger, store=store, clock=clock)

        ledger.add_transaction(make_transaction(INCOME, 100, date=datetime(2023, 12, 20, tzinfo=timezone.utc)))
        ledger.add_transaction(make_transaction(INCOME, 150, date=datetime(2024, 1, 5, tzinfo=timezone.utc)))

        assert analytics.calculate_business_metrics().monthly_growth_rate == pytest.approx(50.0)

    def test_dates_bucketed_in_clock_zone(self, ledger, analytics):
        # 29 Feb 23:30 in New York is 1 March in UTC
        evening = datetime(2024, 2, 29, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
        ledger.add_transaction(make_transaction(INCOME, 80, date=evening))

        assert analytics.calculate_business_metrics().monthly_revenue == 80

    def test_placeholder_counters(self, ledger, analytics):
        for _ in range(7):
            ledger.add_transaction(make_transaction(INCOME, 10))
        ledger.add_transaction(make_transaction(INCOME, 10, date=datetime(2024, 2, 1, tzinfo=timezone.utc)))

        metrics = analytics.calculate_business_metrics()

        assert metrics.orders_fulfilled == 7
        assert metrics.new_clients == 2
        assert metrics.leads_converted == 2
        assert metrics.customer_retention == 85


# =========================================================================
# Top products
# =========================================================================

class TestTopProducts:

    def test_ranked_by_revenue(self, ledger, analytics):
        chairs = ledger.add_product(ProductCreate(name="Chair", category="Furniture"))
        desks = ledger.add_product(ProductCreate(name="Desk", category="Furniture"))

        ledger.add_transaction(make_transaction(INCOME, 100, product_id=chairs.id))
        ledger.add_transaction(make_transaction(INCOME, 150, product_id=chairs.id))
        ledger.add_transaction(make_transaction(INCOME, 400, product_id=desks.id))
        ledger.add_transaction(make_transaction(EXPENSE, 999, product_id=desks.id))

        top = analytics.get_top_products()

        assert [(p.name, p.revenue, p.quantity) for p in top] == [
            ("Desk", 400, 1),
            ("Chair", 250, 2),
        ]
        assert top[0].category == "Furniture"

    def test_income_without_product_is_excluded(self, ledger, analytics):
        lamp = ledger.add_product(ProductCreate(name="Lamp"))
        ledger.add_transaction(make_transaction(INCOME, 20, product_id=lamp.id))
        ledger.add_transaction(make_transaction(INCOME, 100000, description="cash sale"))

        top = analytics.get_top_products()

        assert [p.id for p in top] == [lamp.id]

    def test_missing_catalog_entry(self, ledger, analytics):
        ledger.add_transaction(make_transaction(INCOME, 20, product_id="ghost"))

        product = analytics.get_top_products()[0]

        assert product.name == "Unknown Product"
        assert product.category == "Other"

    def test_limited_to_five(self, ledger, analytics):
        for i in range(7):
            ledger.add_transaction(make_transaction(INCOME, 10 * (i + 1), product_id=f"p{i}"))

        top = analytics.get_top_products()

        assert len(top) == 5
        assert top[0].id == "p6"


# =========================================================================
# Tasks
# =========================================================================

class TestTasks:

    def test_default_seed(self, analytics):
        tasks = analytics.get_tasks()
        assert [t.id for t in tasks] == ["1", "2", "3"]
        assert tasks[0].deadline == FIXED_NOW + timedelta(days=7)

    def test_add_task_round_trip(self, analytics, store):
        before = analytics.get_tasks()
        task = sample_task()

        created = analytics.add_task(task)
        after = analytics.get_tasks()

        assert len(after) == len(before) + 1
        matching = [t for t in after if t.id == created.id]
        assert len(matching) == 1
        assert matching[0].model_dump(exclude={"id"}) == task.model_dump()
        assert created.id not in {t.id for t in before}

        persisted = json.loads(store.get_item(TASKS_KEY))
        assert len(persisted) == len(after)
        assert persisted[-1]["id"] == created.id

    def test_add_task_from_dict(self, analytics):
        created = analytics.add_task({
            "title": "Restock shelves",
            "assignee": "Store",
            "deadline": "2024-03-20T10:00:00Z",
            "department": "Operations",
        })

        assert created.status == TaskStatus.PENDING
        assert created.priority == TaskPriority.MEDIUM

    def test_add_task_logs_activity(self, analytics):
        analytics.add_task(sample_task(title="Audit"))

        logged = [a for a in analytics.get_activities() if a.type == ActivityType.TASK]

        assert logged[0].description == "New task created: Audit"
        assert logged[0].department == "Finance"

    def test_update_task_merges(self, analytics, store):
        updated = analytics.update_task("2", {"status": "completed", "id": "hijack"})

        assert updated.id == "2"
        assert updated.status == TaskStatus.COMPLETED
        assert updated.title == "Update Product Inventory"
        assert analytics.get_task("2").status == TaskStatus.COMPLETED

        persisted = {t["id"]: t for t in json.loads(store.get_item(TASKS_KEY))}
        assert persisted["2"]["status"] == "completed"

    def test_update_task_with_model(self, analytics):
        updated = analytics.update_task("1", TaskUpdate(priority=TaskPriority.LOW))

        assert updated.priority == TaskPriority.LOW
        assert updated.status == TaskStatus.IN_PROGRESS

    def test_update_task_logs_activity(self, analytics):
        analytics.update_task("3", {"assignee": "New Team"})

        descriptions = [a.description for a in analytics.get_activities()]
        assert "Task updated: Client Onboarding Process" in descriptions

    def test_update_missing_task(self, analytics, store):
        assert analytics.update_task("nope", {"title": "x"}) is None
        assert store.get_item(ACTIVITIES_KEY) is None

    def test_getters_return_copies(self, analytics):
        analytics.get_tasks()[0].title = "changed"
        assert analytics.get_tasks()[0].title == "Review Q4 Financial Reports"


# =========================================================================
# Resources
# =========================================================================

class TestResources:

    def test_default_seed(self, analytics):
        assert [r.name for r in analytics.get_resources()] == [
            "Office 365 Business", "Accounting Software", "Office Supplies",
        ]

    def test_add_resource(self, analytics, store):
        created = analytics.add_resource(ResourceCreate(
            name="Laptop", type=ResourceType.HARDWARE, cost=900, quantity=2,
        ))

        assert created.id
        assert analytics.get_resources()[-1] == created
        assert json.loads(store.get_item(RESOURCES_KEY))[-1]["name"] == "Laptop"

        activity = analytics.get_activities()[0]
        assert activity.type == ActivityType.EXPENSE
        assert activity.amount == 900
        assert activity.description == "New resource added: Laptop"


# =========================================================================
# Persistence recovery
# =========================================================================

class TestStorageRecovery:

    def test_corrupt_json_uses_defaults(self, ledger):
        store = MemoryKeyValueStore({
            TASKS_KEY: "{not json",
            RESOURCES_KEY: '[{"name": "missing fields"}]',
            ACTIVITIES_KEY: "42",
        })

        analytics = BusinessAnalyticsService(ledger, store=store, clock=FixedClock())

        assert len(analytics.get_tasks()) == 3
        assert len(analytics.get_resources()) == 3
        assert [a for a in analytics.get_activities() if not a.id.startswith("tx_")] == []

    def test_undecodable_file_uses_defaults(self, ledger, tmp_path):
        (tmp_path / f"{TASKS_KEY}.json").write_bytes(b"\xff\xfe[garbage")

        analytics = BusinessAnalyticsService(ledger, store=JsonFileKeyValueStore(str(tmp_path)), clock=FixedClock())

        assert [t.id for t in analytics.get_tasks()] == ["1", "2", "3"]

    def test_empty_collection_is_reseeded(self, ledger):
        store = MemoryKeyValueStore({TASKS_KEY: "[]"})

        analytics = BusinessAnalyticsService(ledger, store=store, clock=FixedClock())

        assert len(analytics.get_tasks()) == 3
        assert len(json.loads(store.get_item(TASKS_KEY))) == 3

    def test_state_survives_restart(self, ledger, store, clock):
        first = BusinessAnalyticsService(ledger, store=store, clock=clock, id_factory=sequential_ids("a"))
        created = first.add_task(sample_task())

        second = BusinessAnalyticsService(ledger, store=store, clock=clock)

        assert second.get_task(created.id) == created
        assert [a.id for a in second.get_activities()] == [a.id for a in first.get_activities()]


# =========================================================================
# Activities
# =========================================================================

class TestActivities:

    def test_synthesized_from_transactions(self, ledger, analytics):
        tx = ledger.add_transaction(make_transaction(INCOME, 500, "Services", description="Consulting"))
        ledger.add_transaction(make_transaction(
            EXPENSE, 40, "Food", date=FIXED_NOW - timedelta(hours=1), description="Tea",
        ))

        activities = analytics.get_activities()

        assert [a.id for a in activities] == [f"tx_{tx.id}", "tx_tx-2"]
        sale, expense = activities
        assert sale.type == ActivityType.SALE
        assert sale.description == "Sale: Consulting"
        assert sale.client == "Customer"
        assert sale.department == "Sales"
        assert expense.type == ActivityType.EXPENSE
        assert expense.description == "Expense: Tea"
        assert expense.client is None
        assert expense.department == "Operations"

    def test_synthesized_not_persisted(self, ledger, analytics, store):
        ledger.add_transaction(make_transaction(INCOME, 5))
        analytics.add_activity({
            "type": "client",
            "description": "Met supplier",
            "timestamp": FIXED_NOW - timedelta(days=1),
        })

        analytics.get_activities()

        persisted = json.loads(store.get_item(ACTIVITIES_KEY))
        assert [a["description"] for a in persisted] == ["Met supplier"]

    def test_merged_newest_first(self, ledger, analytics):
        ledger.add_transaction(make_transaction(INCOME, 5, date=FIXED_NOW - timedelta(days=2)))
        analytics.add_activity({
            "type": "project",
            "description": "Kickoff",
            "timestamp": FIXED_NOW - timedelta(days=1),
        })
        ledger.add_transaction(make_transaction(EXPENSE, 5, date=FIXED_NOW - timedelta(days=3)))

        descriptions = [a.description for a in analytics.get_activities()]

        assert descriptions == ["Kickoff", "Sale: ", "Expense: "]

    def test_only_ten_most_recent_transactions(self, ledger, analytics):
        for day in range(12):
            ledger.add_transaction(make_transaction(INCOME, 1, date=FIXED_NOW - timedelta(days=day)))

        ids = [a.id for a in analytics.get_activities()]

        assert len(ids) == 10
        assert ids[0] == "tx_tx-1"
        assert "tx_tx-11" not in ids
        assert "tx_tx-12" not in ids

    def test_limited_to_twenty(self, ledger, analytics):
        for i in range(25):
            analytics.add_activity({
                "type": "order",
                "description": f"Order {i}",
                "timestamp": FIXED_NOW - timedelta(minutes=i),
            })

        activities = analytics.get_activities()

        assert len(activities) == 20
        assert activities[0].description == "Order 0"

    def test_content_stable_between_reads(self, ledger, analytics):
        ledger.add_transaction(make_transaction(INCOME, 5, description="a"))
        first = {a.id: a for a in analytics.get_activities()}
        ledger.add_transaction(make_transaction(INCOME, 6, description="b"))
        second = {a.id: a for a in analytics.get_activities()}

        for activity_id, activity in first.items():
            assert second[activity_id] == activity


def test_subscribe_notifies_on_ledger_change(ledger, analytics):
    seen = []
    unsubscribe = analytics.subscribe(lambda: seen.append(len(analytics.calculate_business_kpis())))

    ledger.add_transaction(make_transaction(EXPENSE, 10, "Rent"))
    unsubscribe()
    ledger.add_transaction(make_transaction(EXPENSE, 10, "Salary"))

    assert seen == [1]
