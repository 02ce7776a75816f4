"""
Sample Business Data

Populates an empty ledger and analytics service with a small services
business: four products, a week of sales and expenses, team tasks and
company resources.
"""

import logging
from datetime import timedelta

from bizvoice.models.business import ResourceCreate, TaskCreate
from bizvoice.models.common import ResourceStatus, ResourceType, TaskPriority, TaskStatus, TransactionType
from bizvoice.models.ledger import ProductCreate, TransactionCreate
from bizvoice.services.business_analytics import BusinessAnalyticsService
from bizvoice.storage.ledger_store import LedgerStore

logger = logging.getLogger(__name__)

# Ledgers with more transactions than this are left alone
SEED_THRESHOLD = 10

SAMPLE_PRODUCTS = [
    ProductCreate(name="Business Consulting Service", category="Services", sku="BCS-001",
                  cost_price=500, selling_price=1500, stock_quantity=100, low_stock_threshold=10,
                  description="Professional business consulting services"),
    ProductCreate(name="Digital Marketing Package", category="Services", sku="DMP-002",
                  cost_price=800, selling_price=2000, stock_quantity=50, low_stock_threshold=5,
                  description="Complete digital marketing solution"),
    ProductCreate(name="Software Development", category="Services", sku="SD-003",
                  cost_price=2000, selling_price=5000, stock_quantity=25, low_stock_threshold=3,
                  description="Custom software development services"),
    ProductCreate(name="Office Supplies Bundle", category="Products", sku="OSB-004",
                  cost_price=100, selling_price=250, stock_quantity=200, low_stock_threshold=20,
                  description="Complete office supplies package"),
]

# (type, amount, category, description, days ago, payment method, product index)
SAMPLE_TRANSACTIONS = [
    (TransactionType.INCOME, 15000, "Services", "Business Consulting - Q4 Strategy", 1, "Bank Transfer", 0),
    (TransactionType.INCOME, 20000, "Services", "Digital Marketing Campaign", 2, "Credit Card", 1),
    (TransactionType.INCOME, 50000, "Services", "Custom ERP Development", 3, "Bank Transfer", 2),
    (TransactionType.INCOME, 2500, "Sales", "Office Supplies - Corporate Order", 4, "Cash", 3),
    (TransactionType.INCOME, 18000, "Services", "SEO Optimization Service", 5, "UPI", None),
    (TransactionType.EXPENSE, 5000, "Salary", "Employee Salary - Development Team", 1, "Bank Transfer", None),
    (TransactionType.EXPENSE, 1200, "Software", "Microsoft Office 365 Subscription", 2, "Credit Card", None),
    (TransactionType.EXPENSE, 3500, "Rent", "Office Rent - Monthly", 3, "Bank Transfer", None),
    (TransactionType.EXPENSE, 800, "Utilities", "Internet & Phone Bills", 4, "Auto Debit", None),
    (TransactionType.EXPENSE, 2500, "Marketing", "Google Ads Campaign", 5, "Credit Card", None),
    (TransactionType.EXPENSE, 1500, "Supplies", "Office Equipment & Supplies", 6, "Cash", None),
    (TransactionType.EXPENSE, 4000, "Training", "Team Training & Development", 7, "Bank Transfer", None),
]

# (title, assignee, days until deadline, status, priority, department)
SAMPLE_TASKS = [
    ("Complete Q4 Financial Analysis", "Finance Manager", 5, TaskStatus.IN_PROGRESS, TaskPriority.HIGH, "Finance"),
    ("Launch New Marketing Campaign", "Marketing Team", 10, TaskStatus.PENDING, TaskPriority.HIGH, "Marketing"),
    ("Client Onboarding Process Review", "Operations Manager", 7, TaskStatus.PENDING, TaskPriority.MEDIUM, "Operations"),
    ("Update CRM System", "IT Team", 15, TaskStatus.PENDING, TaskPriority.MEDIUM, "IT"),
    ("Prepare Monthly Sales Report", "Sales Manager", 3, TaskStatus.COMPLETED, TaskPriority.HIGH, "Sales"),
]

# (name, type, cost, days until renewal, quantity)
SAMPLE_RESOURCES = [
    ("Salesforce CRM Professional", ResourceType.SUBSCRIPTION, 3500, 45, None),
    ("AWS Cloud Infrastructure", ResourceType.SUBSCRIPTION, 8500, 20, None),
    ("Adobe Creative Suite", ResourceType.SOFTWARE, 2400, 60, None),
    ("Office Furniture & Equipment", ResourceType.HARDWARE, 15000, None, 25),
    ("Zoom Business Plan", ResourceType.SUBSCRIPTION, 1200, 30, None),
]


def seed_sample_business_data(
    ledger: LedgerStore,
    analytics: BusinessAnalyticsService,
) -> bool:
    """
    Add the sample business unless the ledger already has data.

    Returns:
        True if sample data was added
    """
    if len(ledger.get_transactions()) > SEED_THRESHOLD:
        logger.debug("Ledger already populated - skipping sample data")
        return False

    now = analytics.clock()

    products = [ledger.add_product(p) for p in SAMPLE_PRODUCTS]

    for tx_type, amount, category, description, days_ago, method, product_index in SAMPLE_TRANSACTIONS:
        ledger.add_transaction(TransactionCreate(
            type=tx_type,
            amount=amount,
            category=category,
            description=description,
            date=now - timedelta(days=days_ago),
            payment_method=method,
            product_id=products[product_index].id if product_index is not None else None,
        ))

    for title, assignee, days, status, priority, department in SAMPLE_TASKS:
        analytics.add_task(TaskCreate(
            title=title,
            assignee=assignee,
            deadline=now + timedelta(days=days),
            status=status,
            priority=priority,
            department=department,
        ))

    for name, resource_type, cost, renewal_days, quantity in SAMPLE_RESOURCES:
        analytics.add_resource(ResourceCreate(
            name=name,
            type=resource_type,
            cost=cost,
            status=ResourceStatus.ACTIVE,
            renewal_date=now + timedelta(days=renewal_days) if renewal_days is not None else None,
            quantity=quantity,
        ))

    logger.info("Sample business data initialized")
    return True
