"""
Department Mapping - transaction category to business department.

Static lookup used by the KPI chart and the activity feed. Any category
not listed here belongs to "Other".
"""

from typing import Dict

OTHER_DEPARTMENT = "Other"

CATEGORY_DEPARTMENTS: Dict[str, str] = {
    # Revenue
    "Sales": "Sales",
    "Services": "Sales",
    # Running costs
    "Rent": "Operations",
    "Utilities": "Operations",
    "Supplies": "Operations",
    "Food": "Operations",
    "Transport": "Operations",
    "Home": "Operations",
    # People
    "Salary": "HR",
    "Training": "HR",
    # Promotion
    "Marketing": "Marketing",
    "Advertising": "Marketing",
    "Shopping": "Marketing",
    "Entertainment": "Marketing",
    "Vacation": "Marketing",
    # Tech
    "Software": "IT",
    "Hardware": "IT",
    # Cover
    "Healthcare": "Support",
    "Insurance": "Support",
    "Education": "Development",
}

DEPARTMENT_COLORS: Dict[str, str] = {
    "Sales": "#10b981",
    "Marketing": "#3b82f6",
    "Operations": "#f59e0b",
    "HR": "#8b5cf6",
    "IT": "#06b6d4",
    "Finance": "#ef4444",
    "Support": "#32cd32",
    "Development": "#9370db",
    OTHER_DEPARTMENT: "#6b7280",
}


def map_category_to_department(category: str) -> str:
    """Department for a category (case-sensitive key), "Other" if unmapped."""
    return CATEGORY_DEPARTMENTS.get(category, OTHER_DEPARTMENT)


def get_department_color(department: str) -> str:
    return DEPARTMENT_COLORS.get(department, DEPARTMENT_COLORS[OTHER_DEPARTMENT])
