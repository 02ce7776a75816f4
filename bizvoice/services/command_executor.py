"""
Command Executor

Applies a parsed VoiceCommand to the ledger and answers queries.
Unknown products or periods produce an unsuccessful result, never an
exception.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from rapidfuzz import fuzz, process

from bizvoice.models.common import IntentKind, TransactionType
from bizvoice.models.ledger import Product, Transaction, TransactionCreate
from bizvoice.models.voice import VoiceCommand
from bizvoice.services.business_analytics import BusinessAnalyticsService
from bizvoice.storage.ledger_store import LedgerStore
from bizvoice.timeutil import align_to

logger = logging.getLogger(__name__)

VOICE_CATEGORY = "Voice Entry"
VOICE_PAYMENT_METHOD = "Cash"

INCOME_METRICS = {"sales", "revenue", "total revenue", "earn", "make"}
EXPENSE_METRICS = {"expenses", "expense", "total expense", "spend"}
PROFIT_METRICS = {"profit"}


@dataclass
class CommandResult:
    """Outcome of executing a voice command."""
    intent: IntentKind
    success: bool
    message: str
    data: Dict[str, Any] = field(default_factory=dict)


class CommandExecutor:
    """Executes voice commands against the ledger and analytics service."""

    def __init__(
        self,
        ledger: LedgerStore,
        analytics: BusinessAnalyticsService,
        match_threshold: float = 0.7,
    ):
        self.ledger = ledger
        self.analytics = analytics
        self.match_threshold = match_threshold

    def execute(self, command: VoiceCommand) -> CommandResult:
        handlers = {
            IntentKind.ADD_TRANSACTION: self._add_transaction,
            IntentKind.QUERY_DATA: self._query_data,
            IntentKind.CHECK_STOCK: self._check_stock,
            IntentKind.SHOW_ANALYTICS: self._show_analytics,
        }
        result = handlers[command.intent](command)
        logger.info(f"Executed {command.intent.value}: success={result.success}")
        return result

    # =========================================================================
    # Handlers
    # =========================================================================

    def _add_transaction(self, command: VoiceCommand) -> CommandResult:
        params = command.parameters
        transaction = self.ledger.add_transaction(TransactionCreate(
            type=TransactionType(params["type"]),
            amount=params["amount"],
            category=VOICE_CATEGORY,
            description=params.get("description", ""),
            payment_method=VOICE_PAYMENT_METHOD,
        ))
        return CommandResult(
            intent=command.intent,
            success=True,
            message=f"Added {transaction.type.value} of {transaction.amount:g}",
            data={"transaction": transaction.model_dump(mode="json")},
        )

    def _query_data(self, command: VoiceCommand) -> CommandResult:
        period = command.parameters.get("period", "today")
        metric = command.parameters.get("metric", "")

        start = self._period_start(period)
        if start is None and period != "all":
            return CommandResult(command.intent, False, f"Unknown period: {period}")

        totals = self._totals_since(start)
        if metric in INCOME_METRICS:
            value = totals["income"]
        elif metric in EXPENSE_METRICS:
            value = totals["expense"]
        elif metric in PROFIT_METRICS:
            value = totals["profit"]
        else:
            return CommandResult(command.intent, False, f"Unknown metric: {metric}", totals)

        return CommandResult(
            intent=command.intent,
            success=True,
            message=f"{metric.capitalize()} for {period}: {value:g}",
            data={"period": period, "metric": metric, "value": value, **totals},
        )

    def _check_stock(self, command: VoiceCommand) -> CommandResult:
        spoken = command.parameters.get("product", "")
        product = self._match_product(spoken)
        if product is None:
            return CommandResult(command.intent, False, f"Product not found: {spoken}")

        message = f"{product.name}: {product.stock_quantity:g} in stock"
        if product.is_low_stock:
            message += " (low stock)"

        return CommandResult(
            intent=command.intent,
            success=True,
            message=message,
            data={
                "product_id": product.id,
                "name": product.name,
                "stock_quantity": product.stock_quantity,
                "low_stock": product.is_low_stock,
            },
        )

    def _show_analytics(self, command: VoiceCommand) -> CommandResult:
        metrics = self.analytics.calculate_business_metrics()
        return CommandResult(
            intent=command.intent,
            success=True,
            message=f"Monthly revenue {metrics.monthly_revenue:g}, growth {metrics.monthly_growth_rate:.1f}%",
            data=metrics.model_dump(),
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _period_start(self, period: str) -> Optional[datetime]:
        """Start of the named period in the analytics clock's zone."""
        now = self.analytics.clock()
        midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)

        if period == "today":
            return midnight
        if period == "this week":
            return midnight - timedelta(days=midnight.weekday())
        if period == "this month":
            return midnight.replace(day=1)
        return None

    def _totals_since(self, start: Optional[datetime]) -> Dict[str, float]:
        transactions: List[Transaction] = self.ledger.get_transactions()
        if start is not None:
            transactions = [t for t in transactions if align_to(t.date, start) >= start]

        income = sum(t.amount for t in transactions if t.type == TransactionType.INCOME)
        expense = sum(t.amount for t in transactions if t.type == TransactionType.EXPENSE)
        return {"income": income, "expense": expense, "profit": income - expense}

    def _match_product(self, spoken: str) -> Optional[Product]:
        """Best fuzzy catalogue match above the threshold."""
        if not spoken.strip():
            return None

        products = {p.id: p for p in self.ledger.get_products()}
        if not products:
            return None

        choices = {product_id: p.name.lower() for product_id, p in products.items()}
        best = process.extractOne(spoken.lower(), choices, scorer=fuzz.WRatio)
        if best is None:
            return None

        _, score, product_id = best
        if score / 100.0 < self.match_threshold:
            logger.debug(f"Best match for {spoken!r} scored {score:.0f}, below threshold")
            return None
        return products[product_id]
