"""Shared test data."""
from decimal import Decimal

from budgetwise.transactions.models import (
    AggregatedFinancials,
    CategorySpend,
    Summary,
    TransactionRecord,
    TrendPoint,
)


def make_financials(
    income="5000",
    expenses="3200",
    savings="1800",
    breakdown=None
) -> AggregatedFinancials:
    """Demo figures: 5000 income, 3200 expenses, 1800 savings."""
    if breakdown is None:
        breakdown = [
            ("Food", "450", "35"),
            ("Transportation", "300", "23"),
            ("Entertainment", "200", "15"),
            ("Utilities", "350", "27"),
        ]

    return AggregatedFinancials(
        summary=Summary(Decimal(income), Decimal(expenses), Decimal(savings)),
        recent_transactions=[
            TransactionRecord("Grocery Shopping", Decimal("-120.50"), "Food", "2025-12-30"),
            TransactionRecord("Gas Station", Decimal("-45.00"), "Transportation", "2025-12-29"),
            TransactionRecord("Coffee", Decimal("-4.20"), "Food", "2025-12-28"),
            TransactionRecord("Salary", Decimal("3000.00"), "Income", "2025-12-26"),
        ],
        category_breakdown=[
            CategorySpend(name, Decimal(amount), Decimal(pct)) for name, amount, pct in breakdown
        ],
        spending_trend=[
            TrendPoint("Oct", Decimal(5600), Decimal(3800), Decimal(1800)),
            TrendPoint("Nov", Decimal(5300), Decimal(4000), Decimal(1300)),
            TrendPoint("Dec", Decimal(5800), Decimal(4500), Decimal(1300)),
        ],
    )
