"""Data models for the transaction provider feeds."""
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from budgetwise.utils.exceptions import ValidationError
from budgetwise.utils.numbers import to_decimal, to_json_number


def _require(data, key: str, feed: str):
    if not isinstance(data, dict):
        raise ValidationError(f"{feed}: expected an object, got {type(data).__name__}")
    if key not in data:
        raise ValidationError(f"{feed}: missing field '{key}'")
    return data[key]


@dataclass
class Summary:
    """Monthly totals."""
    income: Decimal
    expenses: Decimal
    savings: Decimal

    @classmethod
    def from_dict(cls, data: dict) -> "Summary":
        return cls(
            income=to_decimal(_require(data, "income", "summary"), "income"),
            expenses=to_decimal(_require(data, "expenses", "summary"), "expenses"),
            savings=to_decimal(_require(data, "savings", "summary"), "savings"),
        )


@dataclass
class TransactionRecord:
    """One recent transaction."""
    description: str
    amount: Decimal
    category: str
    date: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "TransactionRecord":
        return cls(
            description=str(_require(data, "description", "recent")),
            amount=to_decimal(_require(data, "amount", "recent"), "amount"),
            category=str(_require(data, "category", "recent")),
            date=data.get("date"),
        )


@dataclass
class CategorySpend:
    """Spending for one expense category."""
    category: str
    amount: Decimal
    percentage: Decimal

    @classmethod
    def from_dict(cls, data: dict) -> "CategorySpend":
        return cls(
            category=str(_require(data, "category", "category-breakdown")),
            amount=to_decimal(_require(data, "amount", "category-breakdown"), "amount"),
            percentage=to_decimal(_require(data, "percentage", "category-breakdown"), "percentage"),
        )

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "amount": to_json_number(self.amount),
            "percentage": to_json_number(self.percentage),
        }


@dataclass
class TrendPoint:
    """Totals for one month of the spending trend."""
    month: str
    income: Decimal
    expenses: Decimal
    savings: Decimal

    @classmethod
    def from_dict(cls, data: dict) -> "TrendPoint":
        return cls(
            month=str(_require(data, "month", "spending-trend")),
            income=to_decimal(_require(data, "income", "spending-trend"), "income"),
            expenses=to_decimal(_require(data, "expenses", "spending-trend"), "expenses"),
            savings=to_decimal(_require(data, "savings", "spending-trend"), "savings"),
        )

    def to_dict(self) -> dict:
        return {
            "month": self.month,
            "income": to_json_number(self.income),
            "expenses": to_json_number(self.expenses),
            "savings": to_json_number(self.savings),
        }


@dataclass
class AggregatedFinancials:
    """All four feeds for one insight request."""
    summary: Summary
    recent_transactions: List[TransactionRecord]
    category_breakdown: List[CategorySpend]
    spending_trend: List[TrendPoint]

    def find_category(self, category: str) -> Optional[CategorySpend]:
        """Case-insensitive lookup in the category breakdown."""
        wanted = category.lower()
        for entry in self.category_breakdown:
            if entry.category.lower() == wanted:
                return entry
        return None
