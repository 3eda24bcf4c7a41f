"""Data models for insight generation."""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from budgetwise.transactions.models import CategorySpend, TrendPoint
from budgetwise.utils.numbers import to_json_number

PRIORITIES = ("high", "medium", "low")


@dataclass
class BudgetInsight:
    """One observation about a spending category."""
    category: str
    insight: str
    recommendation: str = ""
    priority: str = "low"
    potential_savings: Decimal = Decimal(0)
    suggested_budget: Optional[Decimal] = None

    def to_dict(self) -> dict:
        data = {
            "category": self.category,
            "insight": self.insight,
            "recommendation": self.recommendation,
            "priority": self.priority,
            "potentialSavings": to_json_number(self.potential_savings),
        }
        if self.suggested_budget is not None:
            data["suggestedBudget"] = to_json_number(self.suggested_budget)
        return data


@dataclass
class ModelAssessment:
    """The validated, model-derived part of an analysis."""
    overall_score: int
    summary: str
    insights: List[BudgetInsight] = field(default_factory=list)


@dataclass
class SpendingAnalysis:
    """Result of one insight request."""
    total_spending: Decimal
    top_categories: List[CategorySpend]
    trends: List[TrendPoint]
    overall_score: int
    summary: str
    insights: List[BudgetInsight]
    source: str = "model"

    def to_dict(self) -> dict:
        return {
            "totalSpending": to_json_number(self.total_spending),
            "topCategories": [c.to_dict() for c in self.top_categories],
            "trends": [t.to_dict() for t in self.trends],
            "overallScore": self.overall_score,
            "summary": self.summary,
            "insights": [i.to_dict() for i in self.insights],
        }
