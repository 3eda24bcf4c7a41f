"""Deterministic rule-based spending analysis."""
from decimal import Decimal

from .models import BudgetInsight, SpendingAnalysis
from budgetwise.transactions.models import AggregatedFinancials
from budgetwise.utils.numbers import format_number

MAX_INSIGHTS = 3

SUMMARY_HEALTHY = "Your budget is healthy with room for optimization."
SUMMARY_ATTENTION = "Your budget needs some attention in key areas."
SUMMARY_IMPROVE = "Your budget requires significant improvement."


class RuleBasedAnalyzer:
    """Threshold rules over aggregated data. Never calls a model."""

    SAVINGS_RATE_THRESHOLD = Decimal(10)
    FOOD_SHARE_THRESHOLD = Decimal(30)
    ENTERTAINMENT_SHARE_THRESHOLD = Decimal(10)

    def analyze(self, data: AggregatedFinancials) -> SpendingAnalysis:
        """
        Score the budget and emit up to three insights.

        Without positive income no savings rate can be computed. It is
        taken as 0, so the savings rule always fires for such data rather
        than depending on the sign of savings / 0.

        Args:
            data: Aggregated financial data

        Returns:
            SpendingAnalysis with source "rule-based"
        """
        summary = data.summary
        insights = []
        score = 100

        # Zero or negative income counts as a zero savings rate.
        if summary.income > 0:
            savings_rate = summary.savings / summary.income * 100
        else:
            savings_rate = Decimal(0)

        if savings_rate < self.SAVINGS_RATE_THRESHOLD:
            score -= 30
            insights.append(BudgetInsight(
                category="Savings",
                insight=f"Observed savings rate {savings_rate:.1f}%, lower than common targets.",
                recommendation=(
                    "Experiment: set up an automatic small transfer to savings for 4 weeks "
                    "and observe the change in savings rate."
                ),
                priority="high",
                potential_savings=max(summary.income * Decimal("0.1"), Decimal(0))
            ))

        for entry in data.category_breakdown:
            if entry.category == "Food" and entry.percentage > self.FOOD_SHARE_THRESHOLD:
                score -= 15
                insights.append(BudgetInsight(
                    category="Food",
                    insight=(
                        f"Food expenses are {format_number(entry.percentage)}% of your budget, "
                        "relatively high compared to typical ranges."
                    ),
                    recommendation="Experiment: try 2 weeks of meal-prep and track spending to see potential savings.",
                    priority="high",
                    potential_savings=max(entry.amount * Decimal("0.2"), Decimal(0))
                ))

            if entry.category == "Entertainment" and entry.percentage > self.ENTERTAINMENT_SHARE_THRESHOLD:
                score -= 10
                insights.append(BudgetInsight(
                    category="Entertainment",
                    insight=f"Entertainment spending is {format_number(entry.percentage)}% of your budget.",
                    recommendation=(
                        "Experiment: try reducing paid entertainment by one event per month "
                        "and track savings."
                    ),
                    priority="medium",
                    potential_savings=max(entry.amount * Decimal("0.3"), Decimal(0))
                ))

        score = max(0, min(100, score))

        return SpendingAnalysis(
            total_spending=summary.expenses,
            top_categories=list(data.category_breakdown),
            trends=list(data.spending_trend),
            overall_score=score,
            summary=self._summarize(score),
            insights=insights[:MAX_INSIGHTS],
            source="rule-based"
        )

    @staticmethod
    def _summarize(score: int) -> str:
        if score >= 80:
            return SUMMARY_HEALTHY
        if score >= 60:
            return SUMMARY_ATTENTION
        return SUMMARY_IMPROVE
