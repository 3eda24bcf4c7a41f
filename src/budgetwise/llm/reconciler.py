"""Reconciliation of model insights with user category goals."""
from dataclasses import replace
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from .models import BudgetInsight
from budgetwise.transactions.models import AggregatedFinancials
from budgetwise.utils.logger import get_logger

logger = get_logger()

ALIGNMENT_NOTICE = "Priority: Align with category budget. "


def _find_goal(category: str, goals: Dict[str, Decimal]) -> Optional[Tuple[str, Decimal]]:
    wanted = category.lower()
    for name, amount in goals.items():
        if name.lower() == wanted:
            return name, amount
    return None


def reconcile_goals(
    insights: List[BudgetInsight],
    category_goals: Dict[str, Decimal],
    data: AggregatedFinancials
) -> List[BudgetInsight]:
    """
    Apply category goals to insights.

    A matching goal sets suggested_budget. When actual spending in the
    category is above a positive goal, the insight becomes high priority
    and its recommendation gets the alignment notice.

    Args:
        insights: Normalized model insights
        category_goals: Category -> monthly limit, matched case-insensitively
        data: Aggregated data used to look up actual spending

    Returns:
        New list of insights; the inputs are not modified
    """
    reconciled = []
    for insight in insights:
        match = _find_goal(insight.category, category_goals)
        if match is None:
            reconciled.append(insight)
            continue

        goal_name, goal = match
        spend_entry = data.find_category(insight.category)
        spent = spend_entry.amount if spend_entry else Decimal(0)

        updated = replace(insight, suggested_budget=goal)
        if goal > 0 and spent > goal:
            logger.debug(f"{goal_name}: spent {spent} above goal {goal}")
            updated = replace(
                updated,
                priority="high",
                recommendation=ALIGNMENT_NOTICE + insight.recommendation
            )
        reconciled.append(updated)

    return reconciled
