"""Personalized tips and suggested budget goals."""
import random
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import List, Optional

DEFAULT_SAVINGS_TARGET = Decimal(500)
CENTS = Decimal("0.01")


@dataclass(frozen=True)
class Tip:
    icon: str
    text: str


@dataclass(frozen=True)
class BudgetGoalSuggestion:
    goal: str
    target: Decimal
    timeframe: str


TIPS = (
    Tip("utensils", "Try meal prepping on Sundays to reduce food costs"),
    Tip("bus", "Consider using public transport twice a week"),
    Tip("lightbulb", "Switch to LED bulbs to save on electricity"),
    Tip("mobile-screen-button", "Review and cancel unused subscriptions"),
    Tip("coins", "Use cashback credit cards for regular purchases"),
    Tip("piggy-bank", "Set up automatic savings transfers"),
    Tip("chart-line", "Track daily expenses to identify spending patterns"),
    Tip("coins", "Set up a separate account for emergency funds"),
)

# (goal, share of the monthly reduction)
GOAL_SHARES = (
    ("Reduce food expenses", Decimal("0.6")),
    ("Optimize transportation", Decimal("0.3")),
    ("Cut entertainment spending", Decimal("0.1")),
)


def get_personalized_tips(count: int = 4, rng: Optional[random.Random] = None) -> List[Tip]:
    """Random sample of distinct tips."""
    rng = rng or random.Random()
    return rng.sample(TIPS, min(count, len(TIPS)))


def generate_budget_goals(target_savings: Optional[Decimal] = None) -> List[BudgetGoalSuggestion]:
    """
    Split a savings target over three months and three spending areas.

    Args:
        target_savings: Savings target; 500 when missing or zero

    Returns:
        Three 30-day goals
    """
    savings_goal = target_savings or DEFAULT_SAVINGS_TARGET

    # Enough precision to keep cents for any magnitude of target.
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, savings_goal.adjusted() + 4)
        monthly_reduction = savings_goal / 3
        return [
            BudgetGoalSuggestion(
                goal=goal,
                target=(monthly_reduction * share).quantize(CENTS, rounding=ROUND_HALF_UP),
                timeframe="30 days"
            )
            for goal, share in GOAL_SHARES
        ]
