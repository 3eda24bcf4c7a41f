"""Prompt construction for spending analysis."""
from decimal import Decimal
from typing import Dict, Optional

from budgetwise.transactions.models import AggregatedFinancials
from budgetwise.utils.numbers import format_number

RECENT_LIMIT = 3


def build_analysis_prompt(
    data: AggregatedFinancials,
    target_budget: Optional[Decimal] = None,
    category_goals: Optional[Dict[str, Decimal]] = None
) -> str:
    """
    Build the analysis prompt.

    The whole aggregated dataset is serialized. The output only depends
    on the arguments, so identical input gives identical text.

    Args:
        data: Aggregated financial data
        target_budget: Optional overall monthly limit
        category_goals: Optional per-category limits

    Returns:
        Prompt text
    """
    summary = data.summary

    budget_line = ""
    if target_budget:
        budget_line = f"User Budget Goal: {format_number(target_budget)} (monthly limit)"

    if category_goals:
        goal_lines = "\n".join(
            f"- {category}: {format_number(amount)}" for category, amount in category_goals.items()
        )
    else:
        goal_lines = "None"

    category_lines = "\n".join(
        f"- {c.category}: {format_number(c.amount)} ({format_number(c.percentage)}%)"
        for c in data.category_breakdown
    )
    trend_lines = "\n".join(
        f"- {t.month}: Income {format_number(t.income)}, Expenses {format_number(t.expenses)}"
        for t in data.spending_trend
    )
    recent_lines = "\n".join(
        f"- {tx.description}: {format_number(tx.amount)} ({tx.category})"
        for tx in data.recent_transactions[:RECENT_LIMIT]
    )

    return f"""You are a neutral data analyst. Do NOT provide personal financial advice or prescriptive instructions.
Only produce a JSON object (no surrounding text) that matches the schema exactly. If you must refuse, return a JSON object with {{"refused": true, "reason": "<brief reason>"}}.

Context:
- Monthly Income: {format_number(summary.income)}
- Monthly Expenses: {format_number(summary.expenses)}
- Monthly Savings: {format_number(summary.savings)}

{budget_line}

Category Budget Goals:
{goal_lines}

Expense categories:
{category_lines}

Historical trends:
{trend_lines}

Recent activity (top {RECENT_LIMIT}):
{recent_lines}

Required Output Schema (JSON only):
{{
  "overallScore": number, // 0-100, data-driven health score
  "summary": string, // concise data-focused summary
  "insights": [
    {{
      "category": string,
      "insight": string,
      "recommendation": string,
      "priority": "high" | "medium" | "low",
      "potentialSavings": number,
      "suggestedBudget": number // optional: suggested monthly budget for this category to help meet user goal
    }}
  ]
}}

Tone and constraints:
- Use observational language (e.g., "observed", "suggested experiment", "possible impact") and avoid telling the user what they must do.
- When offering a recommendation, present it as a voluntary experiment (e.g., "Experiment: try reducing X by Y% for Z weeks and observe savings of approximately $N").
- Output JSON only, no explanatory paragraphs, no apologies, no safety policy text.
"""
