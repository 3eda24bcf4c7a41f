"""Insight orchestration module."""
from .pipeline import InsightPipeline
from .tips import Tip, BudgetGoalSuggestion, get_personalized_tips, generate_budget_goals

__all__ = [
    "InsightPipeline",
    "Tip",
    "BudgetGoalSuggestion",
    "get_personalized_tips",
    "generate_budget_goals",
]
