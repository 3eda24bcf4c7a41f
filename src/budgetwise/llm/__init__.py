"""LLM insight generation module."""
from .models import BudgetInsight, ModelAssessment, SpendingAnalysis
from .prompt import build_analysis_prompt
from .invoker import ModelInvoker, Transport
from .validator import ResponseValidator, RefusalPatterns
from .reconciler import reconcile_goals
from .fallback import RuleBasedAnalyzer

__all__ = [
    "BudgetInsight",
    "ModelAssessment",
    "SpendingAnalysis",
    "build_analysis_prompt",
    "ModelInvoker",
    "Transport",
    "ResponseValidator",
    "RefusalPatterns",
    "reconcile_goals",
    "RuleBasedAnalyzer",
]
