"""BudgetWise: spending insights with AI analysis and rule-based fallback."""

__version__ = "0.1.0"
