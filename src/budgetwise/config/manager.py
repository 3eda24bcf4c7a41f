"""User context store: budget goals and the current auth session."""
import json
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Dict, Optional

from dateutil.parser import isoparse

from budgetwise.utils.exceptions import ConfigError, ValidationError
from budgetwise.utils.logger import get_home_dir
from budgetwise.utils.numbers import to_decimal


@dataclass
class InsightContext:
    """Caller-supplied context for one insight request."""
    budget_goal: Optional[Decimal] = None
    category_goals: Optional[Dict[str, Decimal]] = None
    auth_token: Optional[str] = None
    subject: Optional[str] = None
    token_expires_at: Optional[datetime] = None

    def with_category_goal(self, category: str, amount: Decimal) -> "InsightContext":
        """Return a copy with one category goal added or replaced."""
        goals = dict(self.category_goals or {})
        for key in list(goals):
            if key.lower() == category.lower():
                del goals[key]
        goals[category] = amount
        return replace(self, category_goals=goals)

    def without_session(self) -> "InsightContext":
        """Return a copy with the auth session removed."""
        return replace(self, auth_token=None, subject=None, token_expires_at=None)

    def is_token_expired(self, now: Optional[datetime] = None) -> bool:
        """True when a token is held and its expiry has passed."""
        if not self.auth_token or self.token_expires_at is None:
            return False
        now = now or datetime.now(timezone.utc)
        return now >= self.token_expires_at

    def to_dict(self) -> dict:
        return {
            "budget_goal": str(self.budget_goal) if self.budget_goal is not None else None,
            "category_goals": (
                {k: str(v) for k, v in self.category_goals.items()}
                if self.category_goals is not None else None
            ),
            "auth_token": self.auth_token,
            "subject": self.subject,
            "token_expires_at": self.token_expires_at.isoformat() if self.token_expires_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "InsightContext":
        budget_goal = data.get("budget_goal")
        category_goals = data.get("category_goals")
        expires = data.get("token_expires_at")
        expires_at = isoparse(expires) if expires else None
        if expires_at is not None and expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return cls(
            budget_goal=to_decimal(budget_goal, "budget_goal") if budget_goal is not None else None,
            category_goals=(
                {str(k): to_decimal(v, f"category goal '{k}'") for k, v in category_goals.items()}
                if category_goals is not None else None
            ),
            auth_token=data.get("auth_token"),
            subject=data.get("subject"),
            token_expires_at=expires_at,
        )


class ContextManager:
    """Persists the user context as JSON in the application home directory."""

    def __init__(self, file_name: str = "context.json", config_dir: Optional[Path] = None):
        self.config_dir = config_dir or get_home_dir()
        self.config_file = self.config_dir / file_name
        self.config_dir.mkdir(parents=True, exist_ok=True)

    def load_context(self) -> Optional[InsightContext]:
        """Load the stored context, or None if nothing was saved yet."""
        if not self.config_file.exists():
            return None

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                data = json.load(f)
            return InsightContext.from_dict(data)
        except (OSError, ValueError, ValidationError) as e:
            raise ConfigError(f"Failed to load context: {e}") from e

    def save_context(self, context: InsightContext) -> None:
        """Save the context, replacing any previous one."""
        try:
            with open(self.config_file, "w", encoding="utf-8") as f:
                json.dump(context.to_dict(), f, ensure_ascii=False, indent=2)
        except OSError as e:
            raise ConfigError(f"Failed to save context: {e}") from e

    def clear_goals(self) -> InsightContext:
        """Drop all budget goals, keeping the auth session."""
        context = self.load_context() or InsightContext()
        context = replace(context, budget_goal=None, category_goals=None)
        self.save_context(context)
        return context

    def validate_context(self, context: InsightContext) -> tuple[bool, str]:
        """Validate context values."""
        if context.budget_goal is not None and context.budget_goal < 0:
            return False, "Budget goal must not be negative"

        for category, amount in (context.category_goals or {}).items():
            if not category or not category.strip():
                return False, "Category goal names must not be empty"
            if amount < 0:
                return False, f"Category goal for '{category}' must not be negative"

        return True, "Context is valid"
