"""Validation and normalization of raw model responses."""
import json
import math
import re
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from pathlib import Path
from typing import Any, List, Optional, Pattern, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt, StrictStr
from pydantic import ValidationError as PydanticValidationError

from .models import BudgetInsight, ModelAssessment, PRIORITIES
from budgetwise.utils.logger import get_logger
from budgetwise.utils.exceptions import ConfigError, ModelResponseError, RefusalError

logger = get_logger()

DEFAULT_PATTERNS_PATH = Path(__file__).resolve().parent.parent / "resources" / "refusal_patterns.yaml"

UNCATEGORIZED = "Uncategorized"
DEFAULT_SCORE = 70
DEFAULT_SUMMARY = "Analysis completed"

# Greedy: first "{" to last "}".
JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


class AssessmentSchema(BaseModel):
    """Pydantic schema for the normalized model answer."""
    model_config = ConfigDict(strict=True)

    overallScore: Union[StrictInt, StrictFloat]
    summary: StrictStr
    insights: List[Any]


@dataclass(frozen=True)
class RefusalPatterns:
    """Versioned list of refusal phrase patterns."""
    version: int
    patterns: Tuple[Pattern, ...]

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "RefusalPatterns":
        """Load patterns from YAML file."""
        path = path or DEFAULT_PATTERNS_PATH
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            return cls.from_list(data.get("patterns", []), int(data.get("version", 0)))
        except (OSError, yaml.YAMLError, re.error, TypeError, ValueError) as e:
            raise ConfigError(f"Failed to load refusal patterns from {path}: {e}") from e

    @classmethod
    def from_list(cls, patterns: List[str], version: int = 0) -> "RefusalPatterns":
        return cls(
            version=version,
            patterns=tuple(re.compile(p, re.IGNORECASE) for p in patterns)
        )

    def find(self, text: str) -> Optional[str]:
        """Return the first pattern found in text, or None."""
        for pattern in self.patterns:
            if pattern.search(text):
                return pattern.pattern
        return None


class ResponseValidator:
    """Turns a raw transport response into a ModelAssessment or raises."""

    def __init__(self, refusal_patterns: Optional[RefusalPatterns] = None):
        self.refusal_patterns = refusal_patterns or RefusalPatterns.load()

    def validate(self, body: Any) -> ModelAssessment:
        """
        Validate a transport response body of the form {"response": "<text>"}.

        Args:
            body: Decoded JSON body returned by the transport

        Returns:
            ModelAssessment with normalized fields

        Raises:
            RefusalError: if the model refused, by phrase or by refusal object
            ModelResponseError: if no valid analysis object can be extracted
        """
        text = body.get("response") if isinstance(body, dict) else None
        if not isinstance(text, str):
            text = ""

        pattern = self.refusal_patterns.find(text)
        if pattern:
            logger.debug(f"Refusal pattern matched: {pattern}")
            raise RefusalError("Model refused the request")

        match = JSON_OBJECT_RE.search(text)
        if not match:
            raise ModelResponseError("No JSON object found in model response")

        try:
            parsed = json.loads(match.group(0))
        except (ValueError, RecursionError) as e:
            logger.debug(f"Response text: {text[:500]}")
            raise ModelResponseError(f"Invalid JSON in model response: {e}") from e

        if not isinstance(parsed, dict):
            raise ModelResponseError("Model response JSON is not an object")

        if parsed.get("refused"):
            raise RefusalError(f"Model refusal: {parsed.get('reason') or 'refused'}")

        raw_insights = parsed.get("insights")
        if not isinstance(raw_insights, list):
            raw_insights = []

        normalized = {
            "overallScore": self._coerce_score(parsed.get("overallScore")),
            "summary": parsed.get("summary") or DEFAULT_SUMMARY,
            "insights": [self._normalize_insight(entry) for entry in raw_insights],
        }

        try:
            validated = AssessmentSchema(**normalized)
        except PydanticValidationError as e:
            raise ModelResponseError(f"Model response does not match expected schema: {e}") from e

        return ModelAssessment(
            overall_score=self._to_score(validated.overallScore),
            summary=validated.summary,
            insights=list(validated.insights)
        )

    @staticmethod
    def _is_number(value) -> bool:
        if isinstance(value, bool):
            return False
        if isinstance(value, int):
            return True
        return isinstance(value, float) and math.isfinite(value)

    def _coerce_score(self, value):
        return value if self._is_number(value) else DEFAULT_SCORE

    @staticmethod
    def _to_score(value) -> int:
        score = max(Decimal(0), min(Decimal(100), Decimal(str(value))))
        return int(score.quantize(Decimal(1), rounding=ROUND_HALF_UP))

    def _normalize_insight(self, entry) -> BudgetInsight:
        if isinstance(entry, str):
            return BudgetInsight(category=UNCATEGORIZED, insight=entry)
        if not isinstance(entry, dict):
            entry = {}

        category = entry.get("category")
        insight = entry.get("insight")
        recommendation = entry.get("recommendation")
        priority = entry.get("priority")
        savings = entry.get("potentialSavings")

        if isinstance(priority, str):
            priority = priority.strip().lower()

        potential_savings = Decimal(str(savings)) if self._is_number(savings) else Decimal(0)

        return BudgetInsight(
            category=category if isinstance(category, str) and category else UNCATEGORIZED,
            insight=insight if isinstance(insight, str) else "",
            recommendation=recommendation if isinstance(recommendation, str) else "",
            priority=priority if priority in PRIORITIES else "low",
            potential_savings=max(potential_savings, Decimal(0))
        )
