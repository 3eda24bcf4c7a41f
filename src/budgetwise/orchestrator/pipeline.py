"""Insight generation pipeline.

Flow: aggregate -> build prompt -> invoke model -> validate -> reconcile
goals. Any model-layer failure falls back to the rule-based analyzer;
only an aggregation failure reaches the caller as an error.
"""
from pathlib import Path
from typing import Optional

import httpx

from budgetwise.config.manager import InsightContext
from budgetwise.config.settings import AppSettings
from budgetwise.llm.fallback import RuleBasedAnalyzer
from budgetwise.llm.invoker import ModelInvoker
from budgetwise.llm.models import SpendingAnalysis
from budgetwise.llm.prompt import build_analysis_prompt
from budgetwise.llm.reconciler import reconcile_goals
from budgetwise.llm.validator import RefusalPatterns, ResponseValidator
from budgetwise.transactions.aggregator import DataAggregator
from budgetwise.transactions.provider import (
    HttpTransactionProvider,
    StaticTransactionProvider,
    TransactionProvider,
)
from budgetwise.utils.logger import get_logger, set_user_context
from budgetwise.utils.exceptions import LLMError

logger = get_logger()


class InsightPipeline:
    """Orchestrates one insight request end to end."""

    def __init__(
        self,
        provider: TransactionProvider,
        invoker: Optional[ModelInvoker] = None,
        validator: Optional[ResponseValidator] = None,
        analyzer: Optional[RuleBasedAnalyzer] = None
    ):
        """
        Args:
            provider: Source of the four transaction feeds
            invoker: Model transport chain; None means rule-based only
            validator: Response validator (default patterns if omitted)
            analyzer: Rule-based fallback analyzer
        """
        self.aggregator = DataAggregator(provider)
        self.invoker = invoker
        self.validator = validator
        if invoker is not None and validator is None:
            self.validator = ResponseValidator()
        self.analyzer = analyzer or RuleBasedAnalyzer()

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        context: InsightContext,
        demo: bool = False,
        offline: bool = False,
        http_transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "InsightPipeline":
        """Wire HTTP (or demo) provider and model invoker from settings."""
        if demo:
            provider = StaticTransactionProvider()
        else:
            provider = HttpTransactionProvider(
                base_url=settings.api_base_url,
                auth_token=context.auth_token,
                timeout=settings.api_timeout_seconds,
                http_transport=http_transport
            )

        if offline:
            return cls(provider)

        patterns_path = None
        if settings.refusal_patterns_file:
            patterns_path = Path(settings.refusal_patterns_file).expanduser()
        validator = ResponseValidator(RefusalPatterns.load(patterns_path))
        invoker = ModelInvoker.from_settings(settings, context.auth_token, http_transport)
        return cls(provider, invoker, validator)

    async def generate_insights(self, context: Optional[InsightContext] = None) -> SpendingAnalysis:
        """
        Generate a spending analysis for the user in context.

        Args:
            context: Budget goal, category goals and identity for this request

        Returns:
            SpendingAnalysis from the model, or from the rule-based analyzer
            when the model chain fails

        Raises:
            AggregationError: if the transaction data could not be fetched
        """
        context = context or InsightContext()
        set_user_context(context.subject)

        data = await self.aggregator.aggregate()

        if self.invoker is None:
            logger.info("Model disabled, using rule-based analysis")
            return self.analyzer.analyze(data)

        prompt = build_analysis_prompt(data, context.budget_goal, context.category_goals)

        try:
            assessment = await self.invoker.invoke(prompt, self.validator.validate)
        except LLMError as e:
            logger.warning(f"Model analysis failed, using rule-based fallback: {e}")
            return self.analyzer.analyze(data)

        insights = assessment.insights
        if context.category_goals:
            insights = reconcile_goals(insights, context.category_goals, data)

        logger.info(
            f"Generated model analysis: score {assessment.overall_score}, "
            f"{len(insights)} insights"
        )

        return SpendingAnalysis(
            total_spending=data.summary.expenses,
            top_categories=list(data.category_breakdown),
            trends=list(data.spending_trend),
            overall_score=assessment.overall_score,
            summary=assessment.summary,
            insights=insights,
            source="model"
        )
