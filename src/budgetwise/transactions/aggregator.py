"""Financial data aggregation module."""
import asyncio
from collections import Counter

from .models import AggregatedFinancials
from .provider import TransactionProvider
from budgetwise.utils.logger import get_logger
from budgetwise.utils.exceptions import AggregationError

logger = get_logger()


class DataAggregator:
    """Collects the four provider feeds for one insight request."""

    FEEDS = ("summary", "recent", "category-breakdown", "spending-trend")

    def __init__(self, provider: TransactionProvider):
        self.provider = provider

    async def aggregate(self) -> AggregatedFinancials:
        """
        Fetch summary, recent transactions, category breakdown and trend.

        The feeds are fetched concurrently. The first failure cancels the
        remaining fetches and fails the whole aggregation.

        Returns:
            AggregatedFinancials object

        Raises:
            AggregationError: if any feed fails
        """
        tasks = [
            asyncio.ensure_future(self.provider.get_summary()),
            asyncio.ensure_future(self.provider.get_recent_transactions()),
            asyncio.ensure_future(self.provider.get_category_breakdown()),
            asyncio.ensure_future(self.provider.get_spending_trend()),
        ]

        try:
            summary, recent, breakdown, trend = await asyncio.gather(*tasks)
        except Exception as e:
            feed = self._failed_feed(tasks)
            logger.error(f"Failed to fetch {feed} feed: {e}")
            raise AggregationError(f"Failed to fetch {feed}: {e}") from e
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()

        duplicates = [
            name for name, count in Counter(entry.category.lower() for entry in breakdown).items()
            if count > 1
        ]
        if duplicates:
            raise AggregationError(f"Duplicate categories in breakdown: {', '.join(duplicates)}")

        logger.info(
            f"Aggregated {len(recent)} recent transactions, {len(breakdown)} categories "
            f"and {len(trend)} trend months"
        )

        return AggregatedFinancials(
            summary=summary,
            recent_transactions=list(recent),
            category_breakdown=list(breakdown),
            spending_trend=list(trend)
        )

    def _failed_feed(self, tasks) -> str:
        """Name of the first feed whose task finished with an error."""
        for name, task in zip(self.FEEDS, tasks):
            if task.done() and not task.cancelled() and task.exception() is not None:
                return name
        return "transaction data"
