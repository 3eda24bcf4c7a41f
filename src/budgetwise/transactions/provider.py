"""Transaction data providers consumed by the insight pipeline."""
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import List, Optional

import httpx

from .models import Summary, TransactionRecord, CategorySpend, TrendPoint
from budgetwise.utils.logger import get_logger
from budgetwise.utils.exceptions import ProviderError, ValidationError

logger = get_logger()


class TransactionProvider(ABC):
    """Read-only source of the four aggregate feeds for the current user."""

    @abstractmethod
    async def get_summary(self) -> Summary:
        ...

    @abstractmethod
    async def get_recent_transactions(self) -> List[TransactionRecord]:
        ...

    @abstractmethod
    async def get_category_breakdown(self) -> List[CategorySpend]:
        ...

    @abstractmethod
    async def get_spending_trend(self) -> List[TrendPoint]:
        ...


class HttpTransactionProvider(TransactionProvider):
    """Fetches feeds from the backend `/transactions` API."""

    def __init__(
        self,
        base_url: str,
        auth_token: Optional[str] = None,
        timeout: float = 30.0,
        http_transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize provider.

        Args:
            base_url: API root, e.g. http://localhost:5000/api
            auth_token: Bearer token identifying the user
            timeout: Per-request timeout in seconds
            http_transport: Optional httpx transport (tests use MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http_transport = http_transport
        self.headers = {"Accept": "application/json"}
        if auth_token:
            self.headers["Authorization"] = f"Bearer {auth_token}"

    async def get_summary(self) -> Summary:
        data = await self._get("summary")
        return self._parse("summary", lambda: Summary.from_dict(data))

    async def get_recent_transactions(self) -> List[TransactionRecord]:
        data = await self._get("recent")
        return self._parse("recent", lambda: [TransactionRecord.from_dict(d) for d in self._as_list("recent", data)])

    async def get_category_breakdown(self) -> List[CategorySpend]:
        data = await self._get("category-breakdown")
        return self._parse(
            "category-breakdown",
            lambda: [CategorySpend.from_dict(d) for d in self._as_list("category-breakdown", data)]
        )

    async def get_spending_trend(self) -> List[TrendPoint]:
        data = await self._get("spending-trend")
        return self._parse(
            "spending-trend",
            lambda: [TrendPoint.from_dict(d) for d in self._as_list("spending-trend", data)]
        )

    async def _get(self, feed: str):
        url = f"{self.base_url}/transactions/{feed}"
        logger.debug(f"Fetching {feed} from {url}")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.http_transport) as client:
                response = await client.get(url, headers=self.headers)
        except httpx.HTTPError as e:
            raise ProviderError(f"Request for {feed} failed: {e}") from e

        if not response.is_success:
            raise ProviderError(f"Request for {feed} returned HTTP {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(f"Response for {feed} is not valid JSON: {e}") from e

    @staticmethod
    def _as_list(feed: str, data) -> list:
        if not isinstance(data, list):
            raise ValidationError(f"{feed}: expected a list, got {type(data).__name__}")
        return data

    @staticmethod
    def _parse(feed: str, build):
        try:
            return build()
        except ValidationError as e:
            raise ProviderError(f"Malformed {feed} payload: {e}") from e


class StaticTransactionProvider(TransactionProvider):
    """Fixed demo figures, used for offline runs and demos."""

    SUMMARY = {"income": 5000, "expenses": 3200, "savings": 1800}

    CATEGORY_BREAKDOWN = [
        {"category": "Food", "amount": 450, "percentage": 35},
        {"category": "Transportation", "amount": 300, "percentage": 23},
        {"category": "Entertainment", "amount": 200, "percentage": 15},
        {"category": "Utilities", "amount": 350, "percentage": 27},
    ]

    SPENDING_TREND = [
        {"month": "Jan", "income": 4500, "expenses": 3800, "savings": 700},
        {"month": "Feb", "income": 4800, "expenses": 3200, "savings": 1600},
        {"month": "Mar", "income": 5000, "expenses": 4100, "savings": 900},
        {"month": "Apr", "income": 5200, "expenses": 3300, "savings": 1900},
        {"month": "May", "income": 5000, "expenses": 3200, "savings": 1800},
        {"month": "Jun", "income": 5300, "expenses": 4200, "savings": 1100},
        {"month": "Jul", "income": 5100, "expenses": 3900, "savings": 1200},
        {"month": "Aug", "income": 5400, "expenses": 3600, "savings": 1800},
        {"month": "Sep", "income": 5200, "expenses": 3500, "savings": 1700},
        {"month": "Oct", "income": 5600, "expenses": 3800, "savings": 1800},
        {"month": "Nov", "income": 5300, "expenses": 4000, "savings": 1300},
        {"month": "Dec", "income": 5800, "expenses": 4500, "savings": 1300},
    ]

    # (description, amount, category, days ago)
    RECENT = [
        ("Grocery Shopping", "-120.50", "Food", 1),
        ("Gas Station", "-45.00", "Transportation", 2),
        ("Salary", "3000.00", "Income", 5),
    ]

    def __init__(self, now: Optional[datetime] = None):
        self.now = now or datetime.now(timezone.utc)

    async def get_summary(self) -> Summary:
        return Summary.from_dict(self.SUMMARY)

    async def get_recent_transactions(self) -> List[TransactionRecord]:
        return [
            TransactionRecord(
                description=description,
                amount=Decimal(amount),
                category=category,
                date=(self.now - timedelta(days=days_ago)).date().isoformat()
            )
            for description, amount, category, days_ago in self.RECENT
        ]

    async def get_category_breakdown(self) -> List[CategorySpend]:
        return [CategorySpend.from_dict(d) for d in self.CATEGORY_BREAKDOWN]

    async def get_spending_trend(self) -> List[TrendPoint]:
        return [TrendPoint.from_dict(d) for d in self.SPENDING_TREND]
