"""Transaction data feeds and aggregation."""
from .models import Summary, TransactionRecord, CategorySpend, TrendPoint, AggregatedFinancials
from .provider import TransactionProvider, HttpTransactionProvider, StaticTransactionProvider
from .aggregator import DataAggregator

__all__ = [
    "Summary",
    "TransactionRecord",
    "CategorySpend",
    "TrendPoint",
    "AggregatedFinancials",
    "TransactionProvider",
    "HttpTransactionProvider",
    "StaticTransactionProvider",
    "DataAggregator",
]
