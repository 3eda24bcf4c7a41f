"""Utility modules."""
from .logger import get_logger, configure_logging, set_user_context, get_home_dir
from .exceptions import (
    BudgetWiseError,
    ConfigError,
    ValidationError,
    NetworkError,
    ProviderError,
    AuthError,
    AggregationError,
    LLMError,
    TransportError,
    RoutingError,
    ModelResponseError,
    RefusalError,
    ChainExhaustedError
)

__all__ = [
    "get_logger",
    "configure_logging",
    "set_user_context",
    "get_home_dir",
    "BudgetWiseError",
    "ConfigError",
    "ValidationError",
    "NetworkError",
    "ProviderError",
    "AuthError",
    "AggregationError",
    "LLMError",
    "TransportError",
    "RoutingError",
    "ModelResponseError",
    "RefusalError",
    "ChainExhaustedError"
]
