"""Custom exception classes for BudgetWise."""


class BudgetWiseError(Exception):
    """Base exception for BudgetWise."""
    pass


class ConfigError(BudgetWiseError):
    """Configuration-related errors."""
    pass


class ValidationError(BudgetWiseError):
    """Data validation errors."""
    pass


class NetworkError(BudgetWiseError):
    """Network and API-related errors."""
    pass


class ProviderError(NetworkError):
    """A transaction data feed could not be retrieved."""
    pass


class AuthError(NetworkError):
    """Login or registration was rejected or failed."""
    pass


class AggregationError(BudgetWiseError):
    """Financial data could not be aggregated. Fatal for an insight request."""
    pass


# Model-layer errors. All of these are recoverable by the insight pipeline.
class LLMError(BudgetWiseError):
    """LLM processing errors."""
    pass


class TransportError(LLMError, NetworkError):
    """A model transport attempt failed (network error or non-2xx status)."""
    pass


class RoutingError(TransportError):
    """The model endpoint was not found or could not be reached."""
    pass


class ModelResponseError(LLMError):
    """The model answered, but the answer failed validation."""
    pass


class RefusalError(ModelResponseError):
    """The model declined to produce the requested analysis."""
    pass


class ChainExhaustedError(LLMError):
    """Every model transport was tried and failed."""

    def __init__(self, message: str, errors=None):
        super().__init__(message)
        self.errors = list(errors or [])
