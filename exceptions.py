# exceptions.py
"""
Error taxonomy for the market data core.
Every failure surfaced to callers is one of these kinds; nothing is
downgraded to fallback data inside the core.
"""

from typing import Optional


class MarketDataError(Exception):
    """Base class for all market data failures."""

    kind = 'market_data_error'

    def to_dict(self) -> dict:
        return {'error': str(self), 'kind': self.kind}


class ConfigurationError(MarketDataError):
    """Provider is not configured (e.g. missing API key)."""

    kind = 'configuration_error'


class ValidationError(MarketDataError, ValueError):
    """Malformed basket input. Raised before any I/O."""

    kind = 'validation_error'


class BudgetExceededError(MarketDataError):
    """Local rate budget rejected the request."""

    kind = 'budget_exceeded'

    def __init__(self, reason: str, reset_in: Optional[int] = None):
        super().__init__(f"API_LIMIT_EXCEEDED: {reason}")
        self.reason = reason
        self.reset_in = reset_in

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['reason'] = self.reason
        data['reset_in'] = self.reset_in
        return data


class ProviderThrottleError(MarketDataError):
    """Provider answered with its own rate-limit notice instead of data."""

    kind = 'provider_throttled'

    def __init__(self, message: str, retry_after: Optional[int] = None):
        super().__init__(f"ALPHA_VANTAGE_RATE_LIMIT: {message}")
        self.retry_after = retry_after

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['retry_after'] = self.retry_after
        return data


class ProviderError(MarketDataError):
    """Provider returned an explicit error message."""

    kind = 'provider_error'


class DataUnavailableError(MarketDataError):
    """Symbol unknown, empty series, or not enough history."""

    kind = 'data_unavailable'


class NoDataError(DataUnavailableError):
    kind = 'no_data'


class InsufficientHistoryError(DataUnavailableError):
    kind = 'insufficient_history'

    def __init__(self, symbol: str, required: int, available: int):
        super().__init__(
            f"[{symbol}] needs more than {required} trading days of history, "
            f"only {available} available"
        )
        self.symbol = symbol
        self.required = required
        self.available = available


class BasketCalculationError(DataUnavailableError):
    """Return percentage is undefined (historical value of zero)."""

    kind = 'basket_calculation_error'


class NetworkError(MarketDataError):
    """Transport failure. Callers may retry with backoff."""

    kind = 'network_error'


class ProviderTimeoutError(NetworkError):
    kind = 'timeout'
