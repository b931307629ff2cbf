# providers/base_provider.py
"""
Abstract base class for market data providers.
Enforces a consistent interface and decodes raw payloads into tagged results
at the boundary, so core logic never handles loosely-typed provider JSON.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Union

import pandas as pd

from constants import MAX_TICKER_LENGTH
from domain import Quote


@dataclass(frozen=True)
class ProviderPayload:
    """Genuine, billable response body."""
    data: Dict


@dataclass(frozen=True)
class ProviderThrottled:
    """Provider's own rate-limit notice delivered with a success status."""
    note: str


@dataclass(frozen=True)
class ProviderFailed:
    """Explicit error message in the response body."""
    message: str


ProviderResponse = Union[ProviderPayload, ProviderThrottled, ProviderFailed]

SERIES_COLUMNS = ['open', 'high', 'low', 'close', 'volume']


class BaseMarketDataProvider(ABC):
    """
    Abstract base class for stock market data providers.
    Implementations perform one HTTP call per method and never retry.
    """

    def __init__(self, config: Dict):
        """
        Initialize provider with configuration.

        Args:
            config: Dictionary containing provider-specific settings
        """
        self.config = config
        self.timeout = config.get('timeout', 5)

    # ========================================
    # VALIDATION METHODS
    # ========================================

    def _validate_symbol(self, symbol: str) -> str:
        """Validate and clean a single ticker symbol"""
        if not isinstance(symbol, str) or not symbol.strip():
            raise ValueError(f"Invalid ticker: {symbol!r}")
        clean = symbol.strip().upper()
        if len(clean) > MAX_TICKER_LENGTH:
            raise ValueError(f"Invalid ticker: {symbol!r}")
        return clean

    def _assert_price(self, price: float, ticker: str, context: str) -> None:
        """Validate stock price"""
        if pd.isna(price):
            raise ValueError(f"[{ticker}] price is NaN in {context}")
        try:
            p = float(price)
        except Exception:
            raise ValueError(f"[{ticker}] invalid price in {context}")
        if p < 0:
            raise ValueError(f"[{ticker}] price cannot be negative in {context}")

    # ========================================
    # ABSTRACT METHODS (must be implemented)
    # ========================================

    @abstractmethod
    def fetch_daily_series(self, symbol: str) -> ProviderResponse:
        """
        Fetch the full daily OHLCV series for one symbol.

        Returns:
            ProviderPayload, ProviderThrottled or ProviderFailed

        Raises:
            NetworkError: transport failure or non-2xx status
            ProviderTimeoutError: request exceeded the timeout
        """
        pass

    @abstractmethod
    def fetch_quote(self, symbol: str) -> ProviderResponse:
        """Fetch the latest quote for one symbol (same contract as above)."""
        pass

    def is_configured(self) -> bool:
        """Whether the provider has the credentials it needs"""
        return True

    @abstractmethod
    def parse_daily_series(self, data: Dict, symbol: str) -> pd.DataFrame:
        """Convert a genuine daily-series payload into a DataFrame, newest first."""
        pass

    @abstractmethod
    def parse_quote(self, data: Dict, symbol: str) -> Quote:
        """Convert a genuine quote payload into a Quote."""
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return human-readable provider name"""
        pass

    # ========================================
    # COMMON HELPER METHODS
    # ========================================

    def validate_series(self, df: pd.DataFrame, ticker: str) -> pd.DataFrame:
        """Ensure the close column exists and every close is a usable price."""
        if 'close' not in df.columns:
            raise ValueError("Missing required column: close")
        for idx, close in df['close'].items():
            self._assert_price(close, ticker, f"row {idx} close")
        return df

    def __repr__(self):
        return f"<{self.__class__.__name__}(provider={self.get_provider_name()})>"
