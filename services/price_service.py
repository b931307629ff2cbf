# services/price_service.py
"""
Historical price resolution and quote lookup through cache and rate budget.
"""

import logging
from typing import Callable, Dict

import pandas as pd

from domain import HistoricalPriceData, Quote, TimePeriod
from exceptions import (
    BudgetExceededError, ConfigurationError, NoDataError, InsufficientHistoryError,
    ProviderError, ProviderThrottleError, ValidationError
)
from providers import ProviderThrottled, ProviderFailed, ProviderResponse
from services.price_cache import PriceCache, make_cache_key
from services.rate_budget import RateBudgetTracker

logger = logging.getLogger(__name__)

THROTTLE_RETRY_AFTER = 60


class PriceService:
    """Resolves daily series and quotes, charging the budget only for genuine payloads."""

    def __init__(self, provider, budget: RateBudgetTracker,
                 series_cache: PriceCache, quote_cache: PriceCache):
        self.provider = provider
        self.budget = budget
        self.series_cache = series_cache
        self.quote_cache = quote_cache

    def _clean_symbol(self, symbol: str) -> str:
        try:
            return self.provider._validate_symbol(symbol)
        except ValueError as e:
            raise ValidationError(f"VALIDATION_ERROR: {e}")

    def _ensure_configured(self) -> None:
        if not self.provider.is_configured():
            raise ConfigurationError("API_KEY_NOT_CONFIGURED: Alpha Vantage API key not configured")

    def _fetch_billable(self, fetch_fn: Callable[[str], ProviderResponse], symbol: str) -> Dict:
        """
        Reserve budget, call the provider, and refund the reservation unless
        the provider returned a genuine payload.
        """
        decision = self.budget.reserve()
        if not decision.allowed:
            raise BudgetExceededError(decision.reason, decision.reset_in)

        try:
            response = fetch_fn(symbol)
        except Exception:
            self.budget.undo_api_request(decision.charged_at)
            raise

        if isinstance(response, ProviderThrottled):
            self.budget.undo_api_request(decision.charged_at)
            logger.warning(f"{symbol}: provider throttled the request - {response.note}")
            raise ProviderThrottleError(
                "Alpha Vantage API limit reached. "
                "Wait 1 minute (per-minute limit) or until tomorrow (daily limit).",
                retry_after=THROTTLE_RETRY_AFTER
            )
        if isinstance(response, ProviderFailed):
            self.budget.undo_api_request(decision.charged_at)
            logger.error(f"{symbol}: provider error - {response.message}")
            raise ProviderError(response.message)

        return response.data

    # ========================================
    # DAILY SERIES / HISTORICAL PRICES
    # ========================================

    def get_daily_series(self, symbol: str) -> pd.DataFrame:
        """Full daily series for a symbol, newest first. Served from the long-lived cache when possible."""
        self._ensure_configured()
        symbol = self._clean_symbol(symbol)

        cache_key = make_cache_key('daily', symbol)
        payload = self.series_cache.get(cache_key)
        if payload is not None:
            logger.debug(f"Returning cached historical data for: {symbol}")
            return self.provider.parse_daily_series(payload, symbol)

        payload = self._fetch_billable(self.provider.fetch_daily_series, symbol)

        try:
            df = self.provider.parse_daily_series(payload, symbol)
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"{symbol}: malformed daily series - {e}")
            raise ProviderError(f"Malformed daily series for {symbol}: {e}")

        if df.empty:
            raise NoDataError(f"No price data available for {symbol}")

        self.series_cache.set(cache_key, payload)
        logger.info(f"Historical data fetched and cached for {symbol} ({len(df)} days)")
        return df

    def fetch_historical_price(self, symbol: str, time_period) -> HistoricalPriceData:
        """
        Latest close and the close N trading days earlier.

        Raises:
            NoDataError: the series is empty
            InsufficientHistoryError: the series has N or fewer entries
        """
        period = TimePeriod.parse(time_period)
        symbol = self._clean_symbol(symbol)
        df = self.get_daily_series(symbol)

        if df.empty:
            raise NoDataError(f"No price data available for {symbol}")

        days_ago = period.trading_days
        if len(df) <= days_ago:
            raise InsufficientHistoryError(symbol, days_ago, len(df))

        closes = df['close']
        return HistoricalPriceData(
            symbol=symbol,
            current_price=float(closes.iloc[0]),
            historical_price=float(closes.iloc[days_ago]),
            date=df.index[days_ago].strftime('%Y-%m-%d'),
        )

    # ========================================
    # QUOTES
    # ========================================

    def fetch_quote(self, symbol: str) -> Quote:
        """Latest quote, cached for a few minutes."""
        self._ensure_configured()
        symbol = self._clean_symbol(symbol)

        cache_key = make_cache_key('quote', symbol)
        payload = self.quote_cache.get(cache_key)
        if payload is None:
            payload = self._fetch_billable(self.provider.fetch_quote, symbol)
            quote = self._parse_quote(payload, symbol)
            self.quote_cache.set(cache_key, payload)
            return quote

        logger.debug(f"Returning cached quote for: {symbol}")
        return self._parse_quote(payload, symbol)

    def _parse_quote(self, payload: Dict, symbol: str) -> Quote:
        try:
            return self.provider.parse_quote(payload, symbol)
        except (ValueError, TypeError) as e:
            raise ProviderError(f"Malformed quote for {symbol}: {e}")
