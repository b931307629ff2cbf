# providers/alphavantage_provider.py

import json
import logging
import requests
import pandas as pd
from typing import Dict, Optional

from constants import ALPHA_VANTAGE_BASE_URL, ALPHA_VANTAGE_FUNCTIONS, DAILY_SERIES_KEY
from domain import Quote
from exceptions import ConfigurationError, NetworkError, NoDataError, ProviderTimeoutError
from .base_provider import (
    BaseMarketDataProvider, ProviderPayload, ProviderThrottled, ProviderFailed,
    ProviderResponse, SERIES_COLUMNS
)

logger = logging.getLogger(__name__)

_SERIES_FIELDS = {
    '1. open': 'open',
    '2. high': 'high',
    '3. low': 'low',
    '4. close': 'close',
    '5. volume': 'volume',
}


class AlphaVantageProvider(BaseMarketDataProvider):
    def __init__(self, config: Dict):
        super().__init__(config)
        self.api_key = config.get('api_key')
        self.base_url = config.get('base_url') or ALPHA_VANTAGE_BASE_URL
        self.session = config.get('session') or requests.Session()
        logger.info(f"Alpha Vantage provider initialized (timeout: {self.timeout}s)")

    def get_provider_name(self) -> str:
        return "AlphaVantage"

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _require_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError("API_KEY_NOT_CONFIGURED: Alpha Vantage API key not configured")
        return self.api_key

    @staticmethod
    def decode_response(data: Dict) -> ProviderResponse:
        """Classify a decoded JSON body as payload, throttle notice or error."""
        if not isinstance(data, dict):
            return ProviderFailed("Unexpected response shape")
        if 'Error Message' in data:
            return ProviderFailed(str(data['Error Message']))
        # 'Information' is the newer form of the same throttling notice
        for field in ('Note', 'Information'):
            if field in data:
                return ProviderThrottled(str(data[field]))
        return ProviderPayload(data)

    def _make_request(self, params: Dict) -> ProviderResponse:
        query = dict(params)
        query['apikey'] = self._require_key()

        try:
            response = self.session.get(self.base_url, params=query, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.error(f"{params.get('function')} {params.get('symbol')}: timed out after {self.timeout}s")
            raise ProviderTimeoutError(f"Request timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            logger.error(f"{params.get('function')} {params.get('symbol')}: transport error - {e}")
            raise NetworkError(f"Request failed: {e}") from e

        if response.status_code == 429:
            return ProviderThrottled("HTTP 429 rate limit")
        if not response.ok:
            raise NetworkError(f"HTTP {response.status_code}: {response.reason}")

        try:
            data = response.json()
        except (ValueError, json.JSONDecodeError):
            return ProviderFailed("Response body is not valid JSON")

        return self.decode_response(data)

    def fetch_daily_series(self, symbol: str) -> ProviderResponse:
        symbol = self._validate_symbol(symbol)
        logger.info(f"Fetching daily series for {symbol}...")
        return self._make_request({
            'function': ALPHA_VANTAGE_FUNCTIONS['TIME_SERIES_DAILY'],
            'symbol': symbol,
            'outputsize': 'full',
        })

    def fetch_quote(self, symbol: str) -> ProviderResponse:
        symbol = self._validate_symbol(symbol)
        logger.info(f"Fetching quote for {symbol}...")
        return self._make_request({
            'function': ALPHA_VANTAGE_FUNCTIONS['GLOBAL_QUOTE'],
            'symbol': symbol,
        })

    def parse_daily_series(self, data: Dict, symbol: str) -> pd.DataFrame:
        """
        Turn a TIME_SERIES_DAILY payload into a DataFrame indexed by date
        (newest first) with float OHLCV columns. Empty when the payload
        carries no series.
        """
        series = data.get(DAILY_SERIES_KEY) or {}
        if not series:
            return pd.DataFrame(columns=SERIES_COLUMNS, index=pd.DatetimeIndex([], name='date'))

        df = pd.DataFrame.from_dict(series, orient='index').rename(columns=_SERIES_FIELDS)
        df = df[[c for c in SERIES_COLUMNS if c in df.columns]]
        df = df.apply(pd.to_numeric, errors='coerce')
        df.index = pd.to_datetime(df.index, format='%Y-%m-%d')
        df.index.name = 'date'
        df = df.sort_index(ascending=False)
        return self.validate_series(df, symbol)

    def parse_quote(self, data: Dict, symbol: str) -> Quote:
        quote = data.get('Global Quote') or {}
        if not quote or not quote.get('05. price'):
            raise NoDataError(f"Unable to fetch quote data for {symbol}")

        price = float(quote['05. price'])
        self._assert_price(price, symbol, "parse_quote")
        volume: Optional[int] = int(quote['06. volume']) if quote.get('06. volume') else None

        return Quote(
            symbol=symbol,
            price=price,
            change=float(quote.get('09. change') or 0),
            change_percent=float(str(quote.get('10. change percent') or '0').rstrip('%')),
            volume=volume,
            latest_trading_day=quote.get('07. latest trading day'),
        )

    def __repr__(self):
        return f"<AlphaVantageProvider({self.get_provider_name()})>"
