"""
Pytest fixtures for the market data service tests.
"""

import os
import pytest
from datetime import date, timedelta
from unittest.mock import MagicMock

# Set testing environment before importing app
os.environ['TESTING'] = 'true'
os.environ['SECRET_KEY'] = 'test-secret-key'

from app import create_app
from models import db
from providers import AlphaVantageProvider, ProviderPayload
from services.price_cache import PriceCache
from services.price_service import PriceService
from services.rate_budget import RateBudgetTracker, InMemoryBudgetStore


class FakeClock:
    """Manually advanced clock (epoch seconds)."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_series_payload(symbol, current_price, historical_price, days_ago=252, extra_days=0):
    """
    TIME_SERIES_DAILY payload with the latest close at current_price and the
    close `days_ago` entries back at historical_price.
    """
    today = date(2024, 12, 31)
    series = {}
    for i in range(days_ago + 1 + extra_days):
        day = today - timedelta(days=i)
        price = historical_price if i == days_ago else current_price
        series[day.isoformat()] = {
            '1. open': str(price),
            '2. high': str(price),
            '3. low': str(price),
            '4. close': str(price),
            '5. volume': '1000000',
        }
    return {
        'Meta Data': {'1. Information': 'Daily Prices', '2. Symbol': symbol},
        'Time Series (Daily)': series,
    }


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def budget_store():
    return InMemoryBudgetStore()


@pytest.fixture
def budget(budget_store, clock):
    return RateBudgetTracker(budget_store, daily_limit=25, minute_limit=5, clock=clock)


@pytest.fixture
def provider():
    """Real provider parsing with a mocked transport-free fetch."""
    av = AlphaVantageProvider({'api_key': 'test-key', 'timeout': 5})
    av.fetch_daily_series = MagicMock(side_effect=lambda symbol: ProviderPayload(make_series_payload(symbol, 150.0, 120.0)))
    av.fetch_quote = MagicMock()
    return av


@pytest.fixture
def price_service(provider, budget, clock):
    return PriceService(
        provider,
        budget,
        series_cache=PriceCache(86400, name='daily-series', clock=clock),
        quote_cache=PriceCache(300, name='quotes', clock=clock),
    )


@pytest.fixture(scope='function')
def app(provider, budget_store):
    """Create application for testing."""
    application = create_app('testing', provider=provider, budget_store=budget_store)
    application.config['TESTING'] = True

    with application.app_context():
        db.create_all()
        yield application
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()
