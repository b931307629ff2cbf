# market_data_manager.py
"""
Wires provider, rate budget, caches and services together for the Flask app.
One instance per application; its budget and caches are shared by all requests.
"""

from typing import Dict, List, Sequence

from domain import BasketCalculation, BasketStock, HistoricalPriceData, Quote, TreemapRect, TreemapStock
from providers import MarketDataProviderFactory
from services.basket_service import BasketService
from services.price_cache import PriceCache
from services.price_service import PriceService
from services.rate_budget import RateBudgetTracker, InMemoryBudgetStore, DatabaseBudgetStore
from services.treemap_service import calculate_treemap_layout


class MarketDataManager:
    """Facade over the market data services"""

    def __init__(self, app=None, provider=None, budget_store=None):
        self.app = app
        self.provider = provider
        self.budget_store = budget_store
        if app:
            self.init_app(app)

    def init_app(self, app):
        """Initialize with Flask app configuration"""
        self.app = app
        config = app.config

        if self.provider is None:
            self.provider = MarketDataProviderFactory.create_provider(config)

        if self.budget_store is None:
            if config.get('BUDGET_STORE', 'database') == 'memory':
                self.budget_store = InMemoryBudgetStore()
            else:
                self.budget_store = DatabaseBudgetStore(app)

        self.budget = RateBudgetTracker(
            self.budget_store,
            daily_limit=config['API_DAILY_LIMIT'],
            minute_limit=config['API_MINUTE_LIMIT'],
        )
        self.quote_cache = PriceCache(config['QUOTE_CACHE_TTL_SECONDS'], name='quotes')
        self.series_cache = PriceCache(config['SERIES_CACHE_TTL_SECONDS'], name='daily-series')

        self.price_service = PriceService(self.provider, self.budget, self.series_cache, self.quote_cache)
        self.basket_service = BasketService(self.price_service, max_workers=config['BASKET_MAX_WORKERS'])

    # ========================================
    # DELEGATES
    # ========================================

    def calculate_basket_returns(self, stocks: Sequence[BasketStock], time_period) -> BasketCalculation:
        return self.basket_service.calculate_basket_returns(stocks, time_period)

    def get_basket_categories(self) -> Dict:
        return self.basket_service.get_categories()

    def fetch_historical_price(self, symbol: str, time_period) -> HistoricalPriceData:
        return self.price_service.fetch_historical_price(symbol, time_period)

    def fetch_quote(self, symbol: str) -> Quote:
        return self.price_service.fetch_quote(symbol)

    def calculate_treemap_layout(self, stocks: Sequence[TreemapStock], width: float, height: float) -> List[TreemapRect]:
        return calculate_treemap_layout(stocks, width, height)

    def get_usage_stats(self) -> Dict:
        return self.budget.get_usage_stats()

    def reset_usage(self) -> None:
        self.budget.reset_usage()
