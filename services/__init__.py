# services/__init__.py
"""
Service layer for the market data core.
Separates concerns into distinct service classes.
"""

from services.rate_budget import RateBudgetTracker, BudgetStore, InMemoryBudgetStore, DatabaseBudgetStore
from services.price_cache import PriceCache
from services.price_service import PriceService
from services.basket_service import BasketService
from services.treemap_service import calculate_treemap_layout, get_stock_color

__all__ = [
    'RateBudgetTracker', 'BudgetStore', 'InMemoryBudgetStore', 'DatabaseBudgetStore',
    'PriceCache', 'PriceService', 'BasketService',
    'calculate_treemap_layout', 'get_stock_color'
]
