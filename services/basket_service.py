# services/basket_service.py
"""
Basket return calculation: five positions, one per category.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Dict, List, Sequence

from constants import BASKET_SIZE, CATEGORY_ORDER, STOCK_CATEGORIES
from domain import BasketCalculation, BasketStock, HistoricalPriceData, StockBreakdown, StockCategory, TimePeriod
from exceptions import BasketCalculationError, ValidationError

logger = logging.getLogger(__name__)


class BasketService:
    """Validates a basket, resolves historical prices concurrently, aggregates returns."""

    def __init__(self, price_service, max_workers: int = BASKET_SIZE):
        self.price_service = price_service
        self.max_workers = max_workers

    @staticmethod
    def get_categories() -> Dict:
        """Selectable stocks per category, in display order."""
        return {
            'order': list(CATEGORY_ORDER),
            'categories': {name: list(STOCK_CATEGORIES[name]) for name in CATEGORY_ORDER},
        }

    def _validate_basket(self, stocks: Sequence[BasketStock]) -> None:
        if len(stocks) != BASKET_SIZE:
            raise ValidationError(
                f"VALIDATION_ERROR: Must select exactly {BASKET_SIZE} stocks (one from each category)"
            )
        categories = {StockCategory.parse(stock.category) for stock in stocks}
        if categories != set(StockCategory):
            raise ValidationError(
                "VALIDATION_ERROR: Basket must hold one stock from each category"
            )
        for stock in stocks:
            if isinstance(stock.shares, bool) or not isinstance(stock.shares, int) or stock.shares <= 0:
                raise ValidationError(f"VALIDATION_ERROR: Shares for {stock.symbol} must be greater than 0")

    def _resolve_prices(self, stocks: Sequence[BasketStock], period: TimePeriod) -> List[HistoricalPriceData]:
        """
        Issue every lookup without waiting on the others, then collect them
        in basket order. The first failure (in basket order) is re-raised.
        """
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [
                executor.submit(self.price_service.fetch_historical_price, stock.symbol, period)
                for stock in stocks
            ]
            return [future.result() for future in futures]

    @staticmethod
    def _breakdown(stock: BasketStock, prices: HistoricalPriceData) -> StockBreakdown:
        current_value = stock.shares * prices.current_price
        historical_value = stock.shares * prices.historical_price
        if historical_value == 0:
            raise BasketCalculationError(
                f"Historical price for {stock.symbol} is zero, return percentage is undefined"
            )
        return_amount = current_value - historical_value
        return StockBreakdown(
            symbol=stock.symbol,
            name=stock.name,
            shares=stock.shares,
            current_price=prices.current_price,
            historical_price=prices.historical_price,
            current_value=current_value,
            historical_value=historical_value,
            return_amount=return_amount,
            return_percentage=return_amount / historical_value * 100,
        )

    def calculate_basket_returns(self, stocks: Sequence[BasketStock], time_period) -> BasketCalculation:
        """
        Compare the basket's value now against its value N trading days ago.

        Args:
            stocks: exactly five positions, one per category
            time_period: '1M', '6M' or '1Y' (or a TimePeriod)

        Returns:
            BasketCalculation with per-position breakdown in basket order

        Raises:
            ValidationError: wrong basket size or non-positive shares (no I/O performed)
            BudgetExceededError, ProviderThrottleError, DataUnavailableError, NetworkError:
                from any single lookup; no partial result is returned
        """
        stocks = tuple(stocks)
        self._validate_basket(stocks)
        period = TimePeriod.parse(time_period)

        logger.info(f"Calculating basket returns for {period.value}...")
        price_data = self._resolve_prices(stocks, period)

        breakdown = tuple(self._breakdown(stock, prices) for stock, prices in zip(stocks, price_data))

        # Sum before dividing so larger positions carry their weight
        current_value = sum(b.current_value for b in breakdown)
        historical_value = sum(b.historical_value for b in breakdown)
        if historical_value == 0:
            raise BasketCalculationError("Basket historical value is zero, return percentage is undefined")
        total_return = current_value - historical_value
        return_percentage = total_return / historical_value * 100

        logger.info(f"Basket calculation complete. Total return: {return_percentage:.2f}%")

        return BasketCalculation(
            stocks=stocks,
            time_period=period,
            current_value=current_value,
            historical_value=historical_value,
            total_return=total_return,
            return_percentage=return_percentage,
            breakdown=breakdown,
            calculated_at=datetime.now(timezone.utc),
        )
