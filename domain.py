# domain.py
"""
Value types for baskets, historical prices, quotes and treemap layouts.
All results are immutable; a new calculation is a new value.
"""

import math
from dataclasses import dataclass, asdict
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Tuple

from constants import TRADING_DAYS
from exceptions import ValidationError


class TimePeriod(str, Enum):
    ONE_MONTH = '1M'
    SIX_MONTHS = '6M'
    ONE_YEAR = '1Y'

    @property
    def trading_days(self) -> int:
        return TRADING_DAYS[self.value]

    @classmethod
    def parse(cls, value) -> 'TimePeriod':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            allowed = ', '.join(p.value for p in cls)
            raise ValidationError(f"VALIDATION_ERROR: Invalid time period {value!r} (expected one of {allowed})")


class StockCategory(str, Enum):
    TECHNOLOGY = 'Technology'
    FINANCE = 'Finance'
    HEALTHCARE = 'Healthcare'
    CONSUMER = 'Consumer'
    ENERGY = 'Energy'

    @classmethod
    def parse(cls, value) -> 'StockCategory':
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(f"VALIDATION_ERROR: Unknown category {value!r}")


@dataclass(frozen=True)
class BasketStock:
    """One basket slot."""
    category: StockCategory
    symbol: str
    name: str
    shares: int

    @classmethod
    def from_dict(cls, data: Dict) -> 'BasketStock':
        for field in ('category', 'symbol', 'shares'):
            if field not in data:
                raise ValidationError(f"VALIDATION_ERROR: Missing required field: {field}")

        symbol = str(data['symbol']).strip().upper()
        shares = data['shares']
        if isinstance(shares, bool) or not isinstance(shares, (int, float, str)):
            raise ValidationError(f"VALIDATION_ERROR: Shares for {symbol} must be a whole number")
        try:
            whole = int(shares)
        except (TypeError, ValueError, OverflowError):
            raise ValidationError(f"VALIDATION_ERROR: Shares for {symbol} must be a whole number")
        if float(shares) != whole:
            raise ValidationError(f"VALIDATION_ERROR: Shares for {symbol} must be a whole number")

        return cls(
            category=StockCategory.parse(data['category']),
            symbol=symbol,
            name=str(data.get('name') or symbol),
            shares=whole,
        )

    def to_dict(self) -> Dict:
        return {
            'category': self.category.value,
            'symbol': self.symbol,
            'name': self.name,
            'shares': self.shares,
        }


@dataclass(frozen=True)
class HistoricalPriceData:
    symbol: str
    current_price: float
    historical_price: float
    date: str  # ISO date of the historical sample

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class StockBreakdown:
    symbol: str
    name: str
    shares: int
    current_price: float
    historical_price: float
    current_value: float
    historical_value: float
    return_amount: float
    return_percentage: float

    def to_dict(self) -> Dict:
        data = asdict(self)
        data['return'] = data.pop('return_amount')
        return data


@dataclass(frozen=True)
class BasketCalculation:
    stocks: Tuple[BasketStock, ...]
    time_period: TimePeriod
    current_value: float
    historical_value: float
    total_return: float
    return_percentage: float
    breakdown: Tuple[StockBreakdown, ...]
    calculated_at: datetime

    def to_dict(self) -> Dict:
        return {
            'stocks': [s.to_dict() for s in self.stocks],
            'time_period': self.time_period.value,
            'current_value': self.current_value,
            'historical_value': self.historical_value,
            'total_return': self.total_return,
            'return_percentage': self.return_percentage,
            'breakdown': [b.to_dict() for b in self.breakdown],
            'calculated_at': self.calculated_at.isoformat(),
        }


@dataclass(frozen=True)
class Quote:
    symbol: str
    price: float
    change: float
    change_percent: float
    volume: Optional[int] = None
    latest_trading_day: Optional[str] = None

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class TreemapStock:
    symbol: str
    name: str
    market_cap: float
    change_percent: float
    price: float
    sector: str

    @classmethod
    def from_dict(cls, data: Dict) -> 'TreemapStock':
        if 'symbol' not in data:
            raise ValidationError("VALIDATION_ERROR: Missing required field: symbol")
        try:
            stock = cls(
                symbol=str(data['symbol']),
                name=str(data.get('name') or data['symbol']),
                market_cap=float(data.get('market_cap') or 0),
                change_percent=float(data.get('change_percent') or 0),
                price=float(data.get('price') or 0),
                sector=str(data.get('sector') or 'Unknown'),
            )
        except (TypeError, ValueError) as e:
            raise ValidationError(f"VALIDATION_ERROR: Invalid treemap stock {data.get('symbol')!r}: {e}")
        if not all(math.isfinite(v) for v in (stock.market_cap, stock.change_percent, stock.price)):
            raise ValidationError(f"VALIDATION_ERROR: Invalid treemap stock {stock.symbol!r}: values must be finite")
        return stock

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class TreemapRect:
    x: float
    y: float
    width: float
    height: float
    stock: TreemapStock

    @property
    def area(self) -> float:
        return self.width * self.height

    def to_dict(self) -> Dict:
        return {
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'height': self.height,
            'stock': self.stock.to_dict(),
        }
