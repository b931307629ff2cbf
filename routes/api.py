# routes/api.py

import logging
import math
from functools import wraps
from flask import Blueprint, jsonify, request, current_app
from datetime import datetime, timezone

from domain import BasketStock, TreemapStock
from exceptions import (
    MarketDataError, ValidationError, DataUnavailableError, BudgetExceededError,
    ProviderThrottleError, ProviderError, ProviderTimeoutError, NetworkError, ConfigurationError
)
from services.treemap_service import get_stock_color

logger = logging.getLogger(__name__)
api_bp = Blueprint('api', __name__)

# Most specific first
ERROR_STATUS = [
    (ValidationError, 400),
    (DataUnavailableError, 404),
    (BudgetExceededError, 429),
    (ProviderThrottleError, 429),
    (ProviderTimeoutError, 504),
    (NetworkError, 502),
    (ProviderError, 502),
    (ConfigurationError, 503),
]


def api_error_handler(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except MarketDataError as e:
            status = next((code for cls, code in ERROR_STATUS if isinstance(e, cls)), 500)
            if status >= 500:
                logger.error(f"{f.__name__}: {e}")
            return jsonify(e.to_dict()), status
        except ValueError as e:
            return jsonify({'error': str(e), 'kind': 'validation_error'}), 400
        except Exception:
            logger.exception(f"Error in {f.__name__}")
            return jsonify({'error': 'An error occurred'}), 500
    return wrapper


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("VALIDATION_ERROR: Request body must be a JSON object")
    return data


@api_bp.route('/basket/categories')
@api_error_handler
def get_basket_categories():
    return jsonify(current_app.market_data.get_basket_categories())


@api_bp.route('/basket/calculate', methods=['POST'])
@api_error_handler
def calculate_basket():
    data = _json_body()

    raw_stocks = data.get('stocks')
    if not isinstance(raw_stocks, list):
        raise ValidationError("VALIDATION_ERROR: 'stocks' must be a list")
    stocks = [BasketStock.from_dict(s) for s in raw_stocks if isinstance(s, dict)]
    if len(stocks) != len(raw_stocks):
        raise ValidationError("VALIDATION_ERROR: every stock must be an object")

    time_period = data.get('time_period', '1Y')
    result = current_app.market_data.calculate_basket_returns(stocks, time_period)
    return jsonify(result.to_dict())


@api_bp.route('/historical/<symbol>')
@api_error_handler
def get_historical_price(symbol):
    period = request.args.get('period', '1Y')
    result = current_app.market_data.fetch_historical_price(symbol, period)
    return jsonify(result.to_dict())


@api_bp.route('/quote/<symbol>')
@api_error_handler
def get_quote(symbol):
    quote = current_app.market_data.fetch_quote(symbol)
    return jsonify(quote.to_dict())


@api_bp.route('/treemap', methods=['POST'])
@api_error_handler
def get_treemap():
    data = _json_body()

    raw_stocks = data.get('stocks', [])
    if not isinstance(raw_stocks, list):
        raise ValidationError("VALIDATION_ERROR: 'stocks' must be a list")
    try:
        width = float(data.get('width', 0))
        height = float(data.get('height', 0))
    except (TypeError, ValueError):
        raise ValidationError("VALIDATION_ERROR: width and height must be numbers")
    if not (math.isfinite(width) and math.isfinite(height)):
        raise ValidationError("VALIDATION_ERROR: width and height must be finite")

    if not all(isinstance(s, dict) for s in raw_stocks):
        raise ValidationError("VALIDATION_ERROR: every stock must be an object")
    stocks = [TreemapStock.from_dict(s) for s in raw_stocks]
    rects = current_app.market_data.calculate_treemap_layout(stocks, width, height)

    payload = []
    for rect in rects:
        item = rect.to_dict()
        item['color'] = get_stock_color(rect.stock.change_percent)
        payload.append(item)

    return jsonify({'rects': payload, 'count': len(payload), 'width': width, 'height': height})


@api_bp.route('/usage')
@api_error_handler
def get_usage():
    return jsonify(current_app.market_data.get_usage_stats())


@api_bp.route('/usage/reset', methods=['POST'])
@api_error_handler
def reset_usage():
    current_app.market_data.reset_usage()
    return jsonify({'success': True, 'usage': current_app.market_data.get_usage_stats()})


@api_bp.route('/health')
def health_check():
    return jsonify({'status': 'ok', 'timestamp': datetime.now(timezone.utc).isoformat()})
