# constants.py
"""
Application constants and limits.
These are hardcoded values that control application behavior.
Modify these values directly if you need to change limits.
"""

# =============================================================================
# ALPHA VANTAGE
# =============================================================================

ALPHA_VANTAGE_BASE_URL = "https://www.alphavantage.co/query"

ALPHA_VANTAGE_FUNCTIONS = {
    'GLOBAL_QUOTE': 'GLOBAL_QUOTE',
    'TIME_SERIES_DAILY': 'TIME_SERIES_DAILY',
}

# Key of the daily series inside a TIME_SERIES_DAILY payload
DAILY_SERIES_KEY = 'Time Series (Daily)'

# Default request timeout in seconds
DEFAULT_REQUEST_TIMEOUT = 5

# =============================================================================
# RATE BUDGET (free tier)
# =============================================================================

DEFAULT_DAILY_LIMIT = 25
DEFAULT_MINUTE_LIMIT = 5

# Length of the sliding per-minute window and of the daily window (seconds)
MINUTE_WINDOW_SECONDS = 60
DAILY_WINDOW_SECONDS = 24 * 60 * 60

# Storage key for the persisted budget blob
USAGE_STORAGE_KEY = 'alpha_vantage_usage'

# =============================================================================
# CACHING
# =============================================================================

# Quote / overview style data
QUOTE_CACHE_TTL_SECONDS = 5 * 60

# Full daily series (closes do not change intraday)
SERIES_CACHE_TTL_SECONDS = 24 * 60 * 60

# =============================================================================
# BASKET
# =============================================================================

# Approximate trading-day counts, not calendar arithmetic
TRADING_DAYS = {
    '1M': 21,
    '6M': 126,
    '1Y': 252,
}

BASKET_SIZE = 5

CATEGORY_ORDER = ['Technology', 'Finance', 'Healthcare', 'Consumer', 'Energy']

STOCK_CATEGORIES = {
    'Technology': [
        {'symbol': 'AAPL', 'name': 'Apple Inc.'},
        {'symbol': 'MSFT', 'name': 'Microsoft Corporation'},
        {'symbol': 'GOOGL', 'name': 'Alphabet Inc.'},
        {'symbol': 'NVDA', 'name': 'NVIDIA Corporation'},
        {'symbol': 'META', 'name': 'Meta Platforms Inc.'},
    ],
    'Finance': [
        {'symbol': 'JPM', 'name': 'JPMorgan Chase & Co.'},
        {'symbol': 'BAC', 'name': 'Bank of America Corp.'},
        {'symbol': 'GS', 'name': 'Goldman Sachs Group Inc.'},
        {'symbol': 'WFC', 'name': 'Wells Fargo & Company'},
        {'symbol': 'MS', 'name': 'Morgan Stanley'},
    ],
    'Healthcare': [
        {'symbol': 'JNJ', 'name': 'Johnson & Johnson'},
        {'symbol': 'UNH', 'name': 'UnitedHealth Group Inc.'},
        {'symbol': 'PFE', 'name': 'Pfizer Inc.'},
        {'symbol': 'ABBV', 'name': 'AbbVie Inc.'},
        {'symbol': 'MRK', 'name': 'Merck & Co. Inc.'},
    ],
    'Consumer': [
        {'symbol': 'AMZN', 'name': 'Amazon.com Inc.'},
        {'symbol': 'WMT', 'name': 'Walmart Inc.'},
        {'symbol': 'HD', 'name': 'Home Depot Inc.'},
        {'symbol': 'NKE', 'name': 'NIKE Inc.'},
        {'symbol': 'SBUX', 'name': 'Starbucks Corporation'},
    ],
    'Energy': [
        {'symbol': 'XOM', 'name': 'Exxon Mobil Corporation'},
        {'symbol': 'CVX', 'name': 'Chevron Corporation'},
        {'symbol': 'COP', 'name': 'ConocoPhillips'},
        {'symbol': 'SLB', 'name': 'Schlumberger Limited'},
        {'symbol': 'EOG', 'name': 'EOG Resources Inc.'},
    ],
}

# =============================================================================
# VALIDATION LIMITS
# =============================================================================

# Maximum length for stock ticker symbols
MAX_TICKER_LENGTH = 10
