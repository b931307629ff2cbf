"""
Tests for the TTL price cache.
"""

from services.price_cache import PriceCache, make_cache_key


class TestPriceCache:

    def test_hit_within_ttl(self, clock):
        cache = PriceCache(300, clock=clock)
        cache.set('quote_AAPL', {'price': 1})
        clock.advance(299)
        assert cache.get('quote_AAPL') == {'price': 1}

    def test_expired_entry_is_evicted_on_read(self, clock):
        """An entry exactly ttl old is stale and removed."""
        cache = PriceCache(300, clock=clock)
        cache.set('quote_AAPL', {'price': 1})
        clock.advance(300)
        assert cache.get('quote_AAPL') is None
        assert len(cache) == 0

    def test_miss_returns_none(self, clock):
        assert PriceCache(300, clock=clock).get('missing') is None

    def test_set_refreshes_timestamp(self, clock):
        cache = PriceCache(10, clock=clock)
        cache.set('k', 1)
        clock.advance(8)
        cache.set('k', 2)
        clock.advance(8)
        assert cache.get('k') == 2

    def test_instances_are_independent(self, clock):
        quotes = PriceCache(300, clock=clock)
        series = PriceCache(86400, clock=clock)
        quotes.set('k', 'quote')
        series.set('k', 'series')
        clock.advance(600)
        assert quotes.get('k') is None
        assert series.get('k') == 'series'

    def test_clear(self, clock):
        cache = PriceCache(300, clock=clock)
        cache.set('a', 1)
        cache.clear()
        assert cache.get('a') is None


class TestCacheKey:

    def test_daily_key(self):
        assert make_cache_key('daily', 'AAPL') == 'daily_AAPL'

    def test_key_normalizes_symbol(self):
        assert make_cache_key('quote', ' aapl ') == make_cache_key('quote', 'AAPL')

    def test_key_includes_extra_params(self):
        assert make_cache_key('history', 'MSFT', '1Y') == 'history_MSFT_1Y'
        assert make_cache_key('history', 'MSFT', '1Y') != make_cache_key('history', 'MSFT', '6M')
