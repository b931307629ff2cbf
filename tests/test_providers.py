"""
Tests for the Alpha Vantage provider: transport, response decoding and parsing.
"""

import pytest
import requests
from unittest.mock import MagicMock

from conftest import make_series_payload
from exceptions import ConfigurationError, NetworkError, NoDataError, ProviderTimeoutError
from providers import (
    AlphaVantageProvider, BaseMarketDataProvider, MarketDataProviderFactory, ProviderPayload, ProviderThrottled, ProviderFailed
)


def make_response(status_code=200, body=None, reason='OK'):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.reason = reason
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def av(session):
    return AlphaVantageProvider({'api_key': 'demo-key', 'timeout': 5, 'session': session})


class TestDecodeResponse:
    """Test classification of response bodies."""

    def test_payload(self):
        body = {'Global Quote': {'05. price': '1.0'}}
        assert AlphaVantageProvider.decode_response(body) == ProviderPayload(body)

    def test_note_is_throttle(self):
        result = AlphaVantageProvider.decode_response({'Note': 'Thank you for using Alpha Vantage!'})
        assert isinstance(result, ProviderThrottled)
        assert 'Thank you' in result.note

    def test_information_is_throttle(self):
        result = AlphaVantageProvider.decode_response({'Information': 'Our standard API rate limit is 25 requests per day.'})
        assert isinstance(result, ProviderThrottled)

    def test_error_message_is_failure(self):
        result = AlphaVantageProvider.decode_response({'Error Message': 'Invalid API call.'})
        assert result == ProviderFailed('Invalid API call.')

    def test_non_object_is_failure(self):
        assert isinstance(AlphaVantageProvider.decode_response(['x']), ProviderFailed)


class TestTransport:
    """Test the single HTTP call per fetch."""

    def test_daily_series_request_parameters(self, av, session):
        session.get.return_value = make_response(body=make_series_payload('AAPL', 1.0, 1.0, days_ago=5))

        result = av.fetch_daily_series('aapl')

        assert isinstance(result, ProviderPayload)
        session.get.assert_called_once()
        _, kwargs = session.get.call_args
        assert kwargs['params'] == {
            'function': 'TIME_SERIES_DAILY',
            'symbol': 'AAPL',
            'outputsize': 'full',
            'apikey': 'demo-key',
        }
        assert kwargs['timeout'] == 5

    def test_quote_request_parameters(self, av, session):
        session.get.return_value = make_response(body={'Global Quote': {}})
        av.fetch_quote('MSFT')
        _, kwargs = session.get.call_args
        assert kwargs['params']['function'] == 'GLOBAL_QUOTE'
        assert kwargs['params']['symbol'] == 'MSFT'

    def test_timeout(self, av, session):
        session.get.side_effect = requests.exceptions.Timeout('read timed out')
        with pytest.raises(ProviderTimeoutError):
            av.fetch_daily_series('AAPL')

    def test_timeout_is_network_error(self, av, session):
        session.get.side_effect = requests.exceptions.Timeout()
        with pytest.raises(NetworkError):
            av.fetch_quote('AAPL')

    def test_connection_error(self, av, session):
        session.get.side_effect = requests.exceptions.ConnectionError('refused')
        with pytest.raises(NetworkError, match="Request failed"):
            av.fetch_daily_series('AAPL')
        assert session.get.call_count == 1

    def test_http_429_is_throttle(self, av, session):
        session.get.return_value = make_response(429, reason='Too Many Requests')
        assert isinstance(av.fetch_daily_series('AAPL'), ProviderThrottled)

    def test_http_500_is_network_error(self, av, session):
        session.get.return_value = make_response(500, reason='Internal Server Error')
        with pytest.raises(NetworkError, match="HTTP 500"):
            av.fetch_daily_series('AAPL')

    def test_invalid_json_is_failure(self, av, session):
        session.get.return_value = make_response(body=ValueError('not json'))
        assert isinstance(av.fetch_daily_series('AAPL'), ProviderFailed)

    def test_missing_key_raises_before_request(self, session):
        av = AlphaVantageProvider({'api_key': '', 'session': session})
        assert av.is_configured() is False
        with pytest.raises(ConfigurationError):
            av.fetch_daily_series('AAPL')
        session.get.assert_not_called()

    def test_invalid_symbol(self, av, session):
        with pytest.raises(ValueError):
            av.fetch_daily_series('THIS_IS_TOO_LONG')
        session.get.assert_not_called()


class TestParsing:
    """Test payload to DataFrame / Quote conversion."""

    def test_series_newest_first(self, av):
        df = av.parse_daily_series(make_series_payload('AAPL', 150.0, 120.0, days_ago=10), 'AAPL')
        assert len(df) == 11
        assert df.index[0] > df.index[-1]
        assert df['close'].iloc[0] == 150.0
        assert df['close'].iloc[10] == 120.0
        assert list(df.columns) == ['open', 'high', 'low', 'close', 'volume']

    def test_unsorted_payload_is_sorted(self, av):
        payload = make_series_payload('AAPL', 150.0, 120.0, days_ago=3)
        series = payload['Time Series (Daily)']
        payload['Time Series (Daily)'] = dict(reversed(list(series.items())))
        df = av.parse_daily_series(payload, 'AAPL')
        assert df.index[0].strftime('%Y-%m-%d') == '2024-12-31'

    def test_missing_series_is_empty(self, av):
        df = av.parse_daily_series({'Meta Data': {}}, 'AAPL')
        assert df.empty

    def test_negative_close_rejected(self, av):
        payload = make_series_payload('AAPL', -1.0, 1.0, days_ago=2)
        with pytest.raises(ValueError, match="negative"):
            av.parse_daily_series(payload, 'AAPL')

    def test_empty_quote(self, av):
        with pytest.raises(NoDataError):
            av.parse_quote({'Global Quote': {}}, 'ZZZZ')

    def test_quote_change_percent_strips_sign(self, av):
        quote = av.parse_quote({'Global Quote': {
            '05. price': '10.00', '09. change': '-0.5', '10. change percent': '-4.7619%'
        }}, 'TEST')
        assert quote.change_percent == pytest.approx(-4.7619)
        assert quote.volume is None


class TestProviderInterface:

    def test_parsers_are_abstract(self):
        """A provider without parse_daily_series/parse_quote cannot be built."""
        class FetchOnly(BaseMarketDataProvider):
            def fetch_daily_series(self, symbol):
                return ProviderPayload({})

            def fetch_quote(self, symbol):
                return ProviderPayload({})

            def get_provider_name(self):
                return 'FetchOnly'

        with pytest.raises(TypeError):
            FetchOnly({})

        assert {'parse_daily_series', 'parse_quote'} <= BaseMarketDataProvider.__abstractmethods__


class TestFactory:

    def test_builds_alpha_vantage_from_config(self):
        provider = MarketDataProviderFactory.create_provider({
            'ALPHA_VANTAGE_API_KEY': 'abc',
            'ALPHA_VANTAGE_TIMEOUT': 7,
        })
        assert isinstance(provider, AlphaVantageProvider)
        assert provider.api_key == 'abc'
        assert provider.timeout == 7
        assert provider.get_provider_name() == 'AlphaVantage'

    def test_missing_key_still_builds(self):
        provider = MarketDataProviderFactory.create_provider({})
        assert provider.is_configured() is False
