# providers/__init__.py
"""
Provider factory and exports.
Builds the configured market data provider.
"""

from typing import Dict

from .base_provider import (
    BaseMarketDataProvider,
    ProviderPayload,
    ProviderThrottled,
    ProviderFailed,
    ProviderResponse
)
from .alphavantage_provider import AlphaVantageProvider


class MarketDataProviderFactory:
    """
    Factory for creating the market data provider.
    A missing API key is not fatal here: it is reported per request as a
    ConfigurationError so the service can still start and answer health checks.
    """

    @staticmethod
    def create_provider(config: Dict) -> BaseMarketDataProvider:
        """
        Create provider based on configuration.

        Args:
            config: Application configuration

        Returns:
            Configured provider instance
        """
        provider_config = {
            'api_key': config.get('ALPHA_VANTAGE_API_KEY', ''),
            'base_url': config.get('ALPHA_VANTAGE_BASE_URL'),
            'timeout': config.get('ALPHA_VANTAGE_TIMEOUT', 5),
        }
        if not provider_config['api_key']:
            print("⚠️  ALPHA_VANTAGE_API_KEY not set, market data requests will fail until it is configured")
        return AlphaVantageProvider(provider_config)


# Exports
__all__ = [
    'BaseMarketDataProvider',
    'AlphaVantageProvider',
    'ProviderPayload',
    'ProviderThrottled',
    'ProviderFailed',
    'ProviderResponse',
    'MarketDataProviderFactory'
]
