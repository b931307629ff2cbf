# config.py
"""
Configuration settings for the Flask application.
Handles database connections, provider credentials, rate budget and cache settings.
"""

import os

from constants import (
    ALPHA_VANTAGE_BASE_URL, DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_DAILY_LIMIT, DEFAULT_MINUTE_LIMIT,
    QUOTE_CACHE_TTL_SECONDS, SERIES_CACHE_TTL_SECONDS, BASKET_SIZE
)


class Config:
    """Base configuration"""

    # Flask settings
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # Database settings (rate budget persistence)
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///market_data.db'

    # Fix for Heroku/Railway postgres:// vs postgresql://
    if SQLALCHEMY_DATABASE_URI and SQLALCHEMY_DATABASE_URI.startswith('postgres://'):
        SQLALCHEMY_DATABASE_URI = SQLALCHEMY_DATABASE_URI.replace('postgres://', 'postgresql://', 1)

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Alpha Vantage settings
    ALPHA_VANTAGE_API_KEY = os.environ.get('ALPHA_VANTAGE_API_KEY', '')
    ALPHA_VANTAGE_BASE_URL = os.environ.get('ALPHA_VANTAGE_BASE_URL', ALPHA_VANTAGE_BASE_URL)
    ALPHA_VANTAGE_TIMEOUT = float(os.environ.get('ALPHA_VANTAGE_TIMEOUT', DEFAULT_REQUEST_TIMEOUT))

    # Rate budget (free tier: 25/day, 5/min)
    API_DAILY_LIMIT = int(os.environ.get('API_DAILY_LIMIT', DEFAULT_DAILY_LIMIT))
    API_MINUTE_LIMIT = int(os.environ.get('API_MINUTE_LIMIT', DEFAULT_MINUTE_LIMIT))
    BUDGET_STORE = os.environ.get('BUDGET_STORE', 'database')  # database | memory

    # Cache settings
    QUOTE_CACHE_TTL_SECONDS = int(os.environ.get('QUOTE_CACHE_TTL_SECONDS', QUOTE_CACHE_TTL_SECONDS))
    SERIES_CACHE_TTL_SECONDS = int(os.environ.get('SERIES_CACHE_TTL_SECONDS', SERIES_CACHE_TTL_SECONDS))

    # One worker per basket position
    BASKET_MAX_WORKERS = int(os.environ.get('BASKET_MAX_WORKERS', BASKET_SIZE))


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False


class TestingConfig(Config):
    """Testing configuration"""
    DEBUG = False
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    ALPHA_VANTAGE_API_KEY = 'test-key'
    BUDGET_STORE = 'memory'


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config(config_name=None):
    """Get configuration by name, falling back to FLASK_ENV"""
    env = config_name or os.environ.get('FLASK_ENV', 'development')
    return config.get(env, config['default'])
