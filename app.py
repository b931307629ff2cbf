# app.py
"""
Main Flask application entry point.
Initializes app, database, market data services and routes.
"""

import logging
import os
from flask import Flask
from dotenv import load_dotenv
from config import get_config
from models import db
from market_data_manager import MarketDataManager

# Load environment variables from .env file
load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


def create_app(config_name=None, provider=None, budget_store=None):
    """Application factory pattern"""

    app = Flask(__name__)

    # Load configuration
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    app.config.from_object(get_config(config_name))

    # Initialize database (rate budget persistence)
    db.init_app(app)
    with app.app_context():
        db.create_all()

    # Initialize market data services
    app.market_data = MarketDataManager(app, provider=provider, budget_store=budget_store)

    # Register blueprints
    from routes.api import api_bp
    app.register_blueprint(api_bp, url_prefix='/api')

    if not app.config.get('TESTING'):
        print("\n" + "=" * 60)
        print("✓ FLASK APP INITIALIZED")
        print("=" * 60)
        print(f"Environment: {config_name}")
        print(f"Provider: {app.market_data.provider.get_provider_name()}")
        print(f"Rate budget: {app.config['API_DAILY_LIMIT']}/day, {app.config['API_MINUTE_LIMIT']}/min "
              f"({app.config['BUDGET_STORE']} store)")
        print("=" * 60 + "\n")

    return app


if __name__ == '__main__':
    app = create_app()

    # Get port from environment variable (for Railway/Render)
    port = int(os.environ.get('PORT', 5012))

    app.run(
        host='0.0.0.0',
        port=port,
        debug=app.config['DEBUG']
    )
