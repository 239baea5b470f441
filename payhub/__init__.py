# ==============================================================================
# payhub/__init__.py
# ------------------------------------------------------------------------------
# Application factory for creating and configuring the Flask app instance.
# ==============================================================================

import os
import logging
from datetime import datetime

import click
from flask import Flask
from config import Config
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

__version__ = '1.0.0'

# Initialize extensions globally to be accessible by other modules
db = SQLAlchemy()
migrate = Migrate()

def create_app(config_class=Config):
    """
    Application factory function. Creates and configures the Flask application.

    Args:
        config_class (class): The configuration class to use.

    Returns:
        Flask: The configured Flask application instance.
    """
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_class)

    # Configure logging
    logging.basicConfig(level=getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO),
                        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s')

    # The instance folder holds the SQLite database and uploaded snapshots
    os.makedirs(app.instance_path, exist_ok=True)

    # Initialize extensions with the application instance
    db.init_app(app)
    migrate.init_app(app, db)

    # Register blueprints with the application
    from payhub.main import bp as main_bp
    app.register_blueprint(main_bp)

    @app.cli.command("seed")
    def seed():
        """Seeds the database with default settings."""
        from payhub.seed import seed_data
        seed_data()
        app.logger.info("Database has been seeded with default values.")

    @app.cli.command("cycles")
    @click.option('--year', type=int, default=None, help='Calendar year (defaults to the current year).')
    @click.option('--window', type=click.Choice(['all', 'recent']), default='all')
    def cycles(year, window):
        """Prints the billing cycles for a year."""
        from payhub.payout.cycles import all_months_in_year, recent_months_window
        year = year or datetime.utcnow().year
        generator = all_months_in_year if window == 'all' else recent_months_window
        for cycle in generator(year):
            click.echo(f"{cycle.cycle_id}  {cycle.label}  [{cycle.start_date_iso} .. {cycle.end_date_iso}]")

    app.logger.info('Walker Pay Hub startup complete')

    return app
