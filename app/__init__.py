"""
Flask application factory for the Book Project.

Kuzu is the sole data store; the theme preference lives in the server-side session.
"""

import logging
from flask import Flask
from flask_wtf.csrf import CSRFProtect
from flask_session import Session
from config import Config

logger = logging.getLogger(__name__)

csrf = CSRFProtect()
sess = Session()


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Configure Python logging level from LOG_LEVEL (default ERROR)
    log_level_name = str(app.config.get('LOG_LEVEL', 'ERROR')).upper()
    log_level = getattr(logging, log_level_name, logging.ERROR)
    logging.getLogger().setLevel(log_level)
    # Also set Flask app logger level
    app.logger.setLevel(log_level)

    # Must be set before Flask-Session initialization
    app.secret_key = app.config['SECRET_KEY']
    if not app.secret_key:
        raise RuntimeError("SECRET_KEY must be set in environment or config")

    # Initialize extensions
    csrf.init_app(app)
    sess.init_app(app)  # Initialize Flask-Session

    @app.context_processor
    def inject_site_name():
        """Make site name available in all templates."""
        return dict(site_name=app.config.get('SITE_NAME', 'Book Project'))

    from .theme import inject_theme_preference
    app.context_processor(inject_theme_preference)

    from .routes import register_blueprints
    register_blueprints(app)

    app.logger.info(f"Book Project started (database: {app.config['KUZU_DB_PATH']})")
    return app
