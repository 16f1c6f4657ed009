"""
Routes package initialization.
Registers all blueprint modules for the Book Project application.
"""

import logging

logger = logging.getLogger(__name__)

# Import all blueprint modules
from .book_routes import book_bp
from .misc_routes import misc_bp
from .settings_routes import settings_bp


def register_blueprints(app):
    """Register all blueprints with the Flask application."""
    app.register_blueprint(book_bp)
    app.register_blueprint(misc_bp)
    app.register_blueprint(settings_bp, url_prefix='/settings')
    logger.debug("All blueprints registered successfully")
