"""
Services Package

- BookService: book persistence and JSON export
- JsonImportService: JSON import of a book collection

Service instances are created lazily per application and cached on
``app.extensions`` so every app (and every test) gets its own database.
"""

import os

from flask import current_app

from ..infrastructure.kuzu_repositories import KuzuBookRepository
from ..utils.safe_kuzu_manager import SafeKuzuManager
from .book_service import BookService, BookSerializationError
from .json_import_service import JsonImportService, BookImportError, ImportResult

_EXTENSION_KEY = 'book_project'


def _get_state(app) -> dict:
    return app.extensions.setdefault(_EXTENSION_KEY, {})


def _get_kuzu_manager() -> SafeKuzuManager:
    """Get the Kuzu manager for the current app with lazy initialization."""
    state = _get_state(current_app)
    if 'kuzu_manager' not in state:
        database_path = os.path.join(current_app.config['KUZU_DB_PATH'], current_app.config['KUZU_DB_NAME'])
        state['kuzu_manager'] = SafeKuzuManager(database_path)
    return state['kuzu_manager']


def _get_book_service() -> BookService:
    """Get book service instance with lazy initialization."""
    state = _get_state(current_app)
    if 'book_service' not in state:
        state['book_service'] = BookService(KuzuBookRepository(_get_kuzu_manager()))
    return state['book_service']


def _get_json_import_service() -> JsonImportService:
    """Get JSON import service instance with lazy initialization."""
    state = _get_state(current_app)
    if 'json_import_service' not in state:
        state['json_import_service'] = JsonImportService(_get_book_service())
    return state['json_import_service']


def close_services(app) -> None:
    """Release the database held by ``app``."""
    manager = _get_state(app).get('kuzu_manager')
    if manager is not None:
        manager.close()


# Public accessors
get_book_service = _get_book_service
get_json_import_service = _get_json_import_service

__all__ = [
    'BookService',
    'BookSerializationError',
    'JsonImportService',
    'BookImportError',
    'ImportResult',
    'get_book_service',
    'get_json_import_service',
    'close_services',
]
