import os
import tempfile

# config.py reads these at import time
os.environ.setdefault('SECRET_KEY', 'testing-secret-key')
os.environ.setdefault('BOOK_PROJECT_DATA_DIR', tempfile.mkdtemp(prefix='book_project_test_'))

import pytest
from cachelib.file import FileSystemCache

from app import create_app
from app.domain.models import Book, Author, ShelfName
from app.services import get_book_service, get_json_import_service, close_services
from config import TestingConfig


@pytest.fixture
def app(tmp_path):
    class _TestConfig(TestingConfig):
        KUZU_DB_PATH = str(tmp_path / 'kuzu')
        SESSION_CACHELIB = FileSystemCache(cache_dir=str(tmp_path / 'sessions'), threshold=100)

    app = create_app(_TestConfig)
    yield app
    close_services(app)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def book_service(app):
    with app.app_context():
        yield get_book_service()


@pytest.fixture
def json_import_service(app):
    with app.app_context():
        yield get_json_import_service()


def make_book(title='Dune', first='Frank', last='Herbert', shelf=ShelfName.TO_READ, **kwargs):
    return Book(title=title, author=Author(first_name=first, last_name=last), shelf=shelf, **kwargs)


@pytest.fixture
def book_factory():
    return make_book
