"""
Book Service

Handles book persistence and the JSON representation of the collection.
Focused responsibility: Book entity management only.
"""

import json
import logging
from collections import OrderedDict
from typing import List, Dict

from ..domain.models import Book, ShelfName, now_utc
from ..infrastructure.kuzu_repositories import KuzuBookRepository

logger = logging.getLogger(__name__)


class BookSerializationError(Exception):
    """Raised when the collection cannot be serialized to JSON."""


class BookService:
    """Service for core book operations backed by Kuzu."""

    def __init__(self, book_repo: KuzuBookRepository):
        self.book_repo = book_repo

    def save(self, book: Book) -> Book:
        """Validate and store a new book."""
        book.validate()
        book.created_at = now_utc()
        saved = self.book_repo.create(book)
        logger.info(f"Saved book '{saved.title}' on shelf {saved.shelf.name}")
        return saved

    def find_all(self) -> List[Book]:
        """All books ordered by predefined shelf, then title."""
        shelf_order = {shelf: index for index, shelf in enumerate(ShelfName)}
        books = self.book_repo.find_all()
        books.sort(key=lambda b: (shelf_order[b.shelf], b.title.lower()))
        return books

    def find_by_shelf(self) -> Dict[ShelfName, List[Book]]:
        """Books grouped by predefined shelf; every shelf is present."""
        grouped: Dict[ShelfName, List[Book]] = OrderedDict((shelf, []) for shelf in ShelfName)
        for book in self.find_all():
            grouped[book.shelf].append(book)
        return grouped

    def count(self) -> int:
        return self.book_repo.count()

    def delete_all(self) -> int:
        """Remove every book from every shelf."""
        deleted = self.book_repo.delete_all()
        logger.info(f"Reset shelves: {deleted} books removed")
        return deleted

    def get_json_representation_for_books_as_string(self) -> str:
        """Serialize the whole collection as a JSON array."""
        books = self.find_all()
        try:
            return json.dumps([book.to_dict() for book in books], indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise BookSerializationError(f"Could not serialize {len(books)} books: {e}") from e
