"""
Kuzu repositories for the book collection.
"""

import uuid
import logging
from typing import List, Dict, Any
from datetime import datetime, date, timezone

from ..domain.models import Book, Author, ShelfName
from ..utils.safe_kuzu_manager import SafeKuzuManager

# Set up logging
logger = logging.getLogger(__name__)


def _book_to_node(book: Book) -> Dict[str, Any]:
    """Flatten a Book into Kuzu node properties, dropping unset values."""
    node = {
        'id': book.id,
        'title': book.title,
        'author_first_name': book.author.first_name,
        'author_last_name': book.author.last_name,
        'shelf': book.shelf.name,
        'custom_shelf': book.custom_shelf,
        'genre': book.genre,
        'number_of_pages': book.number_of_pages,
        'pages_read': book.pages_read,
        'series_position': book.series_position,
        'edition': book.edition,
        'isbn': book.isbn,
        'year_of_publication': book.year_of_publication,
        'date_started_reading': book.date_started_reading.isoformat() if book.date_started_reading else None,
        'date_finished_reading': book.date_finished_reading.isoformat() if book.date_finished_reading else None,
        'rating': float(book.rating) if book.rating is not None else None,
        'book_review': book.book_review,
        'recommended_by': book.recommended_by,
        'created_at': book.created_at.isoformat(),
    }
    # Null parameters cannot be type-inferred by Kuzu, leave them unset instead
    return {key: value for key, value in node.items() if value is not None}


def _node_to_book(node: Dict[str, Any]) -> Book:
    started = node.get('date_started_reading')
    finished = node.get('date_finished_reading')
    created = node.get('created_at')
    return Book(
        id=node.get('id'),
        title=node.get('title') or '',
        author=Author(
            first_name=node.get('author_first_name') or '',
            last_name=node.get('author_last_name') or '',
        ),
        shelf=ShelfName[node['shelf']] if node.get('shelf') in ShelfName.__members__ else ShelfName.TO_READ,
        custom_shelf=node.get('custom_shelf'),
        genre=node.get('genre'),
        number_of_pages=node.get('number_of_pages'),
        pages_read=node.get('pages_read'),
        series_position=node.get('series_position'),
        edition=node.get('edition'),
        isbn=node.get('isbn'),
        year_of_publication=node.get('year_of_publication'),
        date_started_reading=date.fromisoformat(started) if started else None,
        date_finished_reading=date.fromisoformat(finished) if finished else None,
        rating=node.get('rating'),
        book_review=node.get('book_review'),
        recommended_by=node.get('recommended_by'),
        created_at=datetime.fromisoformat(created) if created else datetime.now(timezone.utc),
    )


class KuzuBookRepository:
    """Book repository on top of the Kuzu ``Book`` node table."""

    def __init__(self, safe_manager: SafeKuzuManager):
        self.safe_manager = safe_manager

    def create(self, book: Book) -> Book:
        """Persist a new book node and return it with its id set."""
        if not book.id:
            book.id = str(uuid.uuid4())

        node_data = _book_to_node(book)
        props = ', '.join(f"{key}: ${key}" for key in node_data)
        query = f"CREATE (b:Book {{{props}}}) RETURN b.id AS id"
        self.safe_manager.execute_query(query, node_data, operation='create_book')
        logger.debug(f"Created book {book.id}: {book.title}")
        return book

    def find_all(self) -> List[Book]:
        rows = self.safe_manager.execute_query(
            "MATCH (b:Book) RETURN b ORDER BY b.title",
            operation='find_all_books',
        )
        return [_node_to_book(row['b']) for row in rows]

    def count(self) -> int:
        rows = self.safe_manager.execute_query(
            "MATCH (b:Book) RETURN COUNT(b) AS total",
            operation='count_books',
        )
        return int(rows[0]['total']) if rows else 0

    def delete_all(self) -> int:
        """Remove every book node; returns how many were removed."""
        total = self.count()
        if total:
            self.safe_manager.execute_query(
                "MATCH (b:Book) DETACH DELETE b",
                operation='delete_all_books',
            )
        logger.info(f"Deleted {total} books")
        return total
