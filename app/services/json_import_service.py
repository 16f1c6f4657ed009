"""
JSON Import Service

Imports a book collection from the JSON document produced by the export.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import List, IO, Optional

from ..domain.models import Book, BookValidationError
from .book_service import BookService

logger = logging.getLogger(__name__)

ACCEPTED_CONTENT_TYPES = ('application/json',)


class BookImportError(Exception):
    """Raised when an uploaded document cannot be imported at all."""


@dataclass
class ImportResult:
    """Outcome of a JSON import."""
    imported: int = 0
    skipped: int = 0
    errors: List[str] = field(default_factory=list)


class JsonImportService:
    """Turns an uploaded JSON document into stored books."""

    def __init__(self, book_service: BookService):
        self.book_service = book_service

    def on_upload_succeeded(self, filename: str, content_type: Optional[str], stream: IO[bytes]) -> ImportResult:
        """Handle a completed upload of a single JSON file."""
        mimetype = (content_type or '').split(';')[0].strip().lower()
        if mimetype not in ACCEPTED_CONTENT_TYPES:
            raise BookImportError(f"'{filename}' is not a JSON file (got {mimetype or 'unknown type'})")

        raw = stream.read()
        try:
            text = raw.decode('utf-8-sig') if isinstance(raw, bytes) else raw
        except UnicodeDecodeError as e:
            raise BookImportError(f"'{filename}' is not valid UTF-8 text") from e

        logger.info(f"Importing books from upload '{filename}' ({len(raw)} bytes)")
        return self.import_books(text)

    def import_books(self, text: str) -> ImportResult:
        """Parse a JSON array of books and save every valid entry."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise BookImportError(f"Invalid JSON: {e.msg} (line {e.lineno})") from e

        if not isinstance(data, list):
            raise BookImportError("Expected a JSON array of books")

        result = ImportResult()
        for index, entry in enumerate(data, start=1):
            try:
                book = Book.from_dict(entry)
            except BookValidationError as e:
                result.skipped += 1
                result.errors.append(f"Book #{index}: {e}")
                continue
            try:
                self.book_service.save(book)
            except Exception as e:
                # Storage errors reject this entry only
                logger.warning(f"JSON import could not save book #{index} '{book.title}': {e}")
                result.skipped += 1
                result.errors.append(f"Book #{index}: could not be saved")
                continue
            result.imported += 1

        if result.skipped:
            logger.warning(f"JSON import skipped {result.skipped} invalid entries")
        logger.info(f"JSON import finished: {result.imported} imported, {result.skipped} skipped")
        return result
