"""
Domain models for the book collection.

These models represent the core business entities independent of persistence concerns.
The wire form produced by ``to_dict`` is the JSON export/import format.
"""

from dataclasses import dataclass, field
from datetime import datetime, date, timezone
from typing import Optional, Dict, Any
from enum import Enum


def now_utc() -> datetime:
    """Timezone-aware UTC now for default timestamps (avoid datetime.utcnow deprecation)."""
    return datetime.now(timezone.utc)


class BookValidationError(ValueError):
    """Raised when book data does not satisfy the domain rules."""


class ShelfName(Enum):
    """Predefined shelves every collection has."""
    TO_READ = "To read"
    READING = "Reading"
    READ = "Read"
    DID_NOT_FINISH = "Did not finish"

    @classmethod
    def parse(cls, value: Any) -> 'ShelfName':
        """Accept the member name ("READ") or the display value ("Read")."""
        if isinstance(value, ShelfName):
            return value
        if not isinstance(value, str) or not value.strip():
            raise BookValidationError(f"Invalid shelf: {value!r}")
        text = value.strip()
        key = text.upper().replace(' ', '_')
        if key in cls.__members__:
            return cls[key]
        for member in cls:
            if member.value.lower() == text.lower():
                return member
        raise BookValidationError(f"Unknown shelf: {value!r}")


@dataclass
class Author:
    """Author domain model."""
    first_name: str = ""
    last_name: str = ""

    def __post_init__(self):
        self.first_name = (self.first_name or "").strip()
        self.last_name = (self.last_name or "").strip()

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def to_dict(self) -> Dict[str, str]:
        return {"first_name": self.first_name, "last_name": self.last_name}

    @classmethod
    def from_dict(cls, data: Any) -> 'Author':
        if isinstance(data, str):
            # "Jane Austen" -> first "Jane", last "Austen"
            first, _, last = data.strip().rpartition(' ')
            return cls(first_name=first, last_name=last) if first else cls(last_name=last)
        if not isinstance(data, dict):
            raise BookValidationError("Author must be an object or a name string")
        names = {}
        for key in ("first_name", "last_name"):
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise BookValidationError(f"author {key} must be text")
            names[key] = value or ""
        return cls(**names)


INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1


def _optional_int(data: Dict[str, Any], key: str, minimum: Optional[int] = None) -> Optional[int]:
    value = data.get(key)
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise BookValidationError(f"{key} must be a whole number")
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        raise BookValidationError(f"{key} must be a whole number")
    if isinstance(value, float) and value != number:
        raise BookValidationError(f"{key} must be a whole number")
    if minimum is not None and number < minimum:
        raise BookValidationError(f"{key} must be at least {minimum}")
    if not INT64_MIN <= number <= INT64_MAX:
        raise BookValidationError(f"{key} is out of range")
    return number


def _optional_date(data: Dict[str, Any], key: str) -> Optional[date]:
    value = data.get(key)
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        # Full timestamps are accepted and truncated to their date
        if len(text) > 10:
            return datetime.fromisoformat(text).date()
        return date.fromisoformat(text)
    except ValueError:
        raise BookValidationError(f"{key} must be an ISO date (YYYY-MM-DD)")


def _optional_text(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass
class Book:
    """Book domain model."""
    title: str = ""
    author: Author = field(default_factory=Author)
    shelf: ShelfName = ShelfName.TO_READ
    id: Optional[str] = None
    custom_shelf: Optional[str] = None
    genre: Optional[str] = None
    number_of_pages: Optional[int] = None
    pages_read: Optional[int] = None
    series_position: Optional[int] = None
    edition: Optional[int] = None
    isbn: Optional[str] = None
    year_of_publication: Optional[int] = None
    date_started_reading: Optional[date] = None
    date_finished_reading: Optional[date] = None
    rating: Optional[float] = None
    book_review: Optional[str] = None
    recommended_by: Optional[str] = None
    created_at: datetime = field(default_factory=now_utc)

    def validate(self) -> None:
        """Check the invariants a stored book must satisfy."""
        if not self.title or not self.title.strip():
            raise BookValidationError("Book title is required")
        if not self.author.full_name:
            raise BookValidationError("Book author is required")
        if self.rating is not None:
            if not 0.0 <= self.rating <= 10.0 or (self.rating * 2) != int(self.rating * 2):
                raise BookValidationError("rating must be between 0 and 10 in steps of 0.5")
        if (self.date_started_reading and self.date_finished_reading
                and self.date_finished_reading < self.date_started_reading):
            raise BookValidationError("date_finished_reading cannot be before date_started_reading")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON wire form used by export and import."""
        return {
            "title": self.title,
            "author": self.author.to_dict(),
            "shelf": self.shelf.name,
            "custom_shelf": self.custom_shelf,
            "genre": self.genre,
            "number_of_pages": self.number_of_pages,
            "pages_read": self.pages_read,
            "series_position": self.series_position,
            "edition": self.edition,
            "isbn": self.isbn,
            "year_of_publication": self.year_of_publication,
            "date_started_reading": self.date_started_reading.isoformat() if self.date_started_reading else None,
            "date_finished_reading": self.date_finished_reading.isoformat() if self.date_finished_reading else None,
            "rating": self.rating,
            "book_review": self.book_review,
            "recommended_by": self.recommended_by,
        }

    @classmethod
    def from_dict(cls, data: Any) -> 'Book':
        """Create a book from its wire form; raises BookValidationError on bad input."""
        if not isinstance(data, dict):
            raise BookValidationError("Each book must be a JSON object")

        rating = data.get("rating")
        if rating is not None and rating != "":
            if isinstance(rating, bool):
                raise BookValidationError("rating must be a number")
            try:
                rating = float(rating)
            except (TypeError, ValueError):
                raise BookValidationError("rating must be a number")
        else:
            rating = None

        book = cls(
            title=(data.get("title") or "").strip() if isinstance(data.get("title"), str) else "",
            author=Author.from_dict(data.get("author") or {}),
            shelf=ShelfName.parse(data["shelf"]) if data.get("shelf") else ShelfName.TO_READ,
            custom_shelf=_optional_text(data, "custom_shelf"),
            genre=_optional_text(data, "genre"),
            number_of_pages=_optional_int(data, "number_of_pages", minimum=0),
            pages_read=_optional_int(data, "pages_read", minimum=0),
            series_position=_optional_int(data, "series_position", minimum=1),
            edition=_optional_int(data, "edition", minimum=1),
            isbn=_optional_text(data, "isbn"),
            year_of_publication=_optional_int(data, "year_of_publication"),
            date_started_reading=_optional_date(data, "date_started_reading"),
            date_finished_reading=_optional_date(data, "date_finished_reading"),
            rating=rating,
            book_review=_optional_text(data, "book_review"),
            recommended_by=_optional_text(data, "recommended_by"),
        )
        book.validate()
        return book
