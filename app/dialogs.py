"""
Confirmation dialogs rendered by the settings page.
"""

import logging

from .services.book_service import BookService

logger = logging.getLogger(__name__)


class ResetShelvesDialog:
    """Asks the user to confirm removing every book from every shelf."""

    TITLE = "Reset shelves"
    MESSAGE = "Are you sure you want to reset all shelves? All books on every shelf will be removed."
    CONFIRM_LABEL = "Yes, reset shelves"
    CANCEL_LABEL = "No, go back"

    def __init__(self, book_service: BookService):
        self.book_service = book_service
        self.is_open = False

    def open_dialog(self) -> None:
        self.is_open = True

    def cancel(self) -> None:
        self.is_open = False

    def confirm(self) -> int:
        """Delete all books and close; returns the number removed."""
        deleted = self.book_service.delete_all()
        self.is_open = False
        logger.info(f"Shelves reset by user, {deleted} books removed")
        return deleted
