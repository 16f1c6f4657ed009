from flask import Blueprint, render_template, current_app, flash

from app.domain.models import ShelfName
from app.services import get_book_service

book_bp = Blueprint('book', __name__)


@book_bp.route('/')
def library():
    """Books grouped by shelf."""
    try:
        shelves = get_book_service().find_by_shelf()
    except Exception as e:
        current_app.logger.error(f"Error loading library: {e}")
        flash('Error loading your books.', 'danger')
        shelves = {shelf: [] for shelf in ShelfName}

    return render_template(
        'library.html',
        shelves=shelves,
        total_books=sum(len(books) for books in shelves.values())
    )
