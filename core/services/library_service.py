# core/services/library_service.py
"""
Operations that touch more than one entity.

The primary action always stands on its own. An optional follow-up action
(deleting an emptied series, removing a purchased wishlist item) may fail
without undoing the primary one, and the caller gets a CascadeResult
describing exactly what happened.
"""
import logging
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.sa.repositories import BookRepository, SeriesRepository, WishlistRepository

logger = logging.getLogger(__name__)


@dataclass
class CascadeResult:
    primary_ok: bool
    secondary_ok: Optional[bool] = None
    secondary_error: Optional[str] = None
    message: str = ""
    result: Any = None

    @property
    def partial_failure(self) -> bool:
        return self.primary_ok and self.secondary_ok is False


class LibraryService:
    def __init__(self, session: Session, user_id: str):
        self.session = session
        self.user_id = user_id
        self.books = BookRepository(session)
        self.series = SeriesRepository(session)
        self.wishlist = WishlistRepository(session)

    def delete_book(self, book_id: str, delete_empty_series: bool = False) -> CascadeResult:
        """Move a book to the bin, optionally deleting its series if that leaves it empty"""
        book = self.books.get_active_book(self.user_id, book_id)
        if not book:
            return CascadeResult(primary_ok=False, message="Book not found")

        series_id = book.series_id
        try:
            self.books.soft_delete_book(self.user_id, book_id)
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to move book {book_id} to the bin: {e}")
            return CascadeResult(primary_ok=False, message="Failed to delete book")

        if not delete_empty_series or not series_id:
            return CascadeResult(primary_ok=True, message="Book moved to bin", result=book)
        if self.series.count_active_books(self.user_id, series_id) > 0:
            return CascadeResult(primary_ok=True, message="Book moved to bin", result=book)

        try:
            self.series.delete_series(self.user_id, series_id)
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Book {book_id} moved to bin but deleting series {series_id} failed: {e}")
            return CascadeResult(
                primary_ok=True,
                secondary_ok=False,
                secondary_error=str(e),
                message="Book moved, series deletion failed",
                result=book,
            )
        return CascadeResult(primary_ok=True, secondary_ok=True,
                             message="Book moved to bin and series deleted", result=book)

    def mark_purchased(self, item_id: str) -> CascadeResult:
        """Turn a wishlist item into a library book, then remove it from the wishlist"""
        item = self.wishlist.get_item(self.user_id, item_id)
        if not item:
            return CascadeResult(primary_ok=False, message="Wishlist item not found")

        data = {
            'title': item.title,
            'author': item.author,
            'isbn': item.isbn,
            'cover_image_url': item.cover_image_url,
            'covers': item.covers,
            'publisher': item.publisher,
            'published_date': item.published_date,
            'page_count': item.page_count,
            'reads': [],
            'genres': [],
        }
        try:
            book = self.books.add_book(self.user_id, data)
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to add purchased wishlist item {item_id} to library: {e}")
            return CascadeResult(primary_ok=False, message="Failed to add book to library")

        try:
            self.wishlist.delete_item(self.user_id, item_id)
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Book {book.id} added but wishlist item {item_id} was not removed: {e}")
            return CascadeResult(
                primary_ok=True,
                secondary_ok=False,
                secondary_error=str(e),
                message="Book added, wishlist removal failed",
                result=book,
            )
        return CascadeResult(primary_ok=True, secondary_ok=True,
                             message="Added to library", result=book)
