# core/services/bin_service.py
"""
Soft-delete lifecycle for books.

    active --move_to_bin--> binned --restore--> active
                            binned --purge / empty_bin / purge_expired--> gone

Expiry is not enforced by the API: `days_remaining` is shown to the user and
`purge_expired` is run on demand (the `bin purge-expired` CLI command).
"""
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from core.config import get_settings
from core.sa.models import Book, utcnow
from core.sa.repositories import BookRepository
from core.utils.dates import as_utc
from core.utils.image import ImageStore

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


def days_remaining(deleted_at: Optional[datetime], now: Optional[datetime] = None,
                   retention_days: int = 30) -> int:
    """Whole days left before a binned book is due for permanent deletion.

    max(0, ceil((deleted_at + retention - now) / 1 day)); a book with no
    deletion time reports the full retention period.
    """
    if deleted_at is None:
        return retention_days
    now = as_utc(now) if now else utcnow()
    expires_at = as_utc(deleted_at) + timedelta(days=retention_days)
    remaining = (expires_at - now).total_seconds() / SECONDS_PER_DAY
    return max(0, math.ceil(remaining))


@dataclass
class BinEntry:
    book: Book
    days_remaining: int


class BinService:
    def __init__(self, session: Session, user_id: str, image_store: Optional[ImageStore] = None,
                 retention_days: Optional[int] = None):
        settings = get_settings()
        self.user_id = user_id
        self.books = BookRepository(session)
        self.image_store = image_store or ImageStore(settings.media_dir)
        self.retention_days = retention_days if retention_days is not None else settings.bin_retention_days

    def move_to_bin(self, book_id: str, now: Optional[datetime] = None) -> Optional[Book]:
        book = self.books.get_active_book(self.user_id, book_id)
        if not book:
            return None
        logger.info(f"Moving book {book_id} to the bin")
        return self.books.soft_delete_book(self.user_id, book_id, deleted_at=now)

    def restore(self, book_id: str) -> Optional[Book]:
        book = self.books.get_book(self.user_id, book_id)
        if not book or not book.is_deleted:
            return None
        logger.info(f"Restoring book {book_id} from the bin")
        return self.books.restore_book(self.user_id, book_id)

    def purge(self, book_id: str) -> bool:
        """Permanently delete a binned book and its stored image files.

        Active books are never purged; move them to the bin first.
        """
        book = self.books.get_book(self.user_id, book_id)
        if not book or not book.is_deleted:
            return False
        storage_paths = [image.storage_path for image in book.images]
        self.books.delete_book(self.user_id, book_id)
        for storage_path in storage_paths:
            try:
                self.image_store.delete(self.user_id, storage_path)
            except (OSError, ValueError) as e:
                logger.error(f"Failed to remove image {storage_path} for book {book_id}: {e}")
        logger.info(f"Permanently deleted book {book_id}")
        return True

    def list_bin(self, now: Optional[datetime] = None) -> List[BinEntry]:
        return [
            BinEntry(book=book, days_remaining=days_remaining(book.deleted_at, now, self.retention_days))
            for book in self.books.list_bin(self.user_id)
        ]

    def empty_bin(self) -> int:
        """Purge everything in the bin. Returns the number of books removed."""
        return sum(1 for book in self.books.list_bin(self.user_id) if self.purge(book.id))

    def expired(self, now: Optional[datetime] = None) -> List[Book]:
        return [entry.book for entry in self.list_bin(now) if entry.days_remaining == 0]

    def purge_expired(self, now: Optional[datetime] = None) -> int:
        return sum(1 for book in self.expired(now) if self.purge(book.id))
