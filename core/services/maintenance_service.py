# core/services/maintenance_service.py
"""
Library repair tools.

Genre book counts are denormalised and can drift if a write fails halfway,
and image files can outlive their records. Both checks work on one user's
data only.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy.orm import Session

from core.config import get_settings
from core.sa.repositories import BookRepository, GenreRepository
from core.utils.image import ImageStore

logger = logging.getLogger(__name__)


@dataclass
class RecountResult:
    updated: int
    books_scanned: int

    @property
    def message(self) -> str:
        if not self.updated:
            return "All genre counts are correct."
        return f"Updated {self.updated} genre(s) after scanning {self.books_scanned} books."


@dataclass
class OrphanedFile:
    storage_path: str
    size_bytes: int


@dataclass
class OrphanReport:
    files: List[OrphanedFile] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.files)

    @property
    def total_size(self) -> int:
        return sum(f.size_bytes for f in self.files)


class MaintenanceService:
    def __init__(self, session: Session, user_id: str, image_store: Optional[ImageStore] = None):
        self.user_id = user_id
        self.books = BookRepository(session)
        self.genres = GenreRepository(session)
        self.image_store = image_store or ImageStore(get_settings().media_dir)

    def recount_genres(self) -> RecountResult:
        """Fix every genre whose stored book count disagrees with the books"""
        books_scanned = self.books.count_books(self.user_id)
        updated = self.genres.refresh_book_counts(self.user_id)
        logger.info(f"Recounted genres for {self.user_id}: {updated} updated, {books_scanned} books scanned")
        return RecountResult(updated=updated, books_scanned=books_scanned)

    def find_orphaned_images(self) -> OrphanReport:
        """Stored files that no book (active or binned) refers to"""
        referenced = self.books.list_image_paths(self.user_id)
        return OrphanReport(files=[
            OrphanedFile(storage_path=path, size_bytes=size)
            for path, size in self.image_store.list_files(self.user_id)
            if path not in referenced
        ])

    def delete_orphaned_images(self) -> int:
        """Remove orphaned files. Returns how many were deleted."""
        deleted = 0
        for orphan in self.find_orphaned_images().files:
            try:
                if self.image_store.delete(self.user_id, orphan.storage_path):
                    deleted += 1
            except OSError as e:
                logger.error(f"Failed to remove orphaned image {orphan.storage_path}: {e}")
        logger.info(f"Deleted {deleted} orphaned images for {self.user_id}")
        return deleted
