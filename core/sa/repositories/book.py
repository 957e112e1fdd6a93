# core/sa/repositories/book.py
from datetime import datetime
from typing import Optional, List, Dict, Any, Iterable, Set
from sqlalchemy.orm import Session, selectinload
from ..models import Book, BookGenre, BookRead, BookImage, Genre, Series, utcnow
from core.utils.reading import ReadingStatus, get_reading_status, has_read_in_progress
from core.utils.dates import as_utc
from .genre import GenreRepository

# Fields that map straight onto Book columns
SCALAR_FIELDS = (
    'title', 'author', 'isbn', 'cover_image_url', 'covers', 'publisher', 'published_date',
    'physical_format', 'page_count', 'rating', 'series_id', 'series_position', 'notes',
)


class BookRepository:
    def __init__(self, session: Session):
        self.session = session

    def _query(self, user_id: str):
        return (
            self.session.query(Book)
            .filter(Book.user_id == user_id)
            .options(
                selectinload(Book.book_genres),
                selectinload(Book.reads),
                selectinload(Book.images),
            )
        )

    def _active(self, user_id: str):
        return self._query(user_id).filter(Book.deleted_at.is_(None))

    def _refresh_genre_counts(self, user_id: str, genre_ids: Iterable[str]) -> None:
        genre_ids = set(genre_ids)
        if genre_ids:
            GenreRepository(self.session).refresh_book_counts(user_id, genre_ids, commit=False)

    def _check_references(self, user_id: str, genre_ids: Optional[List[str]], series_id: Optional[str]) -> None:
        """Reject genre or series ids that don't belong to the user"""
        if genre_ids:
            known = {
                row.id for row in
                self.session.query(Genre.id)
                .filter(Genre.user_id == user_id, Genre.id.in_(genre_ids))
                .all()
            }
            missing = [genre_id for genre_id in genre_ids if genre_id not in known]
            if missing:
                raise ValueError(f"Unknown genre: {missing[0]}")
        if series_id:
            exists = (
                self.session.query(Series.id)
                .filter(Series.user_id == user_id, Series.id == series_id)
                .first()
            )
            if not exists:
                raise ValueError(f"Unknown series: {series_id}")

    def list_books(self, user_id: str) -> List[Book]:
        """Active books, newest first"""
        return self._active(user_id).order_by(Book.created_at.desc()).all()

    def get_book(self, user_id: str, book_id: str) -> Optional[Book]:
        """Get a book whether it is active or in the bin"""
        return self._query(user_id).filter(Book.id == book_id).first()

    def get_active_book(self, user_id: str, book_id: str) -> Optional[Book]:
        return self._active(user_id).filter(Book.id == book_id).first()

    def list_by_status(self, user_id: str, status: ReadingStatus | str) -> List[Book]:
        status = ReadingStatus(status)
        return [book for book in self.list_books(user_id) if get_reading_status(book.reads) == status]

    def list_recent(self, user_id: str, count: int = 10) -> List[Book]:
        return self._active(user_id).order_by(Book.created_at.desc()).limit(count).all()

    def list_by_series(self, user_id: str, series_id: str) -> List[Book]:
        """Active books in a series by position; unpositioned books last"""
        return (
            self._active(user_id)
            .filter(Book.series_id == series_id)
            .order_by(Book.series_position.is_(None), Book.series_position.asc(), Book.created_at.asc())
            .all()
        )

    def count_books(self, user_id: str) -> int:
        return self.session.query(Book).filter(Book.user_id == user_id, Book.deleted_at.is_(None)).count()

    def list_bin(self, user_id: str) -> List[Book]:
        """Soft-deleted books, most recently binned first"""
        return (
            self._query(user_id)
            .filter(Book.deleted_at.is_not(None))
            .order_by(Book.deleted_at.desc())
            .all()
        )

    def list_bin_owners(self) -> List[str]:
        """Users that have at least one book in the bin"""
        rows = (
            self.session.query(Book.user_id)
            .filter(Book.deleted_at.is_not(None))
            .distinct()
            .order_by(Book.user_id)
            .all()
        )
        return [row.user_id for row in rows]

    def list_image_paths(self, user_id: str) -> Set[str]:
        """Storage paths of every image the user's books reference, binned books included"""
        rows = (
            self.session.query(BookImage.storage_path)
            .join(Book, Book.id == BookImage.book_id)
            .filter(Book.user_id == user_id)
            .all()
        )
        return {row.storage_path for row in rows}

    def find_by_isbn(self, user_id: str, isbn: str) -> Optional[Book]:
        return self._active(user_id).filter(Book.isbn == isbn).first()

    def list_for_duplicate_check(self, user_id: str, limit: int = 200) -> List[Book]:
        return self._active(user_id).order_by(Book.created_at.desc()).limit(limit).all()

    def _set_genres(self, book: Book, genre_ids: List[str]) -> None:
        book.book_genres = [
            BookGenre(genre_id=genre_id, position=position)
            for position, genre_id in enumerate(genre_ids)
        ]

    def _set_reads(self, book: Book, reads: List[Dict[str, Any]]) -> None:
        book.reads = [
            BookRead(position=position, started_at=read.get('started_at'), finished_at=read.get('finished_at'))
            for position, read in enumerate(reads)
        ]

    def _check_images(self, book: Book, images: List[Dict[str, Any]]) -> None:
        """Edits may only reorder, caption or re-flag images the book already has"""
        owned = {image.id for image in book.images}
        for image in images:
            if image['id'] not in owned:
                raise ValueError(f"Unknown image: {image['id']}")

    def _arrange_images(self, book: Book, images: List[Dict[str, Any]]) -> None:
        """Keep the listed images in the given order and drop the rest"""
        by_id = {image.id: image for image in book.images}
        arranged = []
        for entry in images:
            record = by_id[entry['id']]
            record.caption = entry.get('caption')
            record.is_primary = bool(entry.get('is_primary'))
            arranged.append(record)
        if arranged and not any(record.is_primary for record in arranged):
            arranged[0].is_primary = True
        book.images = arranged
        book.images.reorder()

    def add_book(self, user_id: str, data: Dict[str, Any]) -> Book:
        """Create a book from validated form data.

        Args:
            user_id: Owner of the book
            data: Field values as produced by BookCreate.model_dump()

        Returns:
            The new Book, active and with an empty read history unless reads were supplied
        """
        genre_ids = list(data.get('genres') or [])
        self._check_references(user_id, genre_ids, data.get('series_id'))

        book = Book(user_id=user_id, deleted_at=None)
        for field in SCALAR_FIELDS:
            if field in data:
                setattr(book, field, data[field])
        self._set_genres(book, genre_ids)
        self._set_reads(book, data.get('reads') or [])

        self.session.add(book)
        self.session.flush()
        self._refresh_genre_counts(user_id, genre_ids)
        self.session.commit()
        return book

    def update_book(self, user_id: str, book_id: str, changes: Dict[str, Any]) -> Optional[Book]:
        """Apply a partial update. Genres and reads are replaced wholesale, images can only be rearranged."""
        book = self.get_book(user_id, book_id)
        if not book:
            return None

        self._check_references(user_id, changes.get('genres'), changes.get('series_id'))
        if 'images' in changes:
            self._check_images(book, changes['images'] or [])
        touched_genres = set(book.genres)

        for field in SCALAR_FIELDS:
            if field in changes:
                setattr(book, field, changes[field])
        if 'genres' in changes:
            self._set_genres(book, list(changes['genres'] or []))
            touched_genres.update(changes['genres'] or [])
        if 'reads' in changes:
            self._set_reads(book, changes['reads'] or [])
        if 'images' in changes:
            self._arrange_images(book, changes['images'] or [])

        book.updated_at = utcnow()
        self.session.flush()
        self._refresh_genre_counts(user_id, touched_genres)
        self.session.commit()
        return book

    def soft_delete_book(self, user_id: str, book_id: str, deleted_at: Optional[datetime] = None) -> Optional[Book]:
        """Move a book to the bin"""
        book = self.get_book(user_id, book_id)
        if not book:
            return None
        book.deleted_at = as_utc(deleted_at) if deleted_at else utcnow()
        book.updated_at = utcnow()
        self.session.flush()
        self._refresh_genre_counts(user_id, book.genres)
        self.session.commit()
        return book

    def restore_book(self, user_id: str, book_id: str) -> Optional[Book]:
        book = self.get_book(user_id, book_id)
        if not book:
            return None
        book.deleted_at = None
        book.updated_at = utcnow()
        self.session.flush()
        self._refresh_genre_counts(user_id, book.genres)
        self.session.commit()
        return book

    def delete_book(self, user_id: str, book_id: str) -> bool:
        """Permanently delete a book and its reads, genres and image records.

        Returns:
            True if the book was deleted, False if not found
        """
        book = self.get_book(user_id, book_id)
        if not book:
            return False
        genre_ids = book.genres
        self.session.delete(book)
        self.session.flush()
        self._refresh_genre_counts(user_id, genre_ids)
        self.session.commit()
        return True

    def start_read(self, user_id: str, book_id: str, started_at: Optional[datetime] = None) -> Optional[Book]:
        """Begin a new read. Only allowed when no read is in progress."""
        book = self.get_active_book(user_id, book_id)
        if not book:
            return None
        if has_read_in_progress(book.reads):
            raise ValueError("Book already has a read in progress")
        if book.reads and book.reads[-1].finished_at is None:
            # A dateless placeholder entry is replaced rather than stacked
            book.reads.pop()
        book.reads.append(BookRead(started_at=as_utc(started_at) if started_at else utcnow()))
        book.updated_at = utcnow()
        self.session.commit()
        return book

    def finish_read(self, user_id: str, book_id: str, finished_at: Optional[datetime] = None) -> Optional[Book]:
        """Finish the read in progress"""
        book = self.get_active_book(user_id, book_id)
        if not book:
            return None
        if not has_read_in_progress(book.reads):
            raise ValueError("No read in progress")
        current = book.reads[-1]
        finished_at = as_utc(finished_at) if finished_at else utcnow()
        if finished_at < current.started_at:
            raise ValueError("Finish date cannot be before start date")
        current.finished_at = finished_at
        book.updated_at = utcnow()
        self.session.commit()
        return book

    def add_image(self, user_id: str, book_id: str, image: Dict[str, Any]) -> Optional[BookImage]:
        """Attach a stored image; the first image of a book becomes primary"""
        book = self.get_book(user_id, book_id)
        if not book:
            return None
        record = BookImage(
            id=image['id'],
            url=image['url'],
            storage_path=image['storage_path'],
            is_primary=not book.images,
            caption=image.get('caption'),
            size_bytes=image.get('size_bytes'),
            width=image.get('width'),
            height=image.get('height'),
        )
        book.images.append(record)
        book.updated_at = utcnow()
        self.session.commit()
        return record

    def remove_image(self, user_id: str, book_id: str, image_id: str) -> Optional[BookImage]:
        """Detach an image record, promoting the next image if it was primary.

        Returns:
            The removed image (so its file can be deleted), or None if not found
        """
        book = self.get_book(user_id, book_id)
        if not book:
            return None
        image = next((img for img in book.images if img.id == image_id), None)
        if not image:
            return None
        book.images.remove(image)
        if image.is_primary and book.images:
            book.images[0].is_primary = True
        book.updated_at = utcnow()
        self.session.commit()
        return image

    def set_primary_image(self, user_id: str, book_id: str, image_id: str) -> Optional[Book]:
        book = self.get_book(user_id, book_id)
        if not book or not any(img.id == image_id for img in book.images):
            return None
        for img in book.images:
            img.is_primary = img.id == image_id
        book.updated_at = utcnow()
        self.session.commit()
        return book
