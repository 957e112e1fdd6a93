# core/sa/repositories/genre.py

from typing import Dict, Iterable, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from core.sa.models import Genre, Book, BookGenre, DEFAULT_GENRE_COLOR, utcnow
from core.utils.text import normalize_genre_name


class GenreRepository:
    """Repository for managing Genre entities."""

    def __init__(self, session: Session):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def list_genres(self, user_id: str) -> List[Genre]:
        """Get all of a user's genres ordered by name."""
        return (
            self.session.query(Genre)
            .filter(Genre.user_id == user_id)
            .order_by(func.lower(Genre.name))
            .all()
        )

    def get_genre(self, user_id: str, genre_id: str) -> Optional[Genre]:
        return (
            self.session.query(Genre)
            .filter(Genre.user_id == user_id, Genre.id == genre_id)
            .first()
        )

    def get_by_name(self, user_id: str, name: str) -> Optional[Genre]:
        """Get a genre by name, ignoring case and extra whitespace.

        Args:
            user_id: Owner of the genre
            name: The name to look up

        Returns:
            The Genre object if found, None otherwise
        """
        key = normalize_genre_name(name)
        return next(
            (genre for genre in self.list_genres(user_id) if normalize_genre_name(genre.name) == key),
            None,
        )

    def create_genre(self, user_id: str, name: str, color: Optional[str] = None) -> Genre:
        """Create a genre.

        Raises:
            ValueError: If the user already has a genre with the same name
        """
        if self.get_by_name(user_id, name):
            raise ValueError(f"A genre named '{name}' already exists")
        genre = Genre(user_id=user_id, name=name, color=color or DEFAULT_GENRE_COLOR, book_count=0)
        self.session.add(genre)
        self.session.commit()
        return genre

    def update_genre(self, user_id: str, genre_id: str, changes: Dict) -> Optional[Genre]:
        genre = self.get_genre(user_id, genre_id)
        if not genre:
            return None
        if 'name' in changes:
            existing = self.get_by_name(user_id, changes['name'])
            if existing and existing.id != genre_id:
                raise ValueError(f"A genre named '{changes['name']}' already exists")
            genre.name = changes['name']
        if changes.get('color'):
            genre.color = changes['color']
        self.session.commit()
        return genre

    def delete_genre(self, user_id: str, genre_id: str) -> bool:
        """Delete a genre and remove it from every book that references it.

        Runs as a single transaction: the referencing books lose the genre and
        get a fresh updated_at, then the genre itself is removed.

        Returns:
            True if the genre was deleted, False if not found
        """
        genre = self.get_genre(user_id, genre_id)
        if not genre:
            return False

        try:
            books = (
                self.session.query(Book)
                .join(Book.book_genres)
                .filter(Book.user_id == user_id, BookGenre.genre_id == genre_id)
                .all()
            )
            now = utcnow()
            for book in books:
                remaining = [bg for bg in book.book_genres if bg.genre_id != genre_id]
                for position, book_genre in enumerate(remaining):
                    book_genre.position = position
                book.book_genres = remaining
                book.updated_at = now

            self.session.delete(genre)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return True

    def refresh_book_counts(self, user_id: str, genre_ids: Optional[Iterable[str]] = None,
                            commit: bool = True) -> int:
        """Recompute book_count from the active books referencing each genre.

        Args:
            user_id: Owner of the genres
            genre_ids: Limit the refresh to these genres (default: all of the user's genres)
            commit: Commit the session afterwards

        Returns:
            Number of genres whose stored count was wrong
        """
        query = self.session.query(Genre).filter(Genre.user_id == user_id)
        if genre_ids is not None:
            query = query.filter(Genre.id.in_(list(genre_ids)))
        genres = query.all()
        if not genres:
            return 0

        counts = dict(
            self.session.query(BookGenre.genre_id, func.count(BookGenre.book_id))
            .join(Book, Book.id == BookGenre.book_id)
            .filter(
                Book.user_id == user_id,
                Book.deleted_at.is_(None),
                BookGenre.genre_id.in_([genre.id for genre in genres]),
            )
            .group_by(BookGenre.genre_id)
            .all()
        )
        updated = 0
        for genre in genres:
            count = counts.get(genre.id, 0)
            if genre.book_count != count:
                genre.book_count = count
                updated += 1
        if commit:
            self.session.commit()
        return updated

    def genre_lookup(self, user_id: str) -> Dict[str, Genre]:
        """Map genre id to Genre for rendering book genre chips."""
        return {genre.id: genre for genre in self.list_genres(user_id)}
