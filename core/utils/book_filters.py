# core/utils/book_filters.py
"""
Filtering and sorting of in-memory book and wishlist collections.

The book list page loads a user's active books once and then narrows and
orders them locally, so these helpers work on plain sequences of ORM objects
(or mappings with the same field names) and never touch the database.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence

from core.utils.dates import timestamp_ms, to_datetime
from core.utils.reading import get_book_status, read_value
from core.utils.text import normalize_text

SORT_FIELDS = (
    "title",
    "author",
    "rating",
    "created_at",
    "updated_at",
    "page_count",
    "published_date",
    "series_position",
)

WISHLIST_SORT_MODES = ("priority", "created_at-desc", "created_at-asc", "title-asc")

PRIORITY_RANK = {"high": 0, "medium": 1, "low": 2}


@dataclass
class BookFilters:
    search: Optional[str] = None
    statuses: List[str] = field(default_factory=list)
    genre_ids: List[str] = field(default_factory=list)
    series_ids: List[str] = field(default_factory=list)
    min_rating: Optional[float] = None
    author: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not (self.search or self.statuses or self.genre_ids or self.series_ids
                    or self.min_rating or self.author)


def _status_value(book: Any) -> str:
    return get_book_status(book).value


def matches_filters(book: Any, filters: BookFilters) -> bool:
    """Whether one book passes every active filter.

    Multi-select filters (status, genre, series) match when the book has any
    of the selected values.
    """
    title = read_value(book, "title") or ""
    author = read_value(book, "author") or ""

    if filters.search:
        needle = normalize_text(filters.search)
        if needle not in normalize_text(title) and needle not in normalize_text(author):
            return False

    if filters.statuses and _status_value(book) not in filters.statuses:
        return False

    if filters.genre_ids:
        book_genres = read_value(book, "genres") or []
        if not any(genre_id in book_genres for genre_id in filters.genre_ids):
            return False

    if filters.series_ids:
        series_id = read_value(book, "series_id")
        if not series_id or series_id not in filters.series_ids:
            return False

    if filters.min_rating:
        rating = read_value(book, "rating")
        if not rating or rating < filters.min_rating:
            return False

    if filters.author and author.lower() != filters.author.lower():
        return False

    return True


def filter_books(books: Sequence[Any], filters: BookFilters) -> List[Any]:
    return [book for book in books if matches_filters(book, filters)]


def _sort_key(sort_by: str) -> Callable[[Any], Any]:
    if sort_by in ("title", "author", "published_date"):
        return lambda book: (read_value(book, sort_by) or "").casefold()
    if sort_by in ("created_at", "updated_at"):
        return lambda book: to_datetime(read_value(book, sort_by))
    return lambda book: read_value(book, sort_by)


def sort_books(books: Sequence[Any], sort_by: str, direction: str = "asc") -> List[Any]:
    """Stable sort of books by one field.

    Books missing the sort value are placed after all others in both
    directions, keeping their original relative order.
    """
    if sort_by not in SORT_FIELDS:
        raise ValueError(f"Unsupported sort field: {sort_by}")
    if direction not in ("asc", "desc"):
        raise ValueError(f"Unsupported sort direction: {direction}")

    key = _sort_key(sort_by)
    present, missing = [], []
    for book in books:
        value = key(book)
        (missing if value is None or value == "" else present).append(book)

    present.sort(key=key, reverse=direction == "desc")
    return present + missing


def _created_ms(item: Any) -> int:
    return timestamp_ms(read_value(item, "created_at"))


def sort_wishlist(items: Sequence[Any], mode: str = "priority") -> List[Any]:
    """Order wishlist items for display.

    `priority` puts high before medium before low before unset, with ties
    broken by most recently added first.
    """
    if mode == "priority":
        return sorted(
            items,
            key=lambda item: (PRIORITY_RANK.get(read_value(item, "priority") or "", 3), -_created_ms(item)),
        )
    if mode == "created_at-desc":
        return sorted(items, key=_created_ms, reverse=True)
    if mode == "created_at-asc":
        return sorted(items, key=_created_ms)
    if mode == "title-asc":
        return sorted(items, key=lambda item: (read_value(item, "title") or "").casefold())
    raise ValueError(f"Unsupported wishlist sort: {mode}")
