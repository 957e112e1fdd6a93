# core/services/duplicate_checker.py
from dataclasses import dataclass
from typing import Literal, Optional

from sqlalchemy.orm import Session

from core.sa.models import Book
from core.sa.repositories import BookRepository
from core.utils.isbn import clean_isbn
from core.utils.text import normalize_author, normalize_key

# Max books compared by title and author
DUPLICATE_CHECK_LIMIT = 200


@dataclass
class DuplicateCheckResult:
    is_duplicate: bool
    match_type: Optional[Literal["isbn", "title-author"]] = None
    existing_book: Optional[Book] = None


def check_for_duplicate(session: Session, user_id: str, isbn: Optional[str],
                        title: str, author: str) -> DuplicateCheckResult:
    """Find an active book that looks like the one being added.

    An ISBN match wins; otherwise titles are compared after lower-casing and
    collapsing whitespace, authors also ignoring punctuation (so "J.R.R." and
    "JRR" match), among the most recent books only.
    """
    books = BookRepository(session)

    cleaned = clean_isbn(isbn)
    if cleaned:
        existing = books.find_by_isbn(user_id, cleaned.upper())
        if existing:
            return DuplicateCheckResult(True, "isbn", existing)

    title_key = normalize_key(title or "")
    author_key = normalize_author(author or "")
    for book in books.list_for_duplicate_check(user_id, DUPLICATE_CHECK_LIMIT):
        if normalize_key(book.title or "") == title_key and normalize_author(book.author or "") == author_key:
            return DuplicateCheckResult(True, "title-author", book)

    return DuplicateCheckResult(False)
