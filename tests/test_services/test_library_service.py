# tests/test_services/test_library_service.py
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from core.sa.models import Series
from core.services.duplicate_checker import check_for_duplicate
from core.services.library_service import LibraryService


@pytest.fixture
def library(db_session, user_id):
    return LibraryService(db_session, user_id)


def db_error():
    return OperationalError("DELETE FROM series", {}, Exception("database is locked"))


def test_delete_missing_book(library):
    result = library.delete_book("missing")
    assert not result.primary_ok
    assert result.message == "Book not found"


def test_delete_book_keeps_series_by_default(library, sample_book, db_session):
    result = library.delete_book(sample_book.id)
    assert result.primary_ok
    assert result.secondary_ok is None
    assert result.message == "Book moved to bin"
    assert db_session.query(Series).count() == 1


def test_delete_last_book_removes_series(library, sample_book, sample_series, db_session):
    result = library.delete_book(sample_book.id, delete_empty_series=True)
    assert result.primary_ok and result.secondary_ok
    assert result.message == "Book moved to bin and series deleted"
    assert db_session.query(Series).count() == 0
    assert sample_book.series_id is None


def test_series_with_other_books_is_kept(library, sample_book, sample_series, make_book, db_session):
    make_book(title="Words of Radiance", series_id=sample_series.id, series_position=2)
    result = library.delete_book(sample_book.id, delete_empty_series=True)
    assert result.primary_ok
    assert result.secondary_ok is None
    assert db_session.query(Series).count() == 1


def test_series_deletion_failure_is_partial(library, sample_book, book_repo, user_id):
    """Test the book stays binned when the follow-up series delete fails."""
    with patch("core.services.library_service.SeriesRepository.delete_series", side_effect=db_error()):
        result = library.delete_book(sample_book.id, delete_empty_series=True)

    assert result.primary_ok
    assert result.secondary_ok is False
    assert result.partial_failure
    assert result.message == "Book moved, series deletion failed"
    assert "database is locked" in result.secondary_error
    assert book_repo.get_book(user_id, sample_book.id).deleted_at is not None


def test_bin_failure_is_reported(library, sample_book):
    with patch("core.services.library_service.BookRepository.soft_delete_book", side_effect=db_error()):
        result = library.delete_book(sample_book.id)
    assert not result.primary_ok
    assert result.message == "Failed to delete book"


def test_mark_purchased_moves_item_to_library(library, wishlist_repo, book_repo, user_id):
    item = wishlist_repo.add_item(user_id, {
        'title': "Circe", 'author': "Madeline Miller", 'isbn': "9780316556347",
        'covers': {'googleBooks': "https://example.com/c.jpg"}, 'page_count': 393, 'priority': "high",
    })
    result = library.mark_purchased(item.id)

    assert result.primary_ok and result.secondary_ok
    assert result.message == "Added to library"
    book = result.result
    assert (book.title, book.isbn, book.page_count) == ("Circe", "9780316556347", 393)
    assert book.reads == []
    assert wishlist_repo.get_item(user_id, item.id) is None
    assert [b.id for b in book_repo.list_books(user_id)] == [book.id]


def test_mark_purchased_partial_failure(library, wishlist_repo, user_id):
    item = wishlist_repo.add_item(user_id, {'title': "Circe", 'author': "Madeline Miller"})
    with patch("core.services.library_service.WishlistRepository.delete_item", side_effect=db_error()):
        result = library.mark_purchased(item.id)

    assert result.primary_ok
    assert result.secondary_ok is False
    assert result.message == "Book added, wishlist removal failed"


def test_mark_purchased_missing_item(library):
    assert library.mark_purchased("missing").message == "Wishlist item not found"


def test_duplicate_by_isbn(db_session, user_id, sample_book):
    result = check_for_duplicate(db_session, user_id, "978-0-7653-2635-5", "Other", "Other")
    assert result.is_duplicate
    assert result.match_type == "isbn"
    assert result.existing_book.id == sample_book.id


def test_duplicate_by_title_and_author(db_session, user_id, sample_book):
    result = check_for_duplicate(db_session, user_id, None, "  the way of KINGS ", "brandon  sanderson")
    assert result.is_duplicate
    assert result.match_type == "title-author"


def test_duplicate_author_ignores_punctuation(db_session, user_id, make_book):
    make_book(title="The Hobbit", author="J.R.R. Tolkien")
    result = check_for_duplicate(db_session, user_id, None, "The Hobbit", "JRR Tolkien")
    assert result.is_duplicate
    assert result.match_type == "title-author"


def test_binned_books_are_not_duplicates(db_session, user_id, sample_book, book_repo):
    book_repo.soft_delete_book(user_id, sample_book.id)
    result = check_for_duplicate(db_session, user_id, "9780765326355", "The Way of Kings", "Brandon Sanderson")
    assert not result.is_duplicate
