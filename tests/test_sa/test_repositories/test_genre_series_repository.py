# tests/test_sa/test_repositories/test_genre_series_repository.py

import pytest
from core.sa.models import BookGenre, Genre, Series

USER_ID = "user_1"
OTHER_USER_ID = "user_2"


def test_create_genre_defaults_colour(genre_repo):
    """Test a genre without a colour gets the default grey."""
    genre = genre_repo.create_genre(USER_ID, "Poetry")
    assert genre.color == "#6b7280"
    assert genre.book_count == 0


def test_genre_names_unique_per_user(genre_repo):
    """Test duplicate names are rejected ignoring case and spacing."""
    genre_repo.create_genre(USER_ID, "Science Fiction")
    with pytest.raises(ValueError, match="already exists"):
        genre_repo.create_genre(USER_ID, "science  fiction")
    # Another user may reuse the name
    assert genre_repo.create_genre(OTHER_USER_ID, "Science Fiction").user_id == OTHER_USER_ID


def test_list_genres_sorted_by_name(genre_repo):
    for name in ("thriller", "Adventure", "Mystery"):
        genre_repo.create_genre(USER_ID, name)
    assert [g.name for g in genre_repo.list_genres(USER_ID)] == ["Adventure", "Mystery", "thriller"]


def test_update_genre(genre_repo, sample_genre):
    updated = genre_repo.update_genre(USER_ID, sample_genre.id, {'name': "High Fantasy", 'color': "#000000"})
    assert updated.name == "High Fantasy"
    assert updated.color == "#000000"
    assert genre_repo.update_genre(USER_ID, "missing", {'name': "x"}) is None


def test_update_genre_name_clash(genre_repo, sample_genre):
    genre_repo.create_genre(USER_ID, "Horror")
    with pytest.raises(ValueError):
        genre_repo.update_genre(USER_ID, sample_genre.id, {'name': "horror"})


def test_book_count_tracks_active_books(genre_repo, sample_genre, make_book, book_repo):
    """Test book_count follows adds, edits and deletes."""
    first = make_book(genres=[sample_genre.id])
    make_book(genres=[sample_genre.id])
    assert sample_genre.book_count == 2

    book_repo.update_book(USER_ID, first.id, {'genres': []})
    assert sample_genre.book_count == 1


def test_delete_genre_cascades_to_books(genre_repo, sample_genre, make_book, db_session):
    """Test deleting a genre strips it from every book and renumbers the rest."""
    other = genre_repo.create_genre(USER_ID, "Epic")
    book = make_book(genres=[sample_genre.id, other.id])
    before = book.updated_at

    assert genre_repo.delete_genre(USER_ID, sample_genre.id)

    assert book.genres == [other.id]
    assert book.book_genres[0].position == 0
    assert book.updated_at >= before
    assert db_session.query(Genre).filter(Genre.id == sample_genre.id).first() is None
    assert db_session.query(BookGenre).filter(BookGenre.genre_id == sample_genre.id).count() == 0


def test_delete_missing_genre(genre_repo):
    assert not genre_repo.delete_genre(USER_ID, "missing")


def test_series_total_books_sanitised(series_repo):
    """Test non-positive totals are stored as unknown."""
    assert series_repo.create_series(USER_ID, "Zero", total_books=0).total_books is None
    assert series_repo.create_series(USER_ID, "Five", total_books=5).total_books == 5


def test_series_lookup_by_normalised_name(series_repo, sample_series):
    assert series_repo.get_by_name(USER_ID, "stormlight  archive").id == sample_series.id
    assert series_repo.get_by_name(OTHER_USER_ID, "The Stormlight Archive") is None


def test_series_counts_only_active_books(series_repo, sample_series, make_book, book_repo):
    make_book(series_id=sample_series.id)
    binned = make_book(series_id=sample_series.id)
    book_repo.soft_delete_book(USER_ID, binned.id)

    assert series_repo.list_with_counts(USER_ID) == [(sample_series, 1)]
    assert series_repo.count_active_books(USER_ID, sample_series.id) == 1


def test_update_series_expected_books(series_repo, sample_series):
    expected = [{'title': "Wind and Truth", 'isbn': None, 'position': 5, 'source': 'manual'}]
    updated = series_repo.update_series(USER_ID, sample_series.id, {'expected_books': expected, 'total_books': -1})
    assert updated.expected_books == expected
    assert updated.total_books is None


def test_delete_series_detaches_books(series_repo, sample_series, make_book, book_repo, db_session):
    """Test books (active and binned) leave the series when it is deleted."""
    active = make_book(series_id=sample_series.id, series_position=1)
    binned = make_book(series_id=sample_series.id, series_position=2)
    book_repo.soft_delete_book(USER_ID, binned.id)

    assert series_repo.delete_series(USER_ID, sample_series.id)

    assert db_session.query(Series).count() == 0
    for book in (book_repo.get_book(USER_ID, active.id), book_repo.get_book(USER_ID, binned.id)):
        assert book.series_id is None
        assert book.series_position is None
    assert not series_repo.delete_series(USER_ID, sample_series.id)


def test_wishlist_priority_order(wishlist_repo):
    """Test the wishlist lists high priority first."""
    wishlist_repo.add_item(USER_ID, {'title': "Low", 'author': "A", 'priority': "low"})
    wishlist_repo.add_item(USER_ID, {'title': "None", 'author': "A"})
    wishlist_repo.add_item(USER_ID, {'title': "High", 'author': "A", 'priority': "high"})
    assert [i.title for i in wishlist_repo.list_wishlist(USER_ID)] == ["High", "Low", "None"]
    assert wishlist_repo.count_items(USER_ID) == 3


def test_wishlist_update_and_delete(wishlist_repo):
    item = wishlist_repo.add_item(USER_ID, {'title': "Circe", 'author': "Madeline Miller"})
    updated = wishlist_repo.update_item(USER_ID, item.id, {'notes': "Birthday?", 'priority': "medium"})
    assert updated.notes == "Birthday?"
    assert updated.priority == "medium"

    assert not wishlist_repo.delete_item(OTHER_USER_ID, item.id)
    assert wishlist_repo.delete_item(USER_ID, item.id)
    assert wishlist_repo.get_item(USER_ID, item.id) is None
