# tests/test_services/test_bin_service.py
from datetime import datetime, timedelta, UTC
from unittest.mock import MagicMock

import pytest

from core.services.bin_service import BinService, days_remaining
from core.utils.image import ImageStore

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)


@pytest.mark.parametrize("age, expected", [
    (timedelta(0), 30),
    (timedelta(hours=1), 30),
    (timedelta(days=1), 29),
    (timedelta(days=29, hours=23), 1),
    (timedelta(days=30), 0),
    (timedelta(days=45), 0),
])
def test_days_remaining(age, expected):
    assert days_remaining(NOW - age, NOW) == expected


def test_days_remaining_without_deleted_at():
    assert days_remaining(None, NOW) == 30


def test_days_remaining_custom_retention():
    assert days_remaining(NOW - timedelta(days=3), NOW, retention_days=7) == 4


@pytest.fixture
def image_store():
    return MagicMock(spec=ImageStore)


@pytest.fixture
def bin_service(db_session, user_id, image_store):
    return BinService(db_session, user_id, image_store=image_store)


def test_move_to_bin_and_restore(bin_service, make_book):
    book = make_book()
    assert bin_service.move_to_bin(book.id, now=NOW).deleted_at == NOW
    assert bin_service.move_to_bin(book.id) is None

    [entry] = bin_service.list_bin(now=NOW + timedelta(days=2))
    assert entry.book.id == book.id
    assert entry.days_remaining == 28

    assert bin_service.restore(book.id).deleted_at is None
    assert bin_service.restore(book.id) is None


def test_purge_only_binned_books(bin_service, make_book, book_repo, user_id):
    book = make_book()
    assert not bin_service.purge(book.id)

    bin_service.move_to_bin(book.id)
    assert bin_service.purge(book.id)
    assert book_repo.get_book(user_id, book.id) is None


def test_purge_removes_image_files(bin_service, make_book, book_repo, user_id, image_store):
    book = make_book()
    book_repo.add_image(user_id, book.id, {'id': 'i1', 'url': '/media/a.jpg', 'storage_path': 'users/u/a.jpg'})
    bin_service.move_to_bin(book.id)

    bin_service.purge(book.id)
    image_store.delete.assert_called_once_with(user_id, 'users/u/a.jpg')


def test_purge_survives_image_removal_failure(bin_service, make_book, book_repo, user_id, image_store):
    book = make_book()
    book_repo.add_image(user_id, book.id, {'id': 'i1', 'url': '/media/a.jpg', 'storage_path': 'a.jpg'})
    bin_service.move_to_bin(book.id)
    image_store.delete.side_effect = OSError("disk")

    assert bin_service.purge(book.id)
    assert book_repo.get_book(user_id, book.id) is None


def test_empty_bin(bin_service, make_book):
    books = [make_book(title=f"Book {i}") for i in range(3)]
    for book in books[:2]:
        bin_service.move_to_bin(book.id)

    assert bin_service.empty_bin() == 2
    assert bin_service.list_bin() == []


def test_purge_expired(bin_service, make_book, book_repo, user_id):
    old = make_book(title="Old")
    recent = make_book(title="Recent")
    bin_service.move_to_bin(old.id, now=NOW - timedelta(days=31))
    bin_service.move_to_bin(recent.id, now=NOW - timedelta(days=5))

    assert [b.title for b in bin_service.expired(now=NOW)] == ["Old"]
    assert bin_service.purge_expired(now=NOW) == 1
    assert book_repo.get_book(user_id, old.id) is None
    assert book_repo.get_book(user_id, recent.id) is not None


def test_image_store_refuses_paths_outside_media(tmp_path):
    store = ImageStore(str(tmp_path / "media"))
    with pytest.raises(ValueError):
        store.delete("u", "../outside.jpg")
    assert not store.delete("u", "users/u/missing.jpg")


def test_image_store_refuses_other_users_files(tmp_path):
    store = ImageStore(str(tmp_path / "media"))
    victim = tmp_path / "media" / "users" / "v" / "books" / "b1" / "a.jpg"
    victim.parent.mkdir(parents=True)
    victim.write_bytes(b"jpeg")

    for path in ("users/v/books/b1/a.jpg", "users/u/../v/books/b1/a.jpg"):
        with pytest.raises(ValueError, match="does not belong to user u"):
            store.delete("u", path)
    assert victim.exists()


def test_purge_leaves_other_users_files_alone(db_session, make_book, book_repo, user_id, tmp_path):
    store = ImageStore(str(tmp_path / "media"))
    victim = tmp_path / "media" / "users" / "user_2" / "books" / "b1" / "a.jpg"
    victim.parent.mkdir(parents=True)
    victim.write_bytes(b"jpeg")

    book = make_book()
    book_repo.add_image(user_id, book.id, {
        'id': 'i1', 'url': '/media/x.jpg', 'storage_path': 'users/user_2/books/b1/a.jpg',
    })
    service = BinService(db_session, user_id, image_store=store)
    service.move_to_bin(book.id)

    assert service.purge(book.id)
    assert victim.exists()
