# tests/test_services/test_maintenance_service.py
from unittest.mock import MagicMock

import pytest

from core.services.maintenance_service import MaintenanceService, RecountResult
from core.utils.image import ImageStore


@pytest.fixture
def image_store(tmp_path):
    return ImageStore(str(tmp_path / "media"))


@pytest.fixture
def maintenance(db_session, user_id, image_store):
    return MaintenanceService(db_session, user_id, image_store=image_store)


def write_file(store, storage_path, size=10):
    path = store.base_dir / storage_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)
    return path


def test_recount_fixes_drifted_genres(maintenance, sample_book, sample_genre, genre_repo, user_id, db_session):
    other = genre_repo.create_genre(user_id, "Horror", "#ef4444")
    sample_genre.book_count = 0
    other.book_count = 3
    db_session.commit()

    result = maintenance.recount_genres()
    assert (result.updated, result.books_scanned) == (2, 1)
    assert result.message == "Updated 2 genre(s) after scanning 1 books."
    assert (sample_genre.book_count, other.book_count) == (1, 0)


def test_recount_when_counts_are_correct(maintenance, sample_book):
    result = maintenance.recount_genres()
    assert result.updated == 0
    assert result.message == "All genre counts are correct."


def test_recount_message():
    assert RecountResult(updated=1, books_scanned=12).message == "Updated 1 genre(s) after scanning 12 books."


def test_orphans_exclude_referenced_and_binned_images(maintenance, image_store, make_book, book_repo, user_id):
    active = make_book()
    binned = make_book(title="Binned")
    for book, name in ((active, "kept"), (binned, "binned")):
        path = f"users/{user_id}/books/{book.id}/{name}.jpg"
        write_file(image_store, path)
        book_repo.add_image(user_id, book.id, {'id': name, 'url': f'/media/{path}', 'storage_path': path})
    book_repo.soft_delete_book(user_id, binned.id)

    write_file(image_store, f"users/{user_id}/books/gone/a.jpg", size=100)
    write_file(image_store, f"users/{user_id}/books/gone/b.jpg", size=50)
    write_file(image_store, "users/user_2/books/x/theirs.jpg")

    report = maintenance.find_orphaned_images()
    assert [f.storage_path for f in report.files] == [
        f"users/{user_id}/books/gone/a.jpg", f"users/{user_id}/books/gone/b.jpg",
    ]
    assert (report.count, report.total_size) == (2, 150)


def test_delete_orphans(maintenance, image_store, user_id):
    orphan = write_file(image_store, f"users/{user_id}/books/gone/a.jpg")
    theirs = write_file(image_store, "users/user_2/books/x/theirs.jpg")

    assert maintenance.delete_orphaned_images() == 1
    assert not orphan.exists()
    assert theirs.exists()
    assert maintenance.find_orphaned_images().count == 0


def test_delete_orphans_keeps_going_after_a_failure(db_session, user_id):
    store = MagicMock(spec=ImageStore)
    store.list_files.return_value = [(f"users/{user_id}/a.jpg", 1), (f"users/{user_id}/b.jpg", 1)]
    store.delete.side_effect = [OSError("busy"), True]

    assert MaintenanceService(db_session, user_id, image_store=store).delete_orphaned_images() == 1
    assert store.delete.call_count == 2


def test_no_media_directory_means_no_orphans(maintenance):
    assert maintenance.find_orphaned_images().files == []
