# tests/test_cli/test_commands.py
from datetime import timedelta

import pytest
from click.testing import CliRunner

from cli.main import cli
from core.sa.database import Database
from core.sa.models import WidgetSettings, utcnow
from core.sa.repositories import BookRepository
from core.utils.dates import format_date, format_date_for_input
from core.utils.image import ImageStore


@pytest.fixture
def run(database, database_url):
    runner = CliRunner()

    def _run(*args, **kwargs):
        return runner.invoke(cli, ["--database-url", database_url, *args], **kwargs)
    return _run


@pytest.fixture
def binned(book_repo, make_book, user_id):
    """One expired and one recent book in the bin"""
    old = make_book(title="Old News")
    recent = make_book(title="Second Thoughts")
    book_repo.soft_delete_book(user_id, old.id, deleted_at=utcnow() - timedelta(days=40))
    book_repo.soft_delete_book(user_id, recent.id, deleted_at=utcnow() - timedelta(days=1))
    return old, recent


def test_db_init(tmp_path):
    url = f"sqlite:///{tmp_path / 'fresh.db'}"
    result = CliRunner().invoke(cli, ["--database-url", url, "db", "init"])
    assert result.exit_code == 0
    assert "Database ready at" in result.output
    assert (tmp_path / "fresh.db").exists()


def test_db_drop_needs_confirmation(run, sample_book):
    result = run("db", "drop", input="n\n")
    assert result.exit_code == 1
    assert "Aborted" in result.output


def test_bin_list(run, binned, user_id):
    result = run("bin", "list", "--user", user_id)
    assert result.exit_code == 0
    assert "Second Thoughts by Test Author (29 days left)" in result.output
    assert "Old News by Test Author (0 days left)" in result.output
    assert f"deleted {format_date(binned[1].deleted_at)}" in result.output


def test_bin_list_empty(run, user_id):
    result = run("bin", "list", "--user", user_id)
    assert "The bin is empty" in result.output


def test_purge_expired_dry_run(run, binned, book_repo, user_id):
    old, _ = binned
    result = run("bin", "purge-expired", "--dry-run")
    assert result.exit_code == 0
    assert f"Would purge: Old News (user_1, binned {format_date_for_input(old.deleted_at)})" in result.output
    assert "Expired books: 1" in result.output
    assert book_repo.get_book(user_id, old.id) is not None


def test_purge_expired(run, binned, book_repo, user_id):
    old, recent = binned
    result = run("bin", "purge-expired", "--user", user_id)
    assert result.exit_code == 0
    assert "Purged books: 1" in result.output
    assert book_repo.get_book(user_id, old.id) is None
    assert book_repo.get_book(user_id, recent.id) is not None


def test_empty_bin(run, binned, user_id, database_url):
    result = run("bin", "empty", "--user", user_id, "--yes")
    assert result.exit_code == 0
    assert "Permanently deleted 2 books" in result.output

    session = Database(database_url).get_session()
    try:
        assert BookRepository(session).list_bin(user_id) == []
    finally:
        session.close()


def test_health(run, sample_book, make_book, user_id):
    make_book(title="Bare Bones")
    result = run("health", "--user", user_id, "--limit", "5")
    assert result.exit_code == 0
    assert "Books: 2" in result.output
    assert "Bare Bones - missing" in result.output
    assert "The Way of Kings -" not in result.output


def test_widgets_reset(run, user_id, db_session):
    result = run("widgets", "reset", "--user", user_id)
    assert result.exit_code == 0
    assert f"Reset dashboard for {user_id} (7 widgets)" in result.output
    assert db_session.get(WidgetSettings, user_id) is not None


def test_maintenance_recount_genres(run, sample_book, sample_genre, user_id, db_session):
    sample_genre.book_count = 4
    db_session.commit()

    result = run("maintenance", "recount-genres", "--user", user_id)
    assert result.exit_code == 0
    assert "Updated 1 genre(s) after scanning 1 books." in result.output

    result = run("maintenance", "recount-genres", "--user", user_id)
    assert "All genre counts are correct." in result.output


def test_maintenance_orphans(run, user_id, test_settings):
    store = ImageStore(test_settings.media_dir)
    orphan = store.base_dir / "users" / user_id / "books" / "gone" / "stray.jpg"
    orphan.parent.mkdir(parents=True)
    orphan.write_bytes(b"x" * 2048)

    result = run("maintenance", "orphans", "--user", user_id)
    assert result.exit_code == 0
    assert f"users/{user_id}/books/gone/stray.jpg (2.0 KB)" in result.output
    assert "Orphaned images: 1" in result.output
    assert orphan.exists()

    result = run("maintenance", "orphans", "--user", user_id, "--delete")
    assert "Deleted 1 orphaned image(s)" in result.output
    assert not orphan.exists()


def test_maintenance_orphans_none(run, user_id):
    result = run("maintenance", "orphans", "--user", user_id)
    assert result.exit_code == 0
    assert "No orphaned images found" in result.output
