# tests/conftest.py
import pytest
from datetime import datetime, timedelta, UTC
from fastapi.testclient import TestClient

from core.config import get_settings
from core.sa.database import Database, get_db
from core.sa.repositories import (
    BookRepository, GenreRepository, SeriesRepository, WishlistRepository,
)

USER_ID = "user_1"
OTHER_USER_ID = "user_2"


@pytest.fixture(autouse=True)
def test_settings(tmp_path, monkeypatch):
    """Point media, preferences and secrets at per-test values"""
    monkeypatch.setenv("MEDIA_DIR", str(tmp_path / "media"))
    monkeypatch.setenv("PREFERENCES_PATH", str(tmp_path / "preferences.json"))
    monkeypatch.setenv("SESSION_SECRET", "test-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'default.db'}")
    monkeypatch.delenv("RESEND_API_KEY", raising=False)
    monkeypatch.delenv("APP_ENV", raising=False)
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'test_books.db'}"


@pytest.fixture
def database(database_url):
    """Create a fresh test database"""
    db = Database(database_url)
    db.init_db()
    yield db
    db.engine.dispose()


@pytest.fixture
def db_session(database):
    """Create a new database session for a test"""
    session = database.get_session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user_id():
    return USER_ID


@pytest.fixture
def book_repo(db_session):
    return BookRepository(db_session)


@pytest.fixture
def genre_repo(db_session):
    return GenreRepository(db_session)


@pytest.fixture
def series_repo(db_session):
    return SeriesRepository(db_session)


@pytest.fixture
def wishlist_repo(db_session):
    return WishlistRepository(db_session)


@pytest.fixture
def sample_genre(genre_repo):
    return genre_repo.create_genre(USER_ID, "Fantasy", "#3b82f6")


@pytest.fixture
def sample_series(series_repo):
    return series_repo.create_series(USER_ID, "The Stormlight Archive", total_books=10)


@pytest.fixture
def make_book(book_repo):
    """Factory for books owned by the test user"""
    def _make_book(title="Test Book", author="Test Author", user_id=USER_ID, **fields):
        data = {"title": title, "author": author, "reads": [], "genres": []}
        data.update(fields)
        return book_repo.add_book(user_id, data)
    return _make_book


@pytest.fixture
def sample_book(make_book, sample_genre, sample_series):
    """A fully described book in a genre and a series"""
    return make_book(
        title="The Way of Kings",
        author="Brandon Sanderson",
        isbn="9780765326355",
        cover_image_url="https://example.com/wok.jpg",
        publisher="Tor Books",
        published_date="2010-08-31",
        physical_format="Hardcover",
        page_count=1007,
        rating=5,
        genres=[sample_genre.id],
        series_id=sample_series.id,
        series_position=1,
        notes="Re-read before book five",
        reads=[{
            "started_at": datetime(2024, 1, 1, tzinfo=UTC),
            "finished_at": datetime(2024, 2, 1, tzinfo=UTC),
        }],
    )


@pytest.fixture
def now():
    return datetime(2024, 6, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def days_ago(now):
    def _days_ago(days: float) -> datetime:
        return now - timedelta(days=days)
    return _days_ago


@pytest.fixture
def client(db_session):
    """API client bound to the test session and signed in as the test user"""
    from api.deps import get_current_user_id
    from api.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user_id] = lambda: USER_ID
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(db_session):
    """API client with no session override"""
    from api.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
