# tests/test_services/test_lookup_service.py
from unittest.mock import MagicMock, patch

import pytest
import requests

from core.services import lookup_service
from core.services.lookup_service import (
    GOOGLE_BOOKS_URL, OPEN_LIBRARY_BOOKS_URL, lookup_isbn, parse_genres, parse_series, search_books,
)
from core.utils.cancellation import CancellationToken

ISBN = "9780765326355"

GOOGLE_VOLUME = {
    "items": [{
        "id": "vol1",
        "volumeInfo": {
            "title": "The Way of Kings ",
            "authors": ["Brandon Sanderson"],
            "publisher": "Tor Books",
            "publishedDate": "2010-08-31",
            "pageCount": 1007,
            "categories": ["Fiction / Fantasy / Epic"],
            "imageLinks": {"thumbnail": "http://books.google.com/cover.jpg"},
            "industryIdentifiers": [{"type": "ISBN_13", "identifier": ISBN}],
        },
    }],
    "totalItems": 25,
}

OPEN_LIBRARY_DATA = {
    f"ISBN:{ISBN}": {
        "title": "The Way of Kings",
        "authors": [{"name": "Brandon Sanderson"}],
        "publishers": [{"name": "Tor"}],
        "subjects": [{"name": "Fantasy"}, {"name": "Epic"}],
        "cover": {"large": "https://covers.openlibrary.org/l.jpg"},
        "number_of_pages": 1001,
    }
}

EDITION = {"physical_format": "HARDCOVER", "series": ["The Stormlight Archive #1"]}


def response(payload=None, error=None):
    mock = MagicMock()
    if error:
        mock.raise_for_status.side_effect = error
    mock.json.return_value = payload
    return mock


def fake_get(google=None, open_library=None, edition=None):
    """requests.get stand-in routing on the URL"""
    def _get(url, params=None, timeout=None):
        if url == GOOGLE_BOOKS_URL:
            return google if google is not None else response({})
        if url == OPEN_LIBRARY_BOOKS_URL:
            return open_library if open_library is not None else response({})
        return edition if edition is not None else response(error=requests.HTTPError("404"))
    return _get


def test_parse_genres_takes_most_specific_segment():
    assert parse_genres(["Fiction / Fantasy / Epic", "Fiction / Fantasy / Epic", "Dragons"]) == ["Epic", "Dragons"]


@pytest.mark.parametrize("value, expected", [
    ("Harry Potter #3", ("Harry Potter", 3)),
    (["Harry Potter (Book 3)"], ("Harry Potter", 3)),
    ("Discworld", ("Discworld", None)),
    ([], None),
])
def test_parse_series(value, expected):
    assert parse_series(value) == expected


@patch("core.services.lookup_service.requests.get")
def test_lookup_merges_sources(mock_get):
    mock_get.side_effect = fake_get(
        google=response(GOOGLE_VOLUME),
        open_library=response(OPEN_LIBRARY_DATA),
        edition=response(EDITION),
    )
    result = lookup_isbn(ISBN)

    assert result.title == "The Way of Kings"
    assert result.source == "googleBooks"
    assert result.cover_image_url == "https://books.google.com/cover.jpg"
    assert result.publisher == "Tor Books"
    assert result.page_count == 1007
    assert result.genres == ["Epic", "Fantasy"]
    assert result.covers == {
        "googleBooks": "https://books.google.com/cover.jpg",
        "openLibrary": "https://covers.openlibrary.org/l.jpg",
    }
    assert result.physical_format == "Hardcover"
    assert (result.series_name, result.series_position) == ("The Stormlight Archive", 1)


@patch("core.services.lookup_service.requests.get")
def test_lookup_falls_back_to_open_library(mock_get):
    mock_get.side_effect = fake_get(
        google=response(error=requests.ConnectionError("offline")),
        open_library=response(OPEN_LIBRARY_DATA),
    )
    result = lookup_isbn(ISBN)
    assert result.source == "openLibrary"
    assert result.publisher == "Tor"
    assert result.page_count == 1001


@patch("core.services.lookup_service.requests.get")
def test_lookup_with_no_results(mock_get):
    mock_get.side_effect = fake_get()
    assert lookup_isbn(ISBN) is None


@patch("core.services.lookup_service.requests.get")
def test_lookup_never_raises_on_network_errors(mock_get):
    mock_get.side_effect = requests.ConnectionError("offline")
    assert lookup_isbn(ISBN) is None


def test_lookup_without_isbn():
    assert lookup_isbn("") is None


@patch("core.services.lookup_service.requests.get")
def test_cancelled_lookup_returns_nothing(mock_get):
    mock_get.side_effect = fake_get(google=response(GOOGLE_VOLUME))
    token = CancellationToken()
    token.cancel()
    assert lookup_isbn(ISBN, token=token) is None


@patch("core.services.lookup_service.requests.get")
def test_search_books_paging(mock_get):
    mock_get.return_value = response(GOOGLE_VOLUME)
    results = search_books("sanderson", start_index=10, max_results=10)

    assert results.total_items == 25
    assert results.has_more
    assert results.books[0].id == "vol1"
    assert results.books[0].isbn == ISBN
    mock_get.assert_called_once_with(
        GOOGLE_BOOKS_URL,
        params={"q": "sanderson", "startIndex": 10, "maxResults": 10},
        timeout=lookup_service.REQUEST_TIMEOUT,
    )

    assert not search_books("sanderson", start_index=20, max_results=10).has_more


@patch("core.services.lookup_service.requests.get")
def test_search_failure_gives_empty_page(mock_get):
    mock_get.side_effect = requests.Timeout("slow")
    results = search_books("anything")
    assert results.books == []
    assert not results.has_more
