# core/services/lookup_service.py
"""
Book metadata lookup against Google Books with Open Library as a supplement.

Network and decoding failures are logged and reported as "no result"; they
never propagate to the caller.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

import requests

from core.utils.cancellation import CancellationToken

logger = logging.getLogger(__name__)

GOOGLE_BOOKS_URL = "https://www.googleapis.com/books/v1/volumes"
OPEN_LIBRARY_BOOKS_URL = "https://openlibrary.org/api/books"
OPEN_LIBRARY_EDITION_URL = "https://openlibrary.org/isbn/{isbn}.json"
REQUEST_TIMEOUT = 10

_SERIES_POSITION = re.compile(r"[#(]?\s*(?:book\s*)?(\d+)\s*[)]?$", re.IGNORECASE)


@dataclass
class BookMetadata:
    title: str = ""
    author: str = ""
    cover_image_url: str = ""
    publisher: str = ""
    published_date: str = ""
    physical_format: str = ""
    page_count: Optional[int] = None
    genres: List[str] = field(default_factory=list)
    covers: Dict[str, str] = field(default_factory=dict)
    series_name: Optional[str] = None
    series_position: Optional[int] = None
    isbn: Optional[str] = None
    id: Optional[str] = None
    source: Optional[str] = None


@dataclass
class SearchResults:
    books: List[BookMetadata]
    has_more: bool
    total_items: int


def parse_genres(categories: Iterable[str]) -> List[str]:
    """Most specific segment of each hierarchical category, de-duplicated in order.

    "Fiction / Fantasy / Epic" contributes "Epic".
    """
    genres: List[str] = []
    for category in categories or []:
        parts = [part.strip() for part in category.split(" / ")]
        if parts and parts[-1] and parts[-1] not in genres:
            genres.append(parts[-1])
    return genres


def parse_series(series: Any) -> Optional[Tuple[str, Optional[int]]]:
    """Split "Harry Potter #3" or "Harry Potter (Book 3)" into name and position"""
    if not series:
        return None
    text = series[0] if isinstance(series, list) else series
    if not text:
        return None
    match = _SERIES_POSITION.search(text)
    position = int(match.group(1)) if match else None
    name = _SERIES_POSITION.sub("", text).strip()
    return name, position


def _title_case(value: str) -> str:
    return " ".join(word[:1].upper() + word[1:].lower() for word in value.split(" "))


def _google_cover(volume: Dict[str, Any]) -> str:
    links = volume.get("imageLinks") or {}
    cover = links.get("large") or links.get("medium") or links.get("small") or links.get("thumbnail") or ""
    return cover.replace("http:", "https:", 1)


def _get_json(url: str, params: Optional[Dict[str, Any]] = None) -> Any:
    response = requests.get(url, params=params, timeout=REQUEST_TIMEOUT)
    response.raise_for_status()
    return response.json()


def _cancelled(token: Optional[CancellationToken]) -> bool:
    return token is not None and token.cancelled


def _from_google(isbn: str) -> Optional[BookMetadata]:
    try:
        data = _get_json(GOOGLE_BOOKS_URL, {"q": f"isbn:{isbn}"})
    except (requests.RequestException, ValueError) as e:
        logger.error(f"Google Books lookup failed for {isbn}: {e}")
        return None

    items = data.get("items") or []
    if not items:
        return None
    volume = items[0].get("volumeInfo") or {}
    cover = _google_cover(volume)
    result = BookMetadata(
        title=(volume.get("title") or "").strip(),
        author=", ".join(volume.get("authors") or []).strip(),
        cover_image_url=cover,
        publisher=(volume.get("publisher") or "").strip(),
        published_date=(volume.get("publishedDate") or "").strip(),
        page_count=volume.get("pageCount") or None,
        genres=parse_genres(volume.get("categories") or []),
        isbn=isbn,
        source="googleBooks",
    )
    if cover:
        result.covers["googleBooks"] = cover
    return result


def _supplement_from_open_library(isbn: str, result: Optional[BookMetadata]) -> Optional[BookMetadata]:
    try:
        data = _get_json(OPEN_LIBRARY_BOOKS_URL, {"bibkeys": f"ISBN:{isbn}", "format": "json", "jscmd": "data"})
    except (requests.RequestException, ValueError) as e:
        if result is None:
            logger.warning(f"Open Library unavailable for {isbn}: {e}")
        return result

    book = data.get(f"ISBN:{isbn}") if isinstance(data, dict) else None
    if not book:
        return result

    subjects = [s if isinstance(s, str) else s.get("name", "") for s in book.get("subjects") or []]
    ol_genres = parse_genres(subjects)
    cover = (book.get("cover") or {}).get("large") or (book.get("cover") or {}).get("medium") or ""
    publisher = ((book.get("publishers") or [{}])[0].get("name") or "").strip()
    published_date = (book.get("publish_date") or "").strip()

    if result is None:
        result = BookMetadata(
            title=(book.get("title") or "").strip(),
            author=", ".join(a.get("name", "") for a in book.get("authors") or []).strip(),
            cover_image_url=cover,
            publisher=publisher,
            published_date=published_date,
            page_count=book.get("number_of_pages") or None,
            genres=ol_genres,
            isbn=isbn,
            source="openLibrary",
        )
    else:
        result.publisher = result.publisher or publisher
        result.published_date = result.published_date or published_date
        result.cover_image_url = result.cover_image_url or cover
        result.page_count = result.page_count or book.get("number_of_pages") or None
        known = {genre.lower() for genre in result.genres}
        result.genres.extend(genre for genre in ol_genres if genre.lower() not in known)

    if cover:
        result.covers["openLibrary"] = cover
    return result


def _supplement_from_edition(isbn: str, result: BookMetadata) -> BookMetadata:
    try:
        edition = _get_json(OPEN_LIBRARY_EDITION_URL.format(isbn=isbn))
    except (requests.RequestException, ValueError) as e:
        logger.debug(f"No Open Library edition data for {isbn}: {e}")
        return result

    if not result.physical_format and edition.get("physical_format"):
        result.physical_format = _title_case(edition["physical_format"])
    if not result.page_count and edition.get("number_of_pages"):
        result.page_count = edition["number_of_pages"]
    series = parse_series(edition.get("series"))
    if series:
        result.series_name, result.series_position = series
    return result


def lookup_isbn(isbn: Optional[str], token: Optional[CancellationToken] = None) -> Optional[BookMetadata]:
    """Look up one edition by ISBN.

    Google Books is tried first; Open Library fills any gaps (or stands in
    entirely), then the Open Library edition record adds format and series.
    Returns None when nothing was found or the token was cancelled.
    """
    if not isbn:
        return None

    result = _from_google(isbn)
    if _cancelled(token):
        return None
    result = _supplement_from_open_library(isbn, result)
    if result is None or _cancelled(token):
        return None
    if not result.physical_format or not result.series_name:
        result = _supplement_from_edition(isbn, result)
    if _cancelled(token):
        return None
    return result


def search_books(query: str, start_index: int = 0, max_results: int = 10,
                 token: Optional[CancellationToken] = None) -> Optional[SearchResults]:
    """Free-text search on Google Books, one page at a time"""
    empty = SearchResults(books=[], has_more=False, total_items=0)
    try:
        data = _get_json(GOOGLE_BOOKS_URL, {"q": query, "startIndex": start_index, "maxResults": max_results})
    except (requests.RequestException, ValueError) as e:
        logger.error(f"Book search failed for {query!r}: {e}")
        return None if _cancelled(token) else empty
    if _cancelled(token):
        return None

    items = data.get("items")
    if not items:
        return empty

    books = []
    for item in items:
        volume = item.get("volumeInfo") or {}
        isbn = next(
            (ident.get("identifier") for ident in volume.get("industryIdentifiers") or []
             if len(ident.get("identifier") or "") in (10, 13)),
            None,
        )
        books.append(BookMetadata(
            id=item.get("id"),
            title=(volume.get("title") or "").strip(),
            author=", ".join(volume.get("authors") or []).strip(),
            cover_image_url=_google_cover(volume),
            publisher=(volume.get("publisher") or "").strip(),
            published_date=(volume.get("publishedDate") or "").strip(),
            page_count=volume.get("pageCount") or None,
            genres=parse_genres(volume.get("categories") or []),
            isbn=isbn,
            source="googleBooks",
        ))

    total_items = data.get("totalItems") or 0
    return SearchResults(books=books, has_more=start_index + max_results < total_items, total_items=total_items)
