# core/utils/dashboard.py
from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import Any, Dict, List, Optional, Sequence

from core.utils.dates import as_utc, to_datetime
from core.utils.reading import ReadingStatus, get_book_status, latest_finished_at, read_value

TOP_RATED_MIN = 4


@dataclass
class DashboardData:
    currently_reading: List[Any] = field(default_factory=list)
    recently_added: List[Any] = field(default_factory=list)
    top_rated: List[Any] = field(default_factory=list)
    recently_finished: List[Any] = field(default_factory=list)
    finished_this_year: int = 0
    books_by_series: Dict[str, List[Any]] = field(default_factory=dict)
    total_books: int = 0


@dataclass
class SeriesProgress:
    series: Any
    owned: int
    total: int
    percentage: int


def _created(book: Any) -> float:
    created = to_datetime(read_value(book, "created_at"))
    return created.timestamp() if created else 0.0


def _finished(book: Any) -> float:
    finished = latest_finished_at(book)
    return finished.timestamp() if finished else 0.0


def build_dashboard(books: Sequence[Any], now: Optional[datetime] = None) -> DashboardData:
    """Partition a user's books into the dashboard collections.

    Soft-deleted books are ignored. `finished_this_year` counts finished books
    whose latest read ended in the same calendar year as `now`.
    """
    now = as_utc(now) if now else datetime.now(UTC)
    active = [book for book in books if not read_value(book, "deleted_at")]
    data = DashboardData(total_books=len(active))

    finished = []
    for book in active:
        status = get_book_status(book)
        if status == ReadingStatus.READING:
            data.currently_reading.append(book)
        elif status == ReadingStatus.FINISHED:
            finished.append(book)
            finished_at = latest_finished_at(book)
            if finished_at and finished_at.year == now.year:
                data.finished_this_year += 1

        series_id = read_value(book, "series_id")
        if series_id:
            data.books_by_series.setdefault(series_id, []).append(book)

    data.recently_added = sorted(active, key=_created, reverse=True)
    data.top_rated = sorted(
        (book for book in active
         if read_value(book, "rating") is not None and read_value(book, "rating") >= TOP_RATED_MIN),
        key=lambda book: read_value(book, "rating"),
        reverse=True,
    )
    data.recently_finished = sorted(finished, key=_finished, reverse=True)
    return data


def series_progress(series: Sequence[Any], books_by_series: Dict[str, List[Any]],
                    count: Optional[int] = None) -> List[SeriesProgress]:
    """Progress rows for series that have at least one owned book"""
    rows = []
    for entry in series:
        owned = len(books_by_series.get(read_value(entry, "id"), []))
        if owned == 0:
            continue
        total = read_value(entry, "total_books") or owned
        percentage = round(owned / total * 100) if total > 0 else 0
        rows.append(SeriesProgress(series=entry, owned=owned, total=total, percentage=percentage))
    if count is not None:
        rows = rows[:count]
    return rows
