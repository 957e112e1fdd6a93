# core/utils/reading.py
"""
Reading status derivation.

A book's status is never stored. It is computed from the last entry of its
read history, and every caller (API, dashboard, filters, CLI) goes through
`get_reading_status` so there is exactly one definition.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Sequence

from core.utils.dates import to_datetime


class ReadingStatus(str, Enum):
    WANT_TO_READ = "want-to-read"
    READING = "reading"
    FINISHED = "finished"


STATUS_LABELS = {
    ReadingStatus.WANT_TO_READ: "Not Read",
    ReadingStatus.READING: "Currently Reading",
    ReadingStatus.FINISHED: "Finished",
}

# Filter options leave out "Not Read", the default state
STATUS_OPTIONS = [
    {"value": ReadingStatus.READING.value, "label": "Reading"},
    {"value": ReadingStatus.FINISHED.value, "label": "Finished"},
]

FORMAT_OPTIONS = [
    {"value": "", "label": "Select format..."},
    {"value": "Paperback", "label": "Paperback"},
    {"value": "Hardcover", "label": "Hardcover"},
    {"value": "Mass Market Paperback", "label": "Mass Market Paperback"},
    {"value": "Trade Paperback", "label": "Trade Paperback"},
    {"value": "Library Binding", "label": "Library Binding"},
    {"value": "Spiral-bound", "label": "Spiral-bound"},
    {"value": "Audio CD", "label": "Audio CD"},
    {"value": "Ebook", "label": "Ebook"},
]


def read_value(read: Any, field: str) -> Any:
    """Fetch a field from a read entry given as a mapping or an object"""
    if read is None:
        return None
    if isinstance(read, dict):
        return read.get(field)
    return getattr(read, field, None)


def latest_read(reads: Optional[Sequence[Any]]) -> Any:
    if not reads:
        return None
    return reads[-1]


def get_reading_status(reads: Optional[Sequence[Any]]) -> ReadingStatus:
    """Status from the last read entry: none -> want-to-read, started -> reading, finished -> finished"""
    last = latest_read(reads)
    if last is None:
        return ReadingStatus.WANT_TO_READ
    if read_value(last, "finished_at"):
        return ReadingStatus.FINISHED
    if read_value(last, "started_at"):
        return ReadingStatus.READING
    return ReadingStatus.WANT_TO_READ


def get_book_status(book: Any) -> ReadingStatus:
    """Status of a book object or mapping with a `reads` list"""
    reads = book.get("reads") if isinstance(book, dict) else getattr(book, "reads", None)
    return get_reading_status(reads)


def latest_finished_at(book: Any) -> Optional[datetime]:
    """Finish time of the latest read, if that read is finished"""
    reads = book.get("reads") if isinstance(book, dict) else getattr(book, "reads", None)
    return to_datetime(read_value(latest_read(reads), "finished_at"))


def has_read_in_progress(reads: Optional[Sequence[Any]]) -> bool:
    return get_reading_status(reads) == ReadingStatus.READING
