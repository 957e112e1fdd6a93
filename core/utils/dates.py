# core/utils/dates.py
from datetime import date, datetime, UTC
from typing import Any, Optional


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC and convert aware ones to UTC"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def to_datetime(value: Any) -> Optional[datetime]:
    """Coerce an ISO string, epoch milliseconds, date or datetime to an aware UTC datetime.

    Unparseable input gives None rather than raising.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=UTC)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return as_utc(datetime.fromisoformat(text))
        except ValueError:
            return None
    return None


def timestamp_ms(value: Any) -> int:
    """Epoch milliseconds for sorting; missing values sort as 0"""
    parsed = to_datetime(value)
    if parsed is None:
        return 0
    return int(parsed.timestamp() * 1000)


def format_date_for_input(value: Any) -> str:
    """YYYY-MM-DD for form inputs"""
    parsed = to_datetime(value)
    if parsed is None:
        return ""
    return parsed.strftime("%Y-%m-%d")


def format_date(value: Any) -> str:
    """Display format, e.g. "1 Jan 2024" """
    parsed = to_datetime(value)
    if parsed is None:
        return ""
    return f"{parsed.day} {parsed.strftime('%b %Y')}"
