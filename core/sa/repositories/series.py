# core/sa/repositories/series.py
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session
from core.sa.models import Series, Book, utcnow
from core.utils.text import normalize_series_name


def _sanitize_total(total_books: Optional[int]) -> Optional[int]:
    """Totals must be positive; anything else is stored as unknown"""
    return total_books if total_books and total_books > 0 else None


class SeriesRepository:
    def __init__(self, session: Session):
        self.session = session

    def list_series(self, user_id: str) -> List[Series]:
        return (
            self.session.query(Series)
            .filter(Series.user_id == user_id)
            .order_by(func.lower(Series.name))
            .all()
        )

    def list_with_counts(self, user_id: str) -> List[Tuple[Series, int]]:
        """Series ordered by name, each with its number of active books"""
        counts = dict(
            self.session.query(Book.series_id, func.count(Book.id))
            .filter(Book.user_id == user_id, Book.deleted_at.is_(None), Book.series_id.is_not(None))
            .group_by(Book.series_id)
            .all()
        )
        return [(series, counts.get(series.id, 0)) for series in self.list_series(user_id)]

    def get_series(self, user_id: str, series_id: str) -> Optional[Series]:
        return (
            self.session.query(Series)
            .filter(Series.user_id == user_id, Series.id == series_id)
            .first()
        )

    def get_by_name(self, user_id: str, name: str) -> Optional[Series]:
        """Match on the normalised name, so "The Expanse" finds "expanse" """
        key = normalize_series_name(name)
        return next(
            (series for series in self.list_series(user_id) if normalize_series_name(series.name) == key),
            None,
        )

    def create_series(self, user_id: str, name: str, total_books: Optional[int] = None,
                      description: Optional[str] = None,
                      expected_books: Optional[List[Dict[str, Any]]] = None) -> Series:
        series = Series(
            user_id=user_id,
            name=name,
            description=description,
            total_books=_sanitize_total(total_books),
            expected_books=list(expected_books or []),
        )
        self.session.add(series)
        self.session.commit()
        return series

    def update_series(self, user_id: str, series_id: str, changes: Dict[str, Any]) -> Optional[Series]:
        series = self.get_series(user_id, series_id)
        if not series:
            return None
        if 'name' in changes:
            series.name = changes['name']
        if 'description' in changes:
            series.description = changes['description']
        if 'total_books' in changes:
            series.total_books = _sanitize_total(changes['total_books'])
        if 'expected_books' in changes:
            series.expected_books = list(changes['expected_books'] or [])
        series.updated_at = utcnow()
        self.session.commit()
        return series

    def delete_series(self, user_id: str, series_id: str) -> bool:
        """Delete a series, detaching every book (active or binned) that was in it"""
        series = self.get_series(user_id, series_id)
        if not series:
            return False
        try:
            (
                self.session.query(Book)
                .filter(Book.user_id == user_id, Book.series_id == series_id)
                .update({Book.series_id: None, Book.series_position: None}, synchronize_session='fetch')
            )
            self.session.delete(series)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return True

    def count_active_books(self, user_id: str, series_id: str) -> int:
        return (
            self.session.query(Book)
            .filter(Book.user_id == user_id, Book.series_id == series_id, Book.deleted_at.is_(None))
            .count()
        )

    def series_lookup(self, user_id: str) -> Dict[str, Series]:
        return {series.id: series for series in self.list_series(user_id)}
