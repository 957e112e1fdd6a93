# api/routes/series.py
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from api.deps import get_current_user_id
from api.schemas.book import Book
from api.schemas.library import Series
from core.sa.database import get_db
from core.sa.repositories import BookRepository, SeriesRepository
from core.schemas import SeriesCreate, SeriesUpdate

router = APIRouter(prefix="/api/series", tags=["series"])


class SeriesDetail(BaseModel):
    series: Series
    books: List[Book]


def _series_response(series, book_count: int) -> Series:
    return Series.model_validate(series).model_copy(update={"book_count": book_count})


@router.get("", response_model=List[Series])
def list_series(db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    """All series by name, each with its number of active books"""
    return [_series_response(series, count) for series, count in SeriesRepository(db).list_with_counts(user_id)]


@router.post("", response_model=Series, status_code=201)
def create_series(
    series: SeriesCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    created = SeriesRepository(db).create_series(
        user_id,
        series.name,
        total_books=series.total_books,
        description=series.description,
        expected_books=[book.model_dump() for book in series.expected_books],
    )
    return _series_response(created, 0)


@router.get("/{series_id}", response_model=SeriesDetail)
def get_series(series_id: str, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    """A series with its books in reading order"""
    series = SeriesRepository(db).get_series(user_id, series_id)
    if not series:
        raise HTTPException(status_code=404, detail="Series not found")
    books = BookRepository(db).list_by_series(user_id, series_id)
    return {"series": _series_response(series, len(books)), "books": books}


@router.patch("/{series_id}", response_model=Series)
def update_series(
    series_id: str,
    update: SeriesUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    repo = SeriesRepository(db)
    series = repo.update_series(user_id, series_id, update.changes())
    if not series:
        raise HTTPException(status_code=404, detail="Series not found")
    return _series_response(series, repo.count_active_books(user_id, series_id))


@router.delete("/{series_id}")
def delete_series(series_id: str, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    """Delete a series; its books stay in the library without a series"""
    if not SeriesRepository(db).delete_series(user_id, series_id):
        raise HTTPException(status_code=404, detail="Series not found")
    return {"message": "Series deleted"}
