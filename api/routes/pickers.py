# api/routes/pickers.py
from typing import List, Literal, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from api.deps import get_current_user_id
from api.schemas.lookup import PickerOptions
from core.sa.database import get_db
from core.sa.repositories import BookRepository, GenreRepository, SeriesRepository
from core.services.pickers import (
    Picker, author_candidates, cover_candidates, genre_candidates, series_candidates,
)

router = APIRouter(prefix="/api/pickers", tags=["pickers"])


@router.get("/{kind}", response_model=PickerOptions)
def picker_options(
    kind: Literal["author", "genre", "series", "cover"],
    q: str = Query("", description="Typed text"),
    selected: List[str] = Query([], description="Values already chosen (genre picker)"),
    book_id: Optional[str] = Query(None, description="Book whose covers to offer (cover picker)"),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """
    Suggestions for a typeahead picker, matched against the typed text.

    Authors come from the active collection with usage counts; genres and
    series from the user's own lists; covers from the book's known sources.
    """
    if kind == "author":
        candidates = author_candidates(BookRepository(db).list_books(user_id))
    elif kind == "genre":
        candidates = genre_candidates(GenreRepository(db).list_genres(user_id))
    elif kind == "series":
        counts = {series.id: count for series, count in SeriesRepository(db).list_with_counts(user_id)}
        candidates = series_candidates(SeriesRepository(db).list_series(user_id), counts)
    else:
        if not book_id:
            raise HTTPException(status_code=400, detail="book_id is required for the cover picker")
        book = BookRepository(db).get_book(user_id, book_id)
        if not book:
            raise HTTPException(status_code=404, detail="Book not found")
        candidates = cover_candidates(book.covers, book.cover_image_url)

    picker = Picker(
        candidates,
        on_change=lambda value: None,
        multi=kind == "genre",
        selected=selected,
        allow_new=kind != "cover",
    )
    picker.query = q
    return {"query": q, "items": picker.items}
