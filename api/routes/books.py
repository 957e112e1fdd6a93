# api/routes/books.py

from typing import List, Optional
from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from api.deps import get_current_user_id, request_body
from api.schemas.book import (
    Book, BookDetail, BookImageSchema, BookList, BookMutationResult, DuplicateCheckRequest,
    DuplicateCheckResponse, GenreRef, ReadDate, SeriesRef,
)
from core.config import get_settings
from core.sa.database import get_db
from core.sa.repositories import BookRepository, GenreRepository, SeriesRepository
from core.schemas import BookCreate, BookUpdate, QuickAddBook
from core.services.duplicate_checker import check_for_duplicate
from core.services.forms import FormTracker
from core.services.library_service import LibraryService
from core.utils.book_filters import SORT_FIELDS, BookFilters, filter_books, sort_books
from core.utils.image import ImageStore, ImageValidationError
from core.utils.reading import STATUS_LABELS, ReadingStatus

router = APIRouter(prefix="/api/books", tags=["books"])


def get_image_store() -> ImageStore:
    return ImageStore(get_settings().media_dir)


def _get_book_or_404(repo: BookRepository, user_id: str, book_id: str):
    book = repo.get_active_book(user_id, book_id)
    if not book:
        raise HTTPException(status_code=404, detail="Book not found")
    return book


def _form_values(book) -> dict:
    """Current values of a book in the shape BookUpdate produces"""
    return {
        'title': book.title,
        'author': book.author,
        'isbn': book.isbn,
        'cover_image_url': book.cover_image_url,
        'covers': book.covers,
        'publisher': book.publisher,
        'published_date': book.published_date,
        'physical_format': book.physical_format,
        'page_count': book.page_count,
        'rating': book.rating,
        'genres': book.genres,
        'series_id': book.series_id,
        'series_position': book.series_position,
        'notes': book.notes,
        'reads': [{'started_at': r.started_at, 'finished_at': r.finished_at} for r in book.reads],
        'images': [
            {'id': img.id, 'is_primary': img.is_primary, 'caption': img.caption}
            for img in book.images
        ],
    }


@router.get("", response_model=BookList)
def list_books(
    search: Optional[str] = Query(None, description="Search title and author"),
    status: List[str] = Query([], description="Reading status (any of)"),
    genre: List[str] = Query([], description="Genre id (any of)"),
    series: List[str] = Query([], description="Series id (any of)"),
    min_rating: Optional[float] = Query(None, ge=0, le=5),
    author: Optional[str] = Query(None, description="Exact author"),
    sort: str = Query("created_at", description=f"Sort field ({', '.join(SORT_FIELDS)})"),
    order: str = Query("desc", description="Sort order (asc or desc)"),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """
    List the user's active books, filtered and sorted.

    Args:
        search: Case-insensitive match on title or author
        status: Reading statuses to include
        genre: Genre ids to include
        series: Series ids to include
        min_rating: Minimum rating
        author: Exact author name
        sort: Field to sort by
        order: Sort order (asc or desc)
    """
    if sort not in SORT_FIELDS:
        raise HTTPException(status_code=400, detail=f"Invalid sort field. Must be one of: {', '.join(SORT_FIELDS)}")
    if order not in ("asc", "desc"):
        raise HTTPException(status_code=400, detail="Invalid sort order. Must be 'asc' or 'desc'")
    statuses = [s.value for s in ReadingStatus]
    if any(s not in statuses for s in status):
        raise HTTPException(status_code=400, detail=f"Invalid status. Must be one of: {', '.join(statuses)}")

    filters = BookFilters(
        search=search,
        statuses=status,
        genre_ids=genre,
        series_ids=series,
        min_rating=min_rating,
        author=author,
    )
    repo = BookRepository(db)
    books = repo.list_by_status(user_id, status[0]) if len(status) == 1 else repo.list_books(user_id)
    books = sort_books(filter_books(books, filters), sort, order)
    return {"items": books, "total": len(books)}


@router.post("", response_model=Book, status_code=201)
def create_book(
    book: BookCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    try:
        return BookRepository(db).add_book(user_id, book.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/quick", response_model=Book, status_code=201)
def quick_add_book(
    book: QuickAddBook,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Add a book from a search result with only the essentials"""
    return BookRepository(db).add_book(user_id, {**book.model_dump(), 'reads': [], 'genres': []})


@router.post("/check-duplicate", response_model=DuplicateCheckResponse)
def check_duplicate(
    request: DuplicateCheckRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    result = check_for_duplicate(db, user_id, request.isbn, request.title, request.author)
    return {
        "is_duplicate": result.is_duplicate,
        "match_type": result.match_type,
        "existing_book": result.existing_book,
    }


@router.get("/{book_id}", response_model=BookDetail)
def get_book(
    book_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Book with its genres, series and the other books in that series"""
    repo = BookRepository(db)
    book = _get_book_or_404(repo, user_id, book_id)

    genres = GenreRepository(db).genre_lookup(user_id)
    series = SeriesRepository(db).get_series(user_id, book.series_id) if book.series_id else None
    series_books = repo.list_by_series(user_id, series.id) if series else []

    return {
        "book": book,
        "status_label": STATUS_LABELS[book.status],
        "genres": [GenreRef.model_validate(genres[g]) for g in book.genres if g in genres],
        "series": SeriesRef.model_validate(series) if series else None,
        "series_books": series_books,
    }


@router.patch("/{book_id}", response_model=Book)
def update_book(
    book_id: str,
    update: BookUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    store: ImageStore = Depends(get_image_store),
):
    """Save the fields that changed; an unchanged form writes nothing.

    Images can only be reordered, captioned or made primary here. Images left
    out of the list are removed along with their files.
    """
    repo = BookRepository(db)
    book = _get_book_or_404(repo, user_id, book_id)

    changes = FormTracker(_form_values(book)).changes(update.changes())
    if not changes:
        return book
    stored_paths = {image.id: image.storage_path for image in book.images}
    try:
        book = repo.update_book(user_id, book_id, changes)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    for image_id in stored_paths.keys() - {image.id for image in book.images}:
        store.delete(user_id, stored_paths[image_id])
    return book


@router.delete("/{book_id}", response_model=BookMutationResult)
def delete_book(
    book_id: str,
    delete_empty_series: bool = Query(False, description="Also delete the series if this was its last book"),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Move a book to the bin"""
    result = LibraryService(db, user_id).delete_book(book_id, delete_empty_series=delete_empty_series)
    if not result.primary_ok:
        status_code = 404 if result.message == "Book not found" else 503
        raise HTTPException(status_code=status_code, detail=result.message)
    return {
        "message": result.message,
        "book": result.result,
        "secondary_ok": result.secondary_ok,
        "secondary_error": result.secondary_error,
    }


@router.post("/{book_id}/reads/start", response_model=Book)
def start_reading(
    book_id: str,
    body: Optional[ReadDate] = Body(None),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    repo = BookRepository(db)
    _get_book_or_404(repo, user_id, book_id)
    try:
        return repo.start_read(user_id, book_id, body.date if body else None)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{book_id}/reads/finish", response_model=Book)
def finish_reading(
    book_id: str,
    body: Optional[ReadDate] = Body(None),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    repo = BookRepository(db)
    _get_book_or_404(repo, user_id, book_id)
    try:
        return repo.finish_read(user_id, book_id, body.date if body else None)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{book_id}/images", response_model=BookImageSchema, status_code=201)
def upload_image(
    book_id: str,
    request: Request,
    content: bytes = Depends(request_body),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    store: ImageStore = Depends(get_image_store),
):
    """Upload an image as the raw request body; the Content-Type header gives its format"""
    repo = BookRepository(db)
    _get_book_or_404(repo, user_id, book_id)

    try:
        stored = store.save(user_id, book_id, content, request.headers.get("content-type"))
    except ImageValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return repo.add_image(user_id, book_id, {
        'id': stored.id,
        'url': stored.url,
        'storage_path': stored.storage_path,
        'size_bytes': stored.size_bytes,
        'width': stored.width,
        'height': stored.height,
    })


@router.delete("/{book_id}/images/{image_id}", response_model=Book)
def remove_image(
    book_id: str,
    image_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    store: ImageStore = Depends(get_image_store),
):
    repo = BookRepository(db)
    book = _get_book_or_404(repo, user_id, book_id)
    removed = repo.remove_image(user_id, book_id, image_id)
    if not removed:
        raise HTTPException(status_code=404, detail="Image not found")
    store.delete(user_id, removed.storage_path)
    return book


@router.put("/{book_id}/images/{image_id}/primary", response_model=Book)
def set_primary_image(
    book_id: str,
    image_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    repo = BookRepository(db)
    _get_book_or_404(repo, user_id, book_id)
    book = repo.set_primary_image(user_id, book_id, image_id)
    if not book:
        raise HTTPException(status_code=404, detail="Image not found")
    return book
