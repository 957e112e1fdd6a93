# api/routes/lookup.py
from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import get_current_user_id
from api.schemas.lookup import BookMetadataSchema, SearchResultsSchema
from core.services.lookup_service import lookup_isbn, search_books
from core.utils.isbn import clean_isbn, is_isbn, is_valid_isbn

router = APIRouter(prefix="/api/lookup", tags=["lookup"])


@router.get("/isbn/{isbn}", response_model=BookMetadataSchema)
def lookup_by_isbn(isbn: str, user_id: str = Depends(get_current_user_id)):
    """Book details for one ISBN from Google Books and Open Library"""
    cleaned = clean_isbn(isbn).upper()
    if not is_valid_isbn(cleaned):
        raise HTTPException(status_code=400, detail="Invalid ISBN format")
    result = lookup_isbn(cleaned)
    if not result:
        raise HTTPException(status_code=404, detail="No book found for this ISBN")
    return result


@router.get("/search", response_model=SearchResultsSchema)
def search(
    q: str = Query(..., min_length=1, description="Title, author or keywords"),
    start_index: int = Query(0, ge=0),
    max_results: int = Query(10, ge=1, le=40),
    user_id: str = Depends(get_current_user_id),
):
    """
    Free-text search, one page at a time.

    If the query looks like an ISBN, the ISBN lookup is used instead and the
    single match (if any) is returned as the only result.
    """
    cleaned = clean_isbn(q)
    if cleaned and is_isbn(cleaned):
        result = lookup_isbn(cleaned)
        books = [result] if result else []
        return {"books": books, "has_more": False, "total_items": len(books)}
    return search_books(q.strip(), start_index, max_results)
