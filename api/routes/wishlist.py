# api/routes/wishlist.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from api.deps import get_current_user_id
from api.schemas.book import BookMutationResult
from api.schemas.library import WishlistItem, WishlistList
from core.sa.database import get_db
from core.sa.repositories import WishlistRepository
from core.schemas import QuickAddWishlistItem, WishlistItemCreate, WishlistItemUpdate
from core.services.library_service import LibraryService
from core.utils.book_filters import WISHLIST_SORT_MODES, sort_wishlist

router = APIRouter(prefix="/api/wishlist", tags=["wishlist"])


@router.get("", response_model=WishlistList)
def list_wishlist(
    sort: str = Query("priority", description=f"Sort mode ({', '.join(WISHLIST_SORT_MODES)})"),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    if sort not in WISHLIST_SORT_MODES:
        raise HTTPException(status_code=400, detail=f"Invalid sort mode. Must be one of: {', '.join(WISHLIST_SORT_MODES)}")
    items = sort_wishlist(WishlistRepository(db).list_wishlist(user_id), sort)
    return {"items": items, "total": len(items), "sort": sort}


@router.post("", response_model=WishlistItem, status_code=201)
def create_item(
    item: WishlistItemCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return WishlistRepository(db).add_item(user_id, item.model_dump())


@router.post("/quick", response_model=WishlistItem, status_code=201)
def quick_add_item(
    item: QuickAddWishlistItem,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return WishlistRepository(db).add_item(user_id, item.model_dump())


@router.get("/{item_id}", response_model=WishlistItem)
def get_item(item_id: str, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    item = WishlistRepository(db).get_item(user_id, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Wishlist item not found")
    return item


@router.patch("/{item_id}", response_model=WishlistItem)
def update_item(
    item_id: str,
    update: WishlistItemUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    item = WishlistRepository(db).update_item(user_id, item_id, update.changes())
    if not item:
        raise HTTPException(status_code=404, detail="Wishlist item not found")
    return item


@router.delete("/{item_id}")
def delete_item(item_id: str, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    if not WishlistRepository(db).delete_item(user_id, item_id):
        raise HTTPException(status_code=404, detail="Wishlist item not found")
    return {"message": "Removed from wishlist"}


@router.post("/{item_id}/purchased", response_model=BookMutationResult)
def mark_purchased(item_id: str, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    """Move a wishlist item into the library"""
    result = LibraryService(db, user_id).mark_purchased(item_id)
    if not result.primary_ok:
        status_code = 404 if result.message == "Wishlist item not found" else 503
        raise HTTPException(status_code=status_code, detail=result.message)
    return {
        "message": result.message,
        "book": result.result,
        "secondary_ok": result.secondary_ok,
        "secondary_error": result.secondary_error,
    }
