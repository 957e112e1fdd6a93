# api/routes/recycle_bin.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api.deps import get_current_user_id
from api.routes.books import get_image_store
from api.schemas.book import BinList, Book
from core.sa.database import get_db
from core.services.bin_service import BinService
from core.utils.image import ImageStore

router = APIRouter(prefix="/api/bin", tags=["bin"])


def get_bin_service(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    store: ImageStore = Depends(get_image_store),
) -> BinService:
    return BinService(db, user_id, image_store=store)


@router.get("", response_model=BinList)
def list_bin(service: BinService = Depends(get_bin_service)):
    """Binned books, most recently deleted first, with days left before expiry"""
    entries = service.list_bin()
    return {
        "items": [{"book": entry.book, "days_remaining": entry.days_remaining} for entry in entries],
        "total": len(entries),
        "retention_days": service.retention_days,
    }


@router.post("/{book_id}/restore", response_model=Book)
def restore_book(book_id: str, service: BinService = Depends(get_bin_service)):
    book = service.restore(book_id)
    if not book:
        raise HTTPException(status_code=404, detail="Book not found in bin")
    return book


@router.delete("/{book_id}")
def purge_book(book_id: str, service: BinService = Depends(get_bin_service)):
    """Permanently delete one binned book"""
    if not service.purge(book_id):
        raise HTTPException(status_code=404, detail="Book not found in bin")
    return {"message": "Book permanently deleted"}


@router.delete("")
def empty_bin(service: BinService = Depends(get_bin_service)):
    count = service.empty_bin()
    return {"message": f"Permanently deleted {count} book{'s' if count != 1 else ''}", "count": count}
