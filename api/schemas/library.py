# api/schemas/library.py
from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict

from core.schemas.series import ExpectedBook


class Genre(BaseModel):
    id: str
    name: str
    color: str
    text_color: Optional[str] = None
    book_count: int = 0
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Series(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    total_books: Optional[int] = None
    expected_books: List[ExpectedBook] = []
    book_count: int = 0
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WishlistItem(BaseModel):
    id: str
    title: str
    author: str
    isbn: Optional[str] = None
    cover_image_url: Optional[str] = None
    covers: Optional[Dict[str, str]] = None
    publisher: Optional[str] = None
    published_date: Optional[str] = None
    page_count: Optional[int] = None
    priority: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WishlistList(BaseModel):
    items: List[WishlistItem]
    total: int
    sort: str
