# api/schemas/book.py
from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict

from core.utils.reading import ReadingStatus


class BookReadSchema(BaseModel):
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class BookImageSchema(BaseModel):
    id: str
    url: str
    is_primary: bool = False
    caption: Optional[str] = None
    uploaded_at: Optional[datetime] = None
    size_bytes: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class GenreRef(BaseModel):
    id: str
    name: str
    color: str

    model_config = ConfigDict(from_attributes=True)


class SeriesRef(BaseModel):
    id: str
    name: str
    total_books: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class Book(BaseModel):
    id: str
    title: str
    author: str
    isbn: Optional[str] = None
    cover_image_url: Optional[str] = None
    covers: Optional[Dict[str, str]] = None
    publisher: Optional[str] = None
    published_date: Optional[str] = None
    physical_format: Optional[str] = None
    page_count: Optional[int] = None
    rating: Optional[float] = None
    genres: List[str] = []
    series_id: Optional[str] = None
    series_position: Optional[float] = None
    notes: Optional[str] = None
    reads: List[BookReadSchema] = []
    images: List[BookImageSchema] = []
    status: ReadingStatus
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class BookList(BaseModel):
    items: List[Book]
    total: int


class BookDetail(BaseModel):
    book: Book
    status_label: str
    genres: List[GenreRef] = []
    series: Optional[SeriesRef] = None
    series_books: List[Book] = []


class BookMutationResult(BaseModel):
    """Outcome of a write that may cascade to a second entity"""
    message: str
    book: Optional[Book] = None
    secondary_ok: Optional[bool] = None
    secondary_error: Optional[str] = None


class ReadDate(BaseModel):
    date: Optional[datetime] = None


class DuplicateCheckRequest(BaseModel):
    title: str
    author: str
    isbn: Optional[str] = None


class DuplicateCheckResponse(BaseModel):
    is_duplicate: bool
    match_type: Optional[str] = None
    existing_book: Optional[Book] = None


class BinEntrySchema(BaseModel):
    book: Book
    days_remaining: int

    model_config = ConfigDict(from_attributes=True)


class BinList(BaseModel):
    items: List[BinEntrySchema]
    total: int
    retention_days: int
