# core/schemas/book.py
import math
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from core.sa.models import PhysicalFormat
from core.schemas.common import (
    datetime_value, isbn_value, max_length, optional_text, required_text, url_value,
)

REQUIRED_MESSAGES = {
    "title": "Title is required",
    "author": "Author is required",
}

LENGTH_LIMITS = {
    "title": (500, "Title must be 500 characters or less"),
    "author": (200, "Author must be 200 characters or less"),
    "publisher": (200, "Publisher must be 200 characters or less"),
    "published_date": (50, "Published date must be 50 characters or less"),
    "notes": (10000, "Notes must be 10000 characters or less"),
}


class BookReadIn(BaseModel):
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @field_validator("started_at", "finished_at", mode="before")
    @classmethod
    def _coerce_dates(cls, value):
        return datetime_value(value)

    @model_validator(mode="after")
    def _check_order(self):
        if self.started_at and self.finished_at and self.finished_at < self.started_at:
            raise ValueError("Finish date cannot be before start date")
        return self


class BookImageIn(BaseModel):
    """An image the book already has. Order, caption and the primary flag are editable, the rest is ignored."""
    id: str
    is_primary: bool = False
    caption: Optional[str] = None

    @field_validator("caption", mode="before")
    @classmethod
    def _trim_caption(cls, value):
        return optional_text(value)


class QuickAddBook(BaseModel):
    """Minimal book form used by search-and-add"""
    model_config = ConfigDict(use_enum_values=True)

    title: str
    author: str
    isbn: Optional[str] = None
    cover_image_url: Optional[str] = None

    @field_validator("title", "author", mode="before")
    @classmethod
    def _require_text(cls, value, info):
        return required_text(value, REQUIRED_MESSAGES[info.field_name])

    @field_validator("title", "author")
    @classmethod
    def _check_required_length(cls, value, info):
        return max_length(value, *LENGTH_LIMITS[info.field_name])

    @field_validator("isbn", mode="before")
    @classmethod
    def _normalize_isbn(cls, value):
        return isbn_value(value)

    @field_validator("cover_image_url", mode="before")
    @classmethod
    def _check_cover_url(cls, value):
        return url_value(value)


class BookCreate(QuickAddBook):
    publisher: Optional[str] = None
    published_date: Optional[str] = None
    physical_format: Optional[PhysicalFormat] = None
    page_count: Optional[int] = None
    rating: Optional[float] = None
    genres: List[str] = Field(default_factory=list)
    series_id: Optional[str] = None
    series_position: Optional[float] = None
    notes: Optional[str] = None
    reads: List[BookReadIn] = Field(default_factory=list)
    covers: Optional[Dict[str, str]] = None

    @field_validator("publisher", "published_date", "notes", "series_id", mode="before")
    @classmethod
    def _trim_optional(cls, value):
        return optional_text(value)

    @field_validator("publisher", "published_date", "notes")
    @classmethod
    def _check_optional_length(cls, value, info):
        return max_length(value, *LENGTH_LIMITS[info.field_name])

    @field_validator("physical_format", mode="before")
    @classmethod
    def _empty_format(cls, value):
        return value or None

    @field_validator("page_count")
    @classmethod
    def _check_page_count(cls, value):
        if value is None:
            return value
        if value < 1:
            raise ValueError("Page count must be at least 1")
        if value > 50000:
            raise ValueError("Page count seems too high")
        return value

    @field_validator("rating")
    @classmethod
    def _check_rating(cls, value):
        if value is None:
            return value
        if not math.isfinite(value):
            raise ValueError("Rating must be a number")
        if value < 0:
            raise ValueError("Rating must be at least 0")
        if value > 5:
            raise ValueError("Rating must be at most 5")
        return value

    @field_validator("series_position")
    @classmethod
    def _check_series_position(cls, value):
        if value is None:
            return value
        if not math.isfinite(value):
            raise ValueError("Series position must be a number")
        if value < 0:
            raise ValueError("Series position must be positive")
        return value

    @field_validator("genres", "reads", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value

    @field_validator("genres")
    @classmethod
    def _dedupe_genres(cls, value):
        if value is None:
            return value
        return list(dict.fromkeys(genre_id for genre_id in value if genre_id))

    @field_validator("covers", mode="before")
    @classmethod
    def _drop_empty_covers(cls, value):
        if value is None:
            return None
        if not isinstance(value, dict):
            raise ValueError("Covers must be a mapping of source to URL")
        return {name: url for name, url in value.items() if url}

    @field_validator("reads")
    @classmethod
    def _check_reads(cls, value):
        if value is None:
            return value
        for read in value[:-1]:
            if read.finished_at is None:
                raise ValueError("Only the latest read can be in progress")
        return value


class BookUpdate(BookCreate):
    """Any subset of the book fields; supplied fields are validated as on create"""
    title: Optional[str] = None
    author: Optional[str] = None
    genres: Optional[List[str]] = None
    reads: Optional[List[BookReadIn]] = None
    images: Optional[List[BookImageIn]] = None

    @field_validator("images")
    @classmethod
    def _check_images(cls, value):
        if value is None:
            return value
        ids = [image.id for image in value]
        if len(set(ids)) != len(ids):
            raise ValueError("Each image can only appear once")
        if sum(1 for image in value if image.is_primary) > 1:
            raise ValueError("Only one image can be primary")
        return value

    def changes(self) -> dict:
        """Only the fields the caller actually sent"""
        return self.model_dump(exclude_unset=True)
