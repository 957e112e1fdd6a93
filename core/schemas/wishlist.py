# core/schemas/wishlist.py
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from core.sa.models import WishlistPriority
from core.schemas.common import isbn_value, max_length, optional_text, required_text, url_value

REQUIRED_MESSAGES = {
    "title": "Title is required",
    "author": "Author is required",
}

LENGTH_LIMITS = {
    "title": (500, "Title must be 500 characters or less"),
    "author": (200, "Author must be 200 characters or less"),
    "publisher": (200, "Publisher must be 200 characters or less"),
    "published_date": (50, "Published date must be 50 characters or less"),
    "notes": (5000, "Notes must be 5000 characters or less"),
}


class QuickAddWishlistItem(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    title: str
    author: str
    isbn: Optional[str] = None
    cover_image_url: Optional[str] = None
    priority: Optional[WishlistPriority] = None

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

    @field_validator("priority", mode="before")
    @classmethod
    def _empty_priority(cls, value):
        return value or None


class WishlistItemCreate(QuickAddWishlistItem):
    covers: Optional[Dict[str, str]] = None
    publisher: Optional[str] = None
    published_date: Optional[str] = None
    page_count: Optional[int] = None
    notes: Optional[str] = None

    @field_validator("publisher", "published_date", "notes", mode="before")
    @classmethod
    def _trim_optional(cls, value):
        return optional_text(value)

    @field_validator("publisher", "published_date", "notes")
    @classmethod
    def _check_optional_length(cls, value, info):
        return max_length(value, *LENGTH_LIMITS[info.field_name])

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

    @field_validator("covers", mode="before")
    @classmethod
    def _drop_empty_covers(cls, value):
        if value is None:
            return None
        if not isinstance(value, dict):
            raise ValueError("Covers must be a mapping of source to URL")
        return {name: url for name, url in value.items() if url}


class WishlistItemUpdate(WishlistItemCreate):
    title: Optional[str] = None
    author: Optional[str] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)
