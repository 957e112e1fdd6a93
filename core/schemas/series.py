# core/schemas/series.py
import math
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from core.schemas.common import isbn_value, max_length, optional_text, required_text


class ExpectedBook(BaseModel):
    """A planned entry in a series that the user may not own yet"""
    title: str
    isbn: Optional[str] = None
    position: Optional[float] = None
    source: Literal["api", "manual"] = "manual"

    @field_validator("title", mode="before")
    @classmethod
    def _require_title(cls, value):
        return required_text(value, "Title is required")

    @field_validator("isbn", mode="before")
    @classmethod
    def _normalize_isbn(cls, value):
        return isbn_value(value)

    @field_validator("position")
    @classmethod
    def _check_position(cls, value):
        if value is not None and not math.isfinite(value):
            raise ValueError("Position must be a number")
        return value


class SeriesCreate(BaseModel):
    name: str
    description: Optional[str] = None
    total_books: Optional[int] = None
    expected_books: List[ExpectedBook] = Field(default_factory=list)

    @field_validator("name", mode="before")
    @classmethod
    def _require_name(cls, value):
        return required_text(value, "Name is required")

    @field_validator("name")
    @classmethod
    def _check_name_length(cls, value):
        return max_length(value, 200, "Name must be 200 characters or less")

    @field_validator("description", mode="before")
    @classmethod
    def _trim_description(cls, value):
        return optional_text(value)

    @field_validator("description")
    @classmethod
    def _check_description_length(cls, value):
        return max_length(value, 2000, "Description must be 2000 characters or less")

    @field_validator("total_books")
    @classmethod
    def _check_total_books(cls, value):
        if value is None:
            return value
        if value < 1:
            raise ValueError("Total books must be at least 1")
        if value > 1000:
            raise ValueError("Total books seems too high")
        return value

    @field_validator("expected_books", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value


class SeriesUpdate(SeriesCreate):
    name: Optional[str] = None
    expected_books: Optional[List[ExpectedBook]] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)
