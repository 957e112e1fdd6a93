# api/schemas/lookup.py
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict


class BookMetadataSchema(BaseModel):
    id: Optional[str] = None
    title: str = ""
    author: str = ""
    isbn: Optional[str] = None
    cover_image_url: str = ""
    covers: Dict[str, str] = {}
    publisher: str = ""
    published_date: str = ""
    physical_format: str = ""
    page_count: Optional[int] = None
    genres: List[str] = []
    series_name: Optional[str] = None
    series_position: Optional[int] = None
    source: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class SearchResultsSchema(BaseModel):
    books: List[BookMetadataSchema]
    has_more: bool
    total_items: int

    model_config = ConfigDict(from_attributes=True)


class PickerOption(BaseModel):
    value: Any
    label: str
    count: int = 0
    is_new: bool = False

    model_config = ConfigDict(from_attributes=True)


class PickerOptions(BaseModel):
    query: str
    items: List[PickerOption]


class NavigationResult(BaseModel):
    path: str
    redirect: Optional[str] = None
    theme: str
    theme_color: str
