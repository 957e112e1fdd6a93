# api/schemas/dashboard.py
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict

from core.schemas.widget import WidgetConfig, WidgetMeta
from api.schemas.book import Book
from api.schemas.library import Series, WishlistItem


class SeriesProgressSchema(BaseModel):
    series: Series
    owned: int
    total: int
    percentage: int


class LibraryStats(BaseModel):
    total_books: int
    currently_reading: int
    finished_this_year: int


class DashboardWidget(BaseModel):
    """One enabled widget with the data it shows"""
    config: WidgetConfig
    meta: WidgetMeta
    books: Optional[List[Book]] = None
    wishlist: Optional[List[WishlistItem]] = None
    series: Optional[List[SeriesProgressSchema]] = None
    stats: Optional[LibraryStats] = None


class Dashboard(BaseModel):
    stats: LibraryStats
    widgets: List[DashboardWidget]


class WidgetLayout(BaseModel):
    widgets: List[WidgetConfig]
    registry: Dict[str, WidgetMeta]


class HealthFieldSchema(BaseModel):
    weight: int
    label: str
    icon: str

    model_config = ConfigDict(from_attributes=True)


class BookIssuesSchema(BaseModel):
    book: Book
    completeness: int
    missing: List[HealthFieldSchema]


class HealthReportSchema(BaseModel):
    total_books: int
    completeness_score: int
    rating: Dict[str, str]
    total_issues: int
    fixable_books: int
    issue_counts: Dict[str, int]
    books: List[BookIssuesSchema]


class RecountResultSchema(BaseModel):
    updated: int
    books_scanned: int
    message: str


class OrphanedFileSchema(BaseModel):
    storage_path: str
    size_bytes: int


class OrphanReportSchema(BaseModel):
    files: List[OrphanedFileSchema]
    count: int
    total_size: int


class OrphanDeleteSchema(BaseModel):
    deleted: int
    message: str
