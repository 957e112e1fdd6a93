# core/schemas/widget.py
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

WIDGET_SETTINGS_VERSION = 1

WidgetId = Literal[
    "welcome",
    "currentlyReading",
    "recentlyAdded",
    "topRated",
    "recentlyFinished",
    "wishlist",
    "seriesProgress",
]


class WidgetOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    count: Optional[int] = Field(default=None, ge=1, le=20)
    sort_by: Optional[str] = Field(default=None, alias="sortBy")


class WidgetConfig(BaseModel):
    id: WidgetId
    enabled: bool = True
    order: int = 0
    size: Literal[6, 12] = 6
    settings: WidgetOptions = Field(default_factory=WidgetOptions)


class WidgetConfigUpdate(BaseModel):
    enabled: Optional[bool] = None
    order: Optional[int] = None
    size: Optional[Literal[6, 12]] = None
    settings: Optional[WidgetOptions] = None


class WidgetReorder(BaseModel):
    ordered_ids: List[WidgetId]


class WidgetMeta(BaseModel):
    id: WidgetId
    name: str
    icon: str
    default_size: Literal[6, 12]
    default_count: Optional[int] = None
    description: str


def _widget(widget_id: str, order: int, size: int, count: Optional[int] = None) -> WidgetConfig:
    return WidgetConfig(id=widget_id, enabled=True, order=order, size=size,
                        settings=WidgetOptions(count=count))


DEFAULT_WIDGETS: List[WidgetConfig] = [
    _widget("welcome", 0, 12),
    _widget("currentlyReading", 1, 6, 3),
    _widget("recentlyAdded", 2, 6, 3),
    _widget("topRated", 3, 6, 3),
    _widget("wishlist", 4, 6, 3),
    _widget("recentlyFinished", 5, 6, 3),
    _widget("seriesProgress", 6, 12, 4),
]

WIDGET_REGISTRY: Dict[str, WidgetMeta] = {
    meta.id: meta for meta in (
        WidgetMeta(id="welcome", name="Library Stats", icon="library", default_size=12,
                   description="Shows your total books, currently reading, and finished this year."),
        WidgetMeta(id="currentlyReading", name="Currently Reading", icon="book-open", default_size=6,
                   default_count=3, description="Books you are currently reading."),
        WidgetMeta(id="recentlyAdded", name="Recently Added", icon="plus", default_size=6,
                   default_count=3, description="Most recently added books."),
        WidgetMeta(id="topRated", name="Top Rated", icon="star", default_size=6,
                   default_count=3, description="Your highest rated books (4+ stars)."),
        WidgetMeta(id="recentlyFinished", name="Recently Finished", icon="check-circle", default_size=6,
                   default_count=3, description="Books you have recently finished."),
        WidgetMeta(id="wishlist", name="Wishlist", icon="heart", default_size=6,
                   default_count=3, description="Books on your wishlist."),
        WidgetMeta(id="seriesProgress", name="Series Progress", icon="library", default_size=12,
                   default_count=4, description="Progress on book series you are collecting."),
    )
}


def default_widgets() -> List[WidgetConfig]:
    return [widget.model_copy(deep=True) for widget in DEFAULT_WIDGETS]


def merge_with_defaults(saved: List[WidgetConfig]) -> List[WidgetConfig]:
    """Keep saved widgets in their order and append defaults added since the save"""
    known = {widget.id for widget in DEFAULT_WIDGETS}
    merged = [widget for widget in saved if widget.id in known]
    saved_ids = {widget.id for widget in saved}
    for default in DEFAULT_WIDGETS:
        if default.id not in saved_ids:
            merged.append(default.model_copy(deep=True, update={"order": len(merged)}))
    return merged


def enabled_widgets(widgets: List[WidgetConfig]) -> List[WidgetConfig]:
    return sorted((widget for widget in widgets if widget.enabled), key=lambda widget: widget.order)
