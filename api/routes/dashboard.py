# api/routes/dashboard.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.deps import get_current_user_id
from api.schemas.dashboard import Dashboard
from core.sa.database import get_db
from core.sa.repositories import BookRepository, SeriesRepository, WishlistRepository
from core.schemas.widget import WIDGET_REGISTRY, enabled_widgets
from core.services.widget_service import WidgetService
from core.utils.dashboard import build_dashboard, series_progress

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])

# Widget id -> DashboardData collection it shows
BOOK_WIDGETS = {
    "currentlyReading": "currently_reading",
    "recentlyAdded": "recently_added",
    "topRated": "top_rated",
    "recentlyFinished": "recently_finished",
}


@router.get("", response_model=Dashboard)
def get_dashboard(db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    """
    Data for each enabled dashboard widget, in layout order.

    Every list is cut to the widget's configured count (or its default).
    """
    data = build_dashboard(BookRepository(db).list_books(user_id))
    stats = {
        "total_books": data.total_books,
        "currently_reading": len(data.currently_reading),
        "finished_this_year": data.finished_this_year,
    }

    widgets = []
    for config in enabled_widgets(WidgetService(db, user_id).load()):
        meta = WIDGET_REGISTRY[config.id]
        count = config.settings.count or meta.default_count
        entry = {"config": config, "meta": meta}

        if config.id == "welcome":
            entry["stats"] = stats
        elif config.id in BOOK_WIDGETS:
            entry["books"] = getattr(data, BOOK_WIDGETS[config.id])[:count]
        elif config.id == "wishlist":
            entry["wishlist"] = WishlistRepository(db).list_recent(user_id, count)
        elif config.id == "seriesProgress":
            rows = series_progress(SeriesRepository(db).list_series(user_id), data.books_by_series, count)
            entry["series"] = [
                {
                    "series": {**_series_fields(row.series), "book_count": row.owned},
                    "owned": row.owned,
                    "total": row.total,
                    "percentage": row.percentage,
                }
                for row in rows
            ]
        widgets.append(entry)

    return {"stats": stats, "widgets": widgets}


def _series_fields(series) -> dict:
    return {
        "id": series.id,
        "name": series.name,
        "description": series.description,
        "total_books": series.total_books,
        "expected_books": series.expected_books or [],
        "created_at": series.created_at,
    }
