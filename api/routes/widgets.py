# api/routes/widgets.py
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api.deps import get_current_user_id
from api.schemas.dashboard import WidgetLayout
from core.sa.database import get_db
from core.schemas.widget import WIDGET_REGISTRY, WidgetConfig, WidgetConfigUpdate, WidgetReorder
from core.services.widget_service import WidgetService

router = APIRouter(prefix="/api/widgets", tags=["widgets"])


def get_widget_service(db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)) -> WidgetService:
    return WidgetService(db, user_id)


def _layout(widgets: List[WidgetConfig]) -> dict:
    return {"widgets": widgets, "registry": WIDGET_REGISTRY}


@router.get("", response_model=WidgetLayout)
def get_widgets(service: WidgetService = Depends(get_widget_service)):
    return _layout(service.load())


@router.put("", response_model=WidgetLayout)
def save_widgets(widgets: List[WidgetConfig], service: WidgetService = Depends(get_widget_service)):
    return _layout(service.save(widgets))


@router.patch("/{widget_id}", response_model=WidgetLayout)
def update_widget(
    widget_id: str,
    update: WidgetConfigUpdate,
    service: WidgetService = Depends(get_widget_service),
):
    try:
        return _layout(service.update_widget(widget_id, update))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/reorder", response_model=WidgetLayout)
def reorder_widgets(reorder: WidgetReorder, service: WidgetService = Depends(get_widget_service)):
    try:
        return _layout(service.reorder(reorder.ordered_ids))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/reset", response_model=WidgetLayout)
def reset_widgets(service: WidgetService = Depends(get_widget_service)):
    """Restore the default layout"""
    return _layout(service.reset())
