# core/sa/repositories/widget_settings.py
import logging
from typing import Any, Dict, List, Optional
from pydantic import ValidationError
from sqlalchemy.orm import Session
from core.sa.models import WidgetSettings, utcnow
from core.schemas.widget import WIDGET_SETTINGS_VERSION, WidgetConfig

logger = logging.getLogger(__name__)


def dump_widgets(widgets: List[WidgetConfig]) -> List[Dict[str, Any]]:
    return [widget.model_dump(mode='json', by_alias=True, exclude_none=True) for widget in widgets]


def parse_widgets(raw: Optional[List[Dict[str, Any]]]) -> List[WidgetConfig]:
    """Parse stored widget entries, skipping ones that no longer validate"""
    widgets = []
    for entry in raw or []:
        try:
            widgets.append(WidgetConfig.model_validate(entry))
        except ValidationError as e:
            logger.warning(f"Skipping invalid widget config {entry!r}: {e.error_count()} errors")
    return widgets


class WidgetSettingsRepository:
    """Remote store for a user's dashboard layout document"""

    def __init__(self, session: Session, user_id: str):
        self.session = session
        self.user_id = user_id

    def get_document(self) -> Optional[WidgetSettings]:
        return self.session.get(WidgetSettings, self.user_id)

    def load(self, key: str = 'widgets') -> Optional[List[WidgetConfig]]:
        """Saved widgets, or None if the user has never saved a layout"""
        document = self.get_document()
        if document is None:
            return None
        return parse_widgets(document.widgets)

    def save(self, key: str, widgets: List[WidgetConfig]) -> WidgetSettings:
        document = self.get_document()
        if document is None:
            document = WidgetSettings(user_id=self.user_id)
            self.session.add(document)
        document.version = WIDGET_SETTINGS_VERSION
        document.widgets = dump_widgets(widgets)
        document.updated_at = utcnow()
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return document
