# core/services/widget_service.py
"""
Dashboard widget layout, loaded and saved through the preference cache.
"""
import logging
from typing import Any, List, Optional

from sqlalchemy.orm import Session

from core.config import get_settings
from core.sa.repositories import WidgetSettingsRepository
from core.sa.repositories.widget_settings import dump_widgets, parse_widgets
from core.schemas.widget import (
    WidgetConfig,
    WidgetConfigUpdate,
    default_widgets,
    merge_with_defaults,
)
from core.utils.preferences import JsonFileStore, LocalStore, PreferenceCache

logger = logging.getLogger(__name__)


def _normalize(value: Any) -> List[WidgetConfig]:
    """Saved layouts come back as models from the database and as dicts from the local copy"""
    if all(isinstance(w, WidgetConfig) for w in value):
        return merge_with_defaults(list(value))
    return merge_with_defaults(parse_widgets(value))


class WidgetService:
    def __init__(self, session: Session, user_id: str, local: Optional[LocalStore] = None):
        self.user_id = user_id
        self.cache = PreferenceCache(
            key=f"widgetSettings:{user_id}",
            remote=WidgetSettingsRepository(session, user_id),
            local=local if local is not None else JsonFileStore(get_settings().preferences_path),
            default=default_widgets,
            normalize=_normalize,
            dump=dump_widgets,
        )

    def load(self) -> List[WidgetConfig]:
        return sorted(self.cache.load(), key=lambda w: w.order)

    def save(self, widgets: List[WidgetConfig]) -> List[WidgetConfig]:
        ordered = [
            w.model_copy(update={"order": index})
            for index, w in enumerate(sorted(widgets, key=lambda w: w.order))
        ]
        self.cache.save(ordered)
        logger.info(f"Saved widget layout for user {self.user_id}")
        return ordered

    def update_widget(self, widget_id: str, changes: WidgetConfigUpdate) -> List[WidgetConfig]:
        """Apply a partial change to one widget.

        Raises:
            ValueError: If the widget id is unknown
        """
        widgets = self.load()
        index = next((i for i, w in enumerate(widgets) if w.id == widget_id), None)
        if index is None:
            raise ValueError(f"Unknown widget: {widget_id}")

        updates = changes.model_dump(exclude_unset=True, exclude_none=True)
        if "settings" in updates:
            settings = widgets[index].settings.model_copy(update=changes.settings.model_dump(exclude_unset=True))
            updates["settings"] = settings
        widgets[index] = widgets[index].model_copy(update=updates)
        return self.save(widgets)

    def reorder(self, ordered_ids: List[str]) -> List[WidgetConfig]:
        """Put the listed widgets first, in the given order; the rest keep their relative order"""
        widgets = self.load()
        by_id = {w.id: w for w in widgets}
        unknown = [widget_id for widget_id in ordered_ids if widget_id not in by_id]
        if unknown:
            raise ValueError(f"Unknown widget: {unknown[0]}")

        listed = [by_id[widget_id] for widget_id in dict.fromkeys(ordered_ids)]
        rest = [w for w in widgets if w.id not in ordered_ids]
        reordered = [w.model_copy(update={"order": index}) for index, w in enumerate(listed + rest)]
        return self.save(reordered)

    def reset(self) -> List[WidgetConfig]:
        return self.save(default_widgets())
