# core/services/forms.py
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional

from core.utils.dates import as_utc


def _comparable(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [_comparable(v) for v in value]
    if isinstance(value, dict):
        return {k: _comparable(v) for k, v in value.items()}
    if hasattr(value, 'value') and hasattr(value, 'name'):  # enum
        return value.value
    return value


class FormTracker:
    """Dirty-state tracking for an edit form.

    Holds the values the form was loaded with. `changes` returns only the
    submitted fields whose value differs from the loaded one, treating blank
    strings and None as the same thing.
    """

    def __init__(self, initial: Mapping[str, Any]):
        self.initial: Dict[str, Any] = dict(initial)

    def changes(self, submitted: Mapping[str, Any]) -> Dict[str, Any]:
        return {
            field: value for field, value in submitted.items()
            if _comparable(value) != _comparable(self.initial.get(field))
        }

    def is_dirty(self, submitted: Mapping[str, Any]) -> bool:
        return bool(self.changes(submitted))

    def mark_saved(self, saved: Optional[Mapping[str, Any]] = None) -> None:
        if saved:
            self.initial.update(saved)
