# tests/test_services/test_widget_service.py
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from core.sa.models import WidgetSettings
from core.sa.repositories import WidgetSettingsRepository
from core.schemas import DEFAULT_WIDGETS, WidgetConfig, WidgetConfigUpdate, WidgetOptions
from core.services.widget_service import WidgetService
from core.utils.preferences import MemoryStore

KEY = "widgetSettings:user_1"


@pytest.fixture
def local():
    return MemoryStore()


@pytest.fixture
def widgets(db_session, user_id, local):
    return WidgetService(db_session, user_id, local=local)


def ids(layout):
    return [w.id for w in layout]


def test_defaults_when_nothing_saved(widgets):
    layout = widgets.load()
    assert ids(layout) == [w.id for w in DEFAULT_WIDGETS]
    assert [w.order for w in layout] == list(range(len(DEFAULT_WIDGETS)))


def test_save_persists_remote_and_local(widgets, db_session, user_id, local):
    layout = widgets.load()
    layout[0] = layout[0].model_copy(update={"enabled": False})
    widgets.save(layout)

    document = db_session.get(WidgetSettings, user_id)
    assert document.version == 1
    assert document.widgets[0] == {"id": "welcome", "enabled": False, "order": 0, "size": 12, "settings": {}}
    assert local.get(KEY)[0]["enabled"] is False
    assert widgets.load()[0].enabled is False


def test_local_copy_restores_missing_remote(db_session, user_id, local):
    local.set(KEY, [{"id": "topRated", "enabled": True, "order": 0, "size": 12, "settings": {"count": 5}}])
    layout = WidgetService(db_session, user_id, local=local).load()

    assert layout[0].id == "topRated"
    assert layout[0].settings.count == 5
    # Pushed back up to the database
    assert db_session.get(WidgetSettings, user_id) is not None


def test_saved_layout_gains_new_defaults(db_session, user_id, local):
    WidgetSettingsRepository(db_session, user_id).save(KEY, [WidgetConfig(id="wishlist", order=0)])
    layout = WidgetService(db_session, user_id, local=local).load()
    assert layout[0].id == "wishlist"
    assert len(layout) == len(DEFAULT_WIDGETS)


def test_unreadable_remote_falls_back_to_local(db_session, user_id, local):
    local.set(KEY, [{"id": "seriesProgress", "order": 0}])
    error = OperationalError("SELECT", {}, Exception("locked"))
    with patch.object(WidgetSettingsRepository, "load", side_effect=error):
        layout = WidgetService(db_session, user_id, local=local).load()
    assert layout[0].id == "seriesProgress"


def test_invalid_stored_entries_are_skipped(db_session, user_id, local):
    db_session.add(WidgetSettings(user_id=user_id, version=1, widgets=[{"id": "clock"}, {"id": "topRated"}]))
    db_session.commit()
    layout = WidgetService(db_session, user_id, local=local).load()
    assert "clock" not in ids(layout)
    assert layout[0].id == "topRated"


def test_update_widget_merges_settings(widgets):
    widgets.update_widget("topRated", WidgetConfigUpdate(settings=WidgetOptions(count=8)))
    widgets.update_widget("topRated", WidgetConfigUpdate(size=12))

    top = next(w for w in widgets.load() if w.id == "topRated")
    assert top.size == 12
    assert top.settings.count == 8


def test_update_unknown_widget(widgets):
    with pytest.raises(ValueError, match="Unknown widget"):
        widgets.update_widget("clock", WidgetConfigUpdate(enabled=False))


def test_reorder_puts_listed_first(widgets):
    layout = widgets.reorder(["seriesProgress", "wishlist"])
    assert ids(layout)[:3] == ["seriesProgress", "wishlist", "welcome"]
    assert [w.order for w in layout] == list(range(len(layout)))


def test_reorder_unknown_id(widgets):
    with pytest.raises(ValueError):
        widgets.reorder(["clock"])


def test_reset(widgets):
    widgets.reorder(["seriesProgress"])
    assert ids(widgets.reset()) == [w.id for w in DEFAULT_WIDGETS]
