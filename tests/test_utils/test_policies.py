# tests/test_utils/test_policies.py
import json
from datetime import date, datetime, UTC
from unittest.mock import MagicMock

import pytest

from core.services.forms import FormTracker
from core.utils.cancellation import OperationCancelled, ViewScope
from core.utils.debounce import Debouncer
from core.utils.preferences import JsonFileStore, MemoryStore, PreferenceCache
from core.utils.routing import is_protected_route, resolve_redirect
from core.utils.theme import ThemePreference, resolve_theme, theme_color


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


# Debounce

def test_debouncer_fires_once_with_latest_arguments():
    clock = FakeClock()
    callback = MagicMock()
    debouncer = Debouncer(callback, wait=0.15, clock=clock)

    debouncer.call("d")
    clock.advance(0.1)
    debouncer.call("du")
    clock.advance(0.1)
    assert not debouncer.poll()
    clock.advance(0.1)
    assert debouncer.poll()

    callback.assert_called_once_with("du")
    assert not debouncer.pending


def test_debouncer_flush_and_cancel():
    callback = MagicMock()
    debouncer = Debouncer(callback, clock=FakeClock())

    debouncer.call(1)
    debouncer.cancel()
    assert not debouncer.flush()

    debouncer.call(2)
    assert debouncer.flush()
    callback.assert_called_once_with(2)


# Cancellation

def test_closing_scope_cancels_outstanding_tokens():
    scope = ViewScope()
    token = scope.token()
    token.raise_if_cancelled()

    scope.close()
    assert token.cancelled
    with pytest.raises(OperationCancelled):
        token.raise_if_cancelled()


def test_tokens_from_closed_scope_start_cancelled():
    with ViewScope() as scope:
        pass
    assert scope.token().cancelled


# Preferences

def test_remote_value_wins():
    remote = MagicMock()
    remote.load.return_value = "dark"
    local = MemoryStore({"theme": "light"})

    cache = PreferenceCache("theme", remote, local, default=lambda: "system")
    assert cache.load() == "dark"
    remote.save.assert_not_called()


def test_local_value_is_pushed_to_empty_remote():
    remote = MagicMock()
    remote.load.return_value = None
    local = MemoryStore({"theme": "light"})

    cache = PreferenceCache("theme", remote, local, default=lambda: "system")
    assert cache.load() == "light"
    remote.save.assert_called_once_with("theme", "light")


def test_default_when_nothing_stored():
    remote = MagicMock()
    remote.load.return_value = None
    cache = PreferenceCache("theme", remote, MemoryStore(), default=lambda: "system")
    assert cache.load() == "system"


def test_remote_failure_falls_back_to_local():
    remote = MagicMock()
    remote.load.side_effect = ConnectionError("offline")
    cache = PreferenceCache("theme", remote, MemoryStore({"theme": "dark"}), default=lambda: "system")
    assert cache.load() == "dark"


def test_remote_failure_with_no_local_gives_default():
    remote = MagicMock()
    remote.load.side_effect = ConnectionError("offline")
    cache = PreferenceCache("theme", remote, MemoryStore(), default=lambda: "system")
    assert cache.load() == "system"


def test_save_writes_remote_then_local():
    remote = MagicMock()
    local = MemoryStore()
    cache = PreferenceCache("theme", remote, local, default=lambda: "system", dump=str.upper)

    cache.save("dark")
    remote.save.assert_called_once_with("theme", "dark")
    assert local.get("theme") == "DARK"


def test_failed_remote_save_propagates_and_skips_local():
    remote = MagicMock()
    remote.save.side_effect = ConnectionError("offline")
    local = MemoryStore()
    cache = PreferenceCache("theme", remote, local, default=lambda: "system")

    with pytest.raises(ConnectionError):
        cache.save("dark")
    assert local.get("theme") is None


def test_json_file_store(tmp_path):
    store = JsonFileStore(tmp_path / "nested" / "prefs.json")
    assert store.get("theme") is None

    store.set("theme", "dark")
    store.set("other", [1, 2])
    assert store.get("theme") == "dark"
    assert json.loads((tmp_path / "nested" / "prefs.json").read_text()) == {"theme": "dark", "other": [1, 2]}


def test_json_file_store_ignores_corrupt_file(tmp_path):
    path = tmp_path / "prefs.json"
    path.write_text("{not json")
    assert JsonFileStore(path).get("theme") is None


# Routing and theme

@pytest.mark.parametrize("path, authenticated, expected", [
    ("/", True, "/dashboard"),
    ("/", False, None),
    ("/books/abc", False, "/login?redirect=%2Fbooks%2Fabc"),
    ("/books/abc", True, None),
    ("/login", True, "/dashboard"),
    ("/login", False, None),
    ("/privacy", False, None),
    ("/bookshelf", False, None),
])
def test_resolve_redirect(path, authenticated, expected):
    assert resolve_redirect(path, authenticated) == expected


def test_protected_routes():
    assert is_protected_route("/settings")
    assert is_protected_route("/wishlist/123")
    assert not is_protected_route("/support")


def test_login_is_always_light():
    assert resolve_theme("/login", True, "dark", system_prefers_dark=True) == "light"


def test_public_pages_are_light_for_anonymous_visitors():
    assert resolve_theme("/privacy", False, "dark") == "light"
    assert resolve_theme("/privacy", True, "dark") == "dark"


def test_system_preference_follows_os():
    assert resolve_theme("/dashboard", True, ThemePreference.SYSTEM, system_prefers_dark=True) == "dark"
    assert resolve_theme("/dashboard", True, None, system_prefers_dark=False) == "light"
    assert resolve_theme("/dashboard", True, ThemePreference.LIGHT, system_prefers_dark=True) == "light"


def test_theme_colour():
    assert theme_color("dark") == "#111827"
    assert theme_color("unknown") == "#ffffff"


# Form tracking

def test_form_tracker_reports_only_changed_fields():
    tracker = FormTracker({"title": "Dune", "notes": None, "rating": 4})
    assert tracker.changes({"title": "Dune", "notes": "", "rating": 5}) == {"rating": 5}
    assert not tracker.is_dirty({"title": "Dune", "notes": "  "})


def test_form_tracker_compares_dates_and_lists():
    tracker = FormTracker({
        "reads": [{"started_at": datetime(2024, 1, 1, tzinfo=UTC)}],
        "published": date(2020, 5, 1),
    })
    same = {"reads": [{"started_at": datetime(2024, 1, 1)}], "published": date(2020, 5, 1)}
    assert tracker.changes(same) == {}


def test_form_tracker_mark_saved():
    tracker = FormTracker({"title": "Dune"})
    assert tracker.is_dirty({"title": "Dune Messiah"})
    tracker.mark_saved({"title": "Dune Messiah"})
    assert not tracker.is_dirty({"title": "Dune Messiah"})
