# core/utils/theme.py
from enum import Enum
from typing import Optional


class ThemePreference(str, Enum):
    SYSTEM = "system"
    LIGHT = "light"
    DARK = "dark"


PUBLIC_ROUTES = ("/", "/login", "/privacy", "/terms", "/support")

THEME_COLORS = {"light": "#ffffff", "dark": "#111827"}


def resolve_theme(route: str, is_authenticated: bool, stored_preference: Optional[str] = None,
                  system_prefers_dark: bool = False) -> str:
    """Resolve the theme ("light" or "dark") for one navigation.

    The login page is always light, and the other public pages are light for
    anonymous visitors. Everywhere else the stored preference applies, with
    "system" (or no preference) following the operating system.
    """
    if route == "/login":
        return "light"
    if route in PUBLIC_ROUTES and not is_authenticated:
        return "light"

    if stored_preference == ThemePreference.DARK.value:
        return "dark"
    if stored_preference == ThemePreference.LIGHT.value:
        return "light"
    return "dark" if system_prefers_dark else "light"


def theme_color(resolved_theme: str) -> str:
    """Browser chrome colour for the resolved theme"""
    return THEME_COLORS.get(resolved_theme, THEME_COLORS["light"])
