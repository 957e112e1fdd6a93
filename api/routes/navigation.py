# api/routes/navigation.py
from typing import Optional
from fastapi import APIRouter, Depends, Query

from api.deps import get_optional_user_id
from api.schemas.lookup import NavigationResult
from core.utils.routing import resolve_redirect
from core.utils.theme import ThemePreference, resolve_theme, theme_color

router = APIRouter(prefix="/api/navigation", tags=["navigation"])


@router.get("", response_model=NavigationResult)
def resolve_navigation(
    path: str = Query(..., description="Path being navigated to"),
    theme: Optional[ThemePreference] = Query(None, description="Stored theme preference"),
    prefers_dark: bool = Query(False, description="Whether the OS prefers a dark theme"),
    user_id: Optional[str] = Depends(get_optional_user_id),
):
    """Redirect target and theme for one navigation"""
    is_authenticated = user_id is not None
    resolved = resolve_theme(path, is_authenticated, theme.value if theme else None, prefers_dark)
    return {
        "path": path,
        "redirect": resolve_redirect(path, is_authenticated),
        "theme": resolved,
        "theme_color": theme_color(resolved),
    }
