# core/utils/routing.py
from typing import Optional
from urllib.parse import urlencode

PROTECTED_ROUTES = ("/dashboard", "/books", "/settings", "/wishlist")
PUBLIC_ONLY_ROUTES = ("/login",)
HOME_ROUTE = "/dashboard"
LOGIN_ROUTE = "/login"


def is_protected_route(pathname: str) -> bool:
    return any(pathname == route or pathname.startswith(f"{route}/") for route in PROTECTED_ROUTES)


def resolve_redirect(pathname: str, is_authenticated: bool) -> Optional[str]:
    """Where a navigation to `pathname` should be redirected, or None to let it through.

    Signed-in users skip the landing and login pages; anonymous users hitting
    a protected page are sent to login with the original path preserved.
    """
    if pathname == "/" and is_authenticated:
        return HOME_ROUTE
    if is_protected_route(pathname) and not is_authenticated:
        return f"{LOGIN_ROUTE}?{urlencode({'redirect': pathname})}"
    if pathname in PUBLIC_ONLY_ROUTES and is_authenticated:
        return HOME_ROUTE
    return None
