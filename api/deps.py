# api/deps.py
from typing import Any, Optional
from fastapi import HTTPException, Request, status

from core.auth import SESSION_COOKIE_NAME, InvalidSession, verify_identity_token


def _request_token(request: Request) -> Optional[str]:
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if token:
        return token
    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials
    return None


def get_current_user_id(request: Request) -> str:
    """Authenticated user id from the session cookie or a Bearer token"""
    try:
        return verify_identity_token(_request_token(request))
    except InvalidSession as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_optional_user_id(request: Request) -> Optional[str]:
    try:
        return verify_identity_token(_request_token(request))
    except InvalidSession:
        return None


async def request_body(request: Request) -> bytes:
    """Raw request body, read here so sync routes stay off the event loop"""
    return await request.body()


async def json_body(request: Request) -> Any:
    """Parsed JSON body, or None when the body is empty or not valid JSON"""
    try:
        return await request.json()
    except ValueError:
        return None
