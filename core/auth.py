# core/auth.py
"""
Session identity tokens.

The session cookie carries a signed HS256 token whose `sub` claim is the
user id. Tokens are issued by the identity provider (or `create_identity_token`
in development and tests) and only verified here.
"""
from datetime import datetime, timedelta, UTC
from typing import Optional

import jwt

from core.config import get_settings

SESSION_COOKIE_NAME = "session"
SESSION_MAX_AGE = 60 * 60 * 24 * 7
ALGORITHM = "HS256"


class InvalidSession(Exception):
    pass


def create_identity_token(user_id: str, expires_in: int = SESSION_MAX_AGE, secret: Optional[str] = None) -> str:
    now = datetime.now(UTC)
    payload = {"sub": user_id, "iat": now, "exp": now + timedelta(seconds=expires_in)}
    return jwt.encode(payload, secret or get_settings().session_secret, algorithm=ALGORITHM)


def verify_identity_token(token: Optional[str], secret: Optional[str] = None) -> str:
    """Return the user id from a valid token.

    Raises:
        InvalidSession: If the token is missing, expired, badly signed or has no subject
    """
    if not token:
        raise InvalidSession("Not authenticated")
    try:
        payload = jwt.decode(token, secret or get_settings().session_secret, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise InvalidSession("Session expired")
    except jwt.PyJWTError:
        raise InvalidSession("Invalid session")

    user_id = payload.get("sub")
    if not user_id:
        raise InvalidSession("Invalid session")
    return user_id


def session_cookie_options() -> dict:
    """Cookie attributes for the session cookie"""
    return {
        "httponly": True,
        "secure": get_settings().is_production,
        "samesite": "lax",
        "max_age": SESSION_MAX_AGE,
        "path": "/",
    }
