# tests/test_auth.py
import jwt
import pytest

from core.auth import (
    ALGORITHM, InvalidSession, create_identity_token, session_cookie_options, verify_identity_token,
)


def test_round_trip_user_id():
    assert verify_identity_token(create_identity_token("user_1")) == "user_1"


@pytest.mark.parametrize("token", [None, ""])
def test_missing_token(token):
    with pytest.raises(InvalidSession, match="Not authenticated"):
        verify_identity_token(token)


def test_expired_token():
    with pytest.raises(InvalidSession, match="Session expired"):
        verify_identity_token(create_identity_token("user_1", expires_in=-1))


def test_wrong_secret():
    token = create_identity_token("user_1", secret="someone-else")
    with pytest.raises(InvalidSession, match="Invalid session"):
        verify_identity_token(token)


def test_token_without_subject():
    token = jwt.encode({"name": "nobody"}, "test-secret", algorithm=ALGORITHM)
    with pytest.raises(InvalidSession, match="Invalid session"):
        verify_identity_token(token)


def test_cookie_is_secure_only_in_production(monkeypatch, test_settings):
    assert session_cookie_options()["secure"] is False
    assert session_cookie_options()["httponly"] is True

    from core.config import get_settings
    monkeypatch.setenv("APP_ENV", "production")
    get_settings.cache_clear()
    assert session_cookie_options()["secure"] is True
