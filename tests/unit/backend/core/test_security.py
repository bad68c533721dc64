"""
Unit Tests for Security Module.

JWT operations execute for real. Only the config boundary is stubbed
with real Pydantic schema objects.
"""

from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import patch

import pytest
from jose import jwt

from gumboard.backend.core.config_schema import JwtSchema
from gumboard.backend.core.exceptions import AuthenticationError
from gumboard.backend.core.security import (
    create_access_token,
    decode_token,
    resolve_user_id,
)

TEST_JWT_SECRET = "test-secret-key-that-is-long-enough-for-testing-purposes"


@pytest.fixture
def jwt_config():
    return JwtSchema(
        algorithm="HS256",
        access_token_expire_minutes=30,
        audience="test-api",
    )


@pytest.fixture(autouse=True)
def _stub_config(jwt_config):
    """Stub the config boundary so security functions can resolve settings."""
    settings = SimpleNamespace(jwt_secret=TEST_JWT_SECRET)
    app_config = SimpleNamespace(security=SimpleNamespace(jwt=jwt_config))
    with (
        patch("gumboard.backend.core.security.get_settings", return_value=settings),
        patch("gumboard.backend.core.security.get_app_config", return_value=app_config),
    ):
        yield


class TestAccessTokens:
    """Token creation and decoding."""

    def test_token_carries_subject_and_audience(self):
        payload = decode_token(create_access_token({"sub": "user-42"}))
        assert payload["sub"] == "user-42"
        assert payload["aud"] == "test-api"
        assert payload["type"] == "access"

    def test_does_not_mutate_input(self):
        data = {"sub": "user-1"}
        create_access_token(data)
        assert data == {"sub": "user-1"}

    def test_expired_token_is_rejected(self):
        token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(seconds=-1))
        with pytest.raises(AuthenticationError):
            decode_token(token)

    def test_token_signed_with_other_secret_is_rejected(self):
        token = jwt.encode({"sub": "user-1", "aud": "test-api"}, "other-secret", algorithm="HS256")
        with pytest.raises(AuthenticationError):
            decode_token(token)

    def test_token_for_other_audience_is_rejected(self):
        token = jwt.encode({"sub": "user-1", "aud": "elsewhere"}, TEST_JWT_SECRET, algorithm="HS256")
        with pytest.raises(AuthenticationError):
            decode_token(token)


class TestResolveUserId:
    """Caller identity from the Authorization header."""

    def test_missing_header_is_anonymous(self):
        assert resolve_user_id(None) is None
        assert resolve_user_id("") is None

    def test_bearer_token_resolves_subject(self):
        token = create_access_token({"sub": "user-7"})
        assert resolve_user_id(f"Bearer {token}") == "user-7"

    def test_scheme_is_case_insensitive(self):
        token = create_access_token({"sub": "user-7"})
        assert resolve_user_id(f"bearer {token}") == "user-7"

    @pytest.mark.parametrize("header", ["Basic abc123", "Bearer", "Bearer    ", "token-only"])
    def test_malformed_header_is_rejected(self, header):
        with pytest.raises(AuthenticationError):
            resolve_user_id(header)

    def test_garbage_token_is_rejected(self):
        with pytest.raises(AuthenticationError):
            resolve_user_id("Bearer not-a-jwt")

    def test_token_without_subject_is_rejected(self):
        token = create_access_token({"role": "viewer"})
        with pytest.raises(AuthenticationError, match="subject"):
            resolve_user_id(f"Bearer {token}")
