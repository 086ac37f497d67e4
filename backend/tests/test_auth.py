"""Tests for bearer token verification."""

from datetime import timedelta

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from smartfarm.auth.dependencies import get_current_user
from smartfarm.auth.service import (
    CurrentUser,
    InvalidTokenError,
    decode_access_token,
)
from smartfarm.config import JWTSecrets, get_config

from conftest import create_access_token

SECRETS = JWTSecrets(secret_key="test-secret")


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestDecodeAccessToken:
    """Tests for decode_access_token."""

    def test_valid_token(self):
        token = create_access_token({"sub": "user-42", "role": "ADMIN"}, SECRETS)
        user = decode_access_token(token, SECRETS)
        assert user == CurrentUser(id="user-42", role="ADMIN")

    def test_role_is_optional(self):
        token = create_access_token({"sub": "user-42"}, SECRETS)
        assert decode_access_token(token, SECRETS).role is None

    def test_wrong_secret(self):
        token = create_access_token({"sub": "user-42"}, JWTSecrets(secret_key="other"))
        with pytest.raises(InvalidTokenError):
            decode_access_token(token, SECRETS)

    def test_expired(self):
        token = create_access_token({"sub": "user-42"}, SECRETS, expires_delta=timedelta(seconds=-5))
        with pytest.raises(InvalidTokenError):
            decode_access_token(token, SECRETS)

    def test_missing_subject(self):
        token = create_access_token({"role": "FARMER"}, SECRETS)
        with pytest.raises(InvalidTokenError):
            decode_access_token(token, SECRETS)


class TestGetCurrentUser:
    """Tests for the get_current_user dependency."""

    def test_no_credentials(self):
        with pytest.raises(HTTPException) as exc:
            get_current_user(None)
        assert exc.value.status_code == 401

    def test_garbage_token(self):
        with pytest.raises(HTTPException) as exc:
            get_current_user(_bearer("garbage"))
        assert exc.value.status_code == 401
        assert exc.value.detail == "Invalid token"

    def test_token_signed_with_configured_secret(self):
        token = create_access_token({"sub": "farmer-7"}, get_config().secrets.jwt)
        assert get_current_user(_bearer(token)).id == "farmer-7"
