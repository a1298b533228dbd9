"""Unit tests for JWT handler and the caller dependency."""

from datetime import timedelta

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt

from src.pm_common.errors import InvalidCredentialsError
from src.pm_gateway.auth.dependencies import get_current_caller
from src.pm_gateway.auth.jwt_handler import create_access_token, decode_token


def test_access_token_contains_correct_claims() -> None:
    token = create_access_token("alice")
    # Decode without verification to inspect claims
    payload = jwt.get_unverified_claims(token)
    assert payload["sub"] == "alice"
    assert payload["type"] == "access"


def test_decode_valid_token() -> None:
    assert decode_token(create_access_token("alice"))["sub"] == "alice"


def test_expired_token_raises() -> None:
    token = create_access_token("alice", expires_in=timedelta(seconds=-1))
    with pytest.raises(InvalidCredentialsError):
        decode_token(token)


def test_tampered_token_raises() -> None:
    token = create_access_token("alice")
    with pytest.raises(InvalidCredentialsError):
        decode_token(token[:-2] + ("A" if token[-2] != "A" else "B") + token[-1])


def test_wrong_secret_raises() -> None:
    token = jwt.encode({"sub": "alice", "type": "access"}, "other-secret", algorithm="HS256")
    with pytest.raises(InvalidCredentialsError):
        decode_token(token)


def test_wrong_type_raises() -> None:
    from config.settings import settings

    token = jwt.encode({"sub": "alice", "type": "refresh"}, settings.JWT_SECRET, algorithm="HS256")
    with pytest.raises(InvalidCredentialsError):
        decode_token(token)


class TestGetCurrentCaller:
    @pytest.mark.asyncio
    async def test_returns_subject(self) -> None:
        creds = HTTPAuthorizationCredentials(scheme="Bearer", credentials=create_access_token("bob"))
        assert await get_current_caller(creds) == "bob"

    @pytest.mark.asyncio
    async def test_missing_credentials(self) -> None:
        with pytest.raises(HTTPException) as exc:
            await get_current_caller(None)
        assert exc.value.status_code == 401

    @pytest.mark.asyncio
    async def test_bad_token(self) -> None:
        creds = HTTPAuthorizationCredentials(scheme="Bearer", credentials="not-a-jwt")
        with pytest.raises(HTTPException) as exc:
            await get_current_caller(creds)
        assert exc.value.status_code == 401
