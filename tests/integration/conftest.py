"""Integration-test fixtures.

The app runs on the in-memory store (see tests/conftest.py), so these tests
need no Docker. Tokens are minted locally with the test JWT_SECRET.
"""

import pytest

from src.pm_gateway.auth.jwt_handler import create_access_token


def bearer(user: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def oracle_headers() -> dict[str, str]:
    return bearer("oracle")


@pytest.fixture
def alice_headers() -> dict[str, str]:
    return bearer("alice")


@pytest.fixture
def bob_headers() -> dict[str, str]:
    return bearer("bob")
