"""JWT access tokens carrying the caller identity.

The core never looks at credentials; it receives the identity as a plain
string. Tokens are HS256 with one shared JWT_SECRET and the identity in the
``sub`` claim. There is no refresh flow and no revocation: a token is valid
until ``exp``.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from config.settings import settings
from src.pm_common.errors import InvalidCredentialsError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"
_TOKEN_TYPE = "access"


def create_access_token(subject: str, expires_in: timedelta | None = None) -> str:
    """Issue an access token for subject (default lifetime: JWT_EXPIRE_MINUTES)."""
    now = datetime.now(UTC)
    payload = {
        "sub": subject,
        "type": _TOKEN_TYPE,
        "iat": now,
        "exp": now + (expires_in or timedelta(minutes=settings.JWT_EXPIRE_MINUTES)),
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def decode_token(token: str) -> dict[str, Any]:
    """Decode and validate an access token.

    Raises:
        InvalidCredentialsError: bad signature, expired, wrong type or no subject.
    """
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    if payload.get("type") != _TOKEN_TYPE or not payload.get("sub"):
        raise InvalidCredentialsError()
    return payload
