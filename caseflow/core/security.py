"""Bearer token handling.

Tokens are issued by the external auth service; this module only verifies
them. create_access_token exists for operational tooling and tests.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import jwt

from caseflow.core.exceptions import AuthenticationError

if TYPE_CHECKING:
    from caseflow.core.config import Settings


def create_access_token(
    user_id: str,
    settings: Settings,
    *,
    expires_delta: timedelta | None = None,
) -> str:
    """Sign a token whose subject is the given user ID."""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_expire_minutes)

    payload = {
        "sub": user_id,
        "iat": datetime.now(UTC),
        "exp": datetime.now(UTC) + expires_delta,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> str:
    """Verify a token and return the user ID it was issued for."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError("Token has expired") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthenticationError("Invalid token") from exc

    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Invalid token: missing subject")
    return str(user_id)
