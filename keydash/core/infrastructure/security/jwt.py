"""Session token handling.

Session tokens are issued by the identity provider and signed with the shared
SECRET_KEY. The subject is the user's email.
"""

from datetime import UTC, datetime, timedelta

import jwt
from loguru import logger
from pydantic import BaseModel, Field

from keydash.core.config import settings
from keydash.core.domain.exceptions import AuthenticationError

DEFAULT_SESSION_TTL = timedelta(days=30)


class SessionTokenPayload(BaseModel):
    """Session token payload."""

    sub: str = Field(..., min_length=1, description="User email")
    exp: int = Field(..., description="Expiry timestamp", gt=0)
    name: str | None = Field(None, description="Display name")


def create_session_token(
    email: str,
    name: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a session token (used by local tooling and tests)."""
    expire = datetime.now(UTC) + (expires_delta or DEFAULT_SESSION_TTL)
    to_encode: dict[str, object] = {"exp": expire, "sub": email}
    if name:
        to_encode["name"] = name
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_session_token(token: str) -> SessionTokenPayload:
    """Decode and validate a session token.

    Raises:
        AuthenticationError: token expired, malformed or missing a subject
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Session has expired")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid session token: {e}")
        raise AuthenticationError("Invalid session")

    sub = payload.get("sub")
    if not isinstance(sub, str) or not sub:
        raise AuthenticationError("Invalid session payload")
    name = payload.get("name")
    return SessionTokenPayload(
        sub=sub,
        exp=payload.get("exp", 0),
        name=name if isinstance(name, str) else None,
    )
