"""Session authentication dependencies.

Resolves ``Authorization: Bearer <session token>`` into the session identity
and then into the stored user id.
"""

from fastapi import Depends, Request

from keydash.core.application import security as app_security
from keydash.core.application.security import SessionIdentity
from keydash.core.domain.exceptions import AuthenticationError
from keydash.core.infrastructure.security.jwt import decode_session_token
from keydash.modules.users.application.dependencies import (
    get_user_query_service_scope,
)
from keydash.modules.users.application.services import UserQueryServiceScope


async def get_current_session(request: Request) -> SessionIdentity:
    """Decode the bearer session token.

    Raises:
        AuthenticationError: no bearer token or the token is invalid
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.lower().startswith("bearer "):
        raise AuthenticationError("Unauthorized")

    payload = decode_session_token(auth_header[7:].strip())
    return SessionIdentity(email=payload.sub, name=payload.name)


async def get_current_user_id(
    session: SessionIdentity = Depends(app_security.get_current_session),
    users: UserQueryServiceScope = Depends(get_user_query_service_scope),
) -> str:
    """Map the session email to the stored user id (404 when unknown).

    The lookup commits before the route runs, so no connection is held for
    the rest of the request.
    """
    async with users() as query:
        return await query.get_user_id_by_email(session.email)
