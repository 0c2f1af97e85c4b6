"""User application services."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from datetime import UTC, datetime

from loguru import logger

from keydash.core.infrastructure.logging import BusinessEvents
from keydash.modules.users.domain.entities import User
from keydash.modules.users.domain.exceptions import UserNotFoundError
from keydash.modules.users.domain.repository import UserRepository


class LoginTrackingService:
    """Keeps the users table in step with successful sign-ins."""

    def __init__(self, repository: UserRepository) -> None:
        self._repo = repository

    async def track_login(self, email: str, name: str | None = None) -> User:
        """Create the user on first sign-in, refresh last_login afterwards."""
        existing = await self._repo.get_by_email(email)
        if existing is None:
            now = datetime.now(UTC)
            user = await self._repo.create(
                User(
                    email=email,
                    name=name or email.split("@")[0],
                    first_login=now,
                    last_login=now,
                    created_at=now,
                    updated_at=now,
                )
            )
            logger.info(f"Created new user record: {email}")
            BusinessEvents.user_login_tracked(email=email, first_login=True)
            return user

        existing.record_login()
        user = await self._repo.update(existing)
        logger.debug(f"Updated last_login for user: {email}")
        BusinessEvents.user_login_tracked(email=email, first_login=False)
        return user


class UserQueryService:
    """Read-side lookups for users."""

    def __init__(self, repository: UserRepository) -> None:
        self._repo = repository

    async def get_by_email(self, email: str) -> User:
        user = await self._repo.get_by_email(email)
        if user is None:
            raise UserNotFoundError()
        return user

    async def get_user_id_by_email(self, email: str) -> str:
        return (await self.get_by_email(email)).id


type UserQueryServiceScope = Callable[
    [], AbstractAsyncContextManager[UserQueryService]
]
