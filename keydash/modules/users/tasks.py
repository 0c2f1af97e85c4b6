"""Background tasks for the users module."""

from loguru import logger

from keydash.core.infrastructure.database.session import Database
from keydash.core.infrastructure.logging import BusinessEvents
from keydash.modules.users.application.services import LoginTrackingService
from keydash.modules.users.infrastructure.mappers import UserMapper
from keydash.modules.users.infrastructure.repositories import (
    PostgreSQLUserRepository,
)


async def track_login_task(database: Database, email: str, name: str | None) -> None:
    """Record a sign-in in its own transaction.

    Scheduled after the response; sign-in never fails because tracking did,
    so every error ends here.
    """
    try:
        async with database.session() as session:
            service = LoginTrackingService(
                PostgreSQLUserRepository(session, UserMapper())
            )
            await service.track_login(email=email, name=name)
    except Exception as e:
        logger.exception(f"Error tracking user login for {email}: {e}")
        BusinessEvents.feature_degraded(feature="login_tracking", reason=str(e))
