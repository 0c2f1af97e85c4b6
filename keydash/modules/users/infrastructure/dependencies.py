"""Users module infrastructure dependencies."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from keydash.core.infrastructure.database.session import (
    Database,
    get_database,
    get_db_session,
)
from keydash.modules.users.application.services import (
    UserQueryService,
    UserQueryServiceScope,
)
from keydash.modules.users.infrastructure.mappers import UserMapper
from keydash.modules.users.infrastructure.repositories import (
    PostgreSQLUserRepository,
)


def get_user_mapper() -> UserMapper:
    return UserMapper()


async def get_user_repository(
    session: AsyncSession = Depends(get_db_session),
    mapper: UserMapper = Depends(get_user_mapper),
) -> PostgreSQLUserRepository:
    return PostgreSQLUserRepository(session, mapper)


def get_user_query_service_scope(
    database: Database = Depends(get_database),
) -> UserQueryServiceScope:
    @asynccontextmanager
    async def scope() -> AsyncIterator[UserQueryService]:
        async with database.session() as session:
            yield UserQueryService(PostgreSQLUserRepository(session, UserMapper()))

    return scope
