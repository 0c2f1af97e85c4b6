"""API Keys module infrastructure dependencies."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from keydash.core.config import settings
from keydash.core.infrastructure.database.session import (
    Database,
    get_database,
    get_db_session,
)
from keydash.modules.api_keys.application.service import (
    ApiKeyService,
    ApiKeyServiceScope,
)
from keydash.modules.api_keys.infrastructure.mappers import ApiKeyMapper
from keydash.modules.api_keys.infrastructure.repositories import (
    PostgreSQLApiKeyRepository,
)


def get_api_key_mapper() -> ApiKeyMapper:
    return ApiKeyMapper()


async def get_api_key_repository(
    session: AsyncSession = Depends(get_db_session),
    mapper: ApiKeyMapper = Depends(get_api_key_mapper),
) -> PostgreSQLApiKeyRepository:
    return PostgreSQLApiKeyRepository(session, mapper)


def get_api_key_service_scope(
    database: Database = Depends(get_database),
) -> ApiKeyServiceScope:
    """Service factory for routes that must not hold a connection.

    Each ``async with scope()`` is its own transaction, committed on exit.
    """

    @asynccontextmanager
    async def scope() -> AsyncIterator[ApiKeyService]:
        async with database.session() as session:
            yield ApiKeyService(
                PostgreSQLApiKeyRepository(session, ApiKeyMapper()),
                strict_usage_cap=settings.API_KEY_STRICT_USAGE_CAP,
            )

    return scope
