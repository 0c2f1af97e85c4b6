"""API Key repository implementations."""

from loguru import logger
from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from keydash.modules.api_keys.domain.entities import ApiKey
from keydash.modules.api_keys.domain.exceptions import (
    ApiKeyNotFoundError,
    DuplicateApiKeyError,
)
from keydash.modules.api_keys.domain.repository import ApiKeyRepository
from keydash.modules.api_keys.infrastructure.mappers import ApiKeyMapper
from keydash.modules.api_keys.infrastructure.models import ApiKeyModel


class PostgreSQLApiKeyRepository(ApiKeyRepository):
    """PostgreSQL API Key repository implementation."""

    def __init__(self, session: AsyncSession, mapper: ApiKeyMapper):
        self.session = session
        self.mapper = mapper

    async def list_by_user(self, user_id: str) -> list[ApiKey]:
        statement = (
            select(ApiKeyModel)
            .where(ApiKeyModel.user_id == user_id)
            .order_by(col(ApiKeyModel.name).asc(), col(ApiKeyModel.id).asc())
        )
        result = await self.session.execute(statement)
        return self.mapper.to_domain_list(result.scalars().all())

    async def get_for_owner(self, key_id: str, user_id: str) -> ApiKey | None:
        statement = select(ApiKeyModel).where(
            ApiKeyModel.id == key_id,
            ApiKeyModel.user_id == user_id,
        )
        result = await self.session.execute(statement)
        model = result.scalar_one_or_none()
        return self.mapper.to_domain(model) if model else None

    async def get_by_value_for_owner(
        self, key_value: str, user_id: str
    ) -> ApiKey | None:
        statement = select(ApiKeyModel).where(
            ApiKeyModel.key_value == key_value,
            ApiKeyModel.user_id == user_id,
        )
        result = await self.session.execute(statement)
        model = result.scalar_one_or_none()
        return self.mapper.to_domain(model) if model else None

    async def exists_by_value(
        self, key_value: str, exclude_id: str | None = None
    ) -> bool:
        statement = select(ApiKeyModel.id).where(ApiKeyModel.key_value == key_value)
        if exclude_id is not None:
            statement = statement.where(ApiKeyModel.id != exclude_id)
        result = await self.session.execute(statement.limit(1))
        return result.first() is not None

    async def create(self, entity: ApiKey) -> ApiKey:
        model = self.mapper.to_model(entity)
        await self._flush_unique(model)
        await self.session.refresh(model)
        return self.mapper.to_domain(model)

    async def update(self, entity: ApiKey) -> ApiKey:
        existing = await self.session.get(ApiKeyModel, entity.id)
        if not existing or existing.user_id != entity.user_id:
            raise ApiKeyNotFoundError()

        # usage_count is only ever changed by increment_usage
        existing.name = entity.name
        existing.key_value = entity.key_value

        await self._flush_unique(existing)
        await self.session.refresh(existing)
        return self.mapper.to_domain(existing)

    async def delete(self, key_id: str, user_id: str) -> bool:
        statement = delete(ApiKeyModel).where(
            col(ApiKeyModel.id) == key_id,
            col(ApiKeyModel.user_id) == user_id,
        )
        result = await self.session.execute(statement)
        return result.rowcount > 0

    async def increment_usage(
        self, key_value: str, cap: int | None = None
    ) -> int | None:
        statement = (
            update(ApiKeyModel)
            .where(col(ApiKeyModel.key_value) == key_value)
            .values(usage_count=col(ApiKeyModel.usage_count) + 1)
            .returning(col(ApiKeyModel.usage_count))
            .execution_options(synchronize_session=False)
        )
        if cap is not None:
            statement = statement.where(col(ApiKeyModel.usage_count) < cap)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def _flush_unique(self, model: ApiKeyModel) -> None:
        """Flush inside a savepoint; the unique index backs up the service check."""
        try:
            async with self.session.begin_nested():
                self.session.add(model)
        except IntegrityError as e:
            logger.warning(f"Unique constraint rejected key write: {e.orig}")
            raise DuplicateApiKeyError() from e
