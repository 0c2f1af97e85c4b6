"""User repository implementations."""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from keydash.core.domain.exceptions import EntityNotFoundError
from keydash.modules.users.domain.entities import User
from keydash.modules.users.domain.repository import UserRepository
from keydash.modules.users.infrastructure.mappers import UserMapper
from keydash.modules.users.infrastructure.models import UserModel


class PostgreSQLUserRepository(UserRepository):
    """PostgreSQL user repository implementation."""

    def __init__(self, session: AsyncSession, mapper: UserMapper):
        self.session = session
        self.mapper = mapper

    async def get_by_id(self, user_id: str) -> User | None:
        model = await self.session.get(UserModel, user_id)
        return self.mapper.to_domain(model) if model else None

    async def get_by_email(self, email: str) -> User | None:
        statement = select(UserModel).where(UserModel.email == email)
        result = await self.session.execute(statement)
        model = result.scalar_one_or_none()
        return self.mapper.to_domain(model) if model else None

    async def create(self, entity: User) -> User:
        model = self.mapper.to_model(entity)
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)
        return self.mapper.to_domain(model)

    async def update(self, entity: User) -> User:
        existing = await self.session.get(UserModel, entity.id)
        if not existing:
            raise EntityNotFoundError("User", entity.id)

        existing.name = entity.name
        existing.last_login = entity.last_login
        existing.updated_at = entity.updated_at

        self.session.add(existing)
        await self.session.flush()
        await self.session.refresh(existing)
        return self.mapper.to_domain(existing)
