"""User entity-model mappers."""

from keydash.core.infrastructure.database.mapper import BaseMapper
from keydash.modules.users.domain.entities import User
from keydash.modules.users.infrastructure.models import UserModel


class UserMapper(BaseMapper[User, UserModel]):
    """User entity-model mapper."""

    def to_domain(self, model: UserModel) -> User:
        return User(
            id=model.id,
            email=model.email,
            name=model.name,
            first_login=model.first_login,
            last_login=model.last_login,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def to_model(self, entity: User) -> UserModel:
        return UserModel(
            id=entity.id,
            email=entity.email,
            name=entity.name,
            first_login=entity.first_login,
            last_login=entity.last_login,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
