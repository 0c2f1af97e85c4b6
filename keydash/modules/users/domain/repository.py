"""User repository interface."""

from abc import abstractmethod

from keydash.core.domain.repository import BaseRepository
from keydash.modules.users.domain.entities import User


class UserRepository(BaseRepository[User]):
    """User repository interface."""

    @abstractmethod
    async def get_by_id(self, user_id: str) -> User | None:
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> User | None:
        pass
