"""API Key repository interfaces."""

from abc import abstractmethod

from keydash.core.domain.repository import BaseRepository
from keydash.modules.api_keys.domain.entities import ApiKey


class ApiKeyRepository(BaseRepository[ApiKey]):
    """API Key repository interface.

    Every read that takes a user id filters by owner; a key owned by someone
    else is indistinguishable from a missing one.
    """

    @abstractmethod
    async def list_by_user(self, user_id: str) -> list[ApiKey]:
        """List a user's keys ordered by name ascending."""
        pass

    @abstractmethod
    async def get_for_owner(self, key_id: str, user_id: str) -> ApiKey | None:
        pass

    @abstractmethod
    async def get_by_value_for_owner(
        self, key_value: str, user_id: str
    ) -> ApiKey | None:
        pass

    @abstractmethod
    async def exists_by_value(
        self, key_value: str, exclude_id: str | None = None
    ) -> bool:
        """Check the key value across all users."""
        pass

    @abstractmethod
    async def delete(self, key_id: str, user_id: str) -> bool:
        """Hard-delete an owned key. Returns False when nothing matched."""
        pass

    @abstractmethod
    async def increment_usage(
        self, key_value: str, cap: int | None = None
    ) -> int | None:
        """Atomically add one to usage_count and return the new value.

        With ``cap`` only rows still below the cap are incremented. Returns
        None when no row was updated.
        """
        pass
