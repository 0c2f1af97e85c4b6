"""Base repository interface."""

from abc import ABC, abstractmethod
from typing import TypeVar

T = TypeVar("T")


class BaseRepository[T](ABC):
    """Write operations shared by every repository.

    Reads are owner-scoped and therefore declared per module.
    """

    @abstractmethod
    async def create(self, entity: T) -> T:
        """Persist a new entity."""
        pass

    @abstractmethod
    async def update(self, entity: T) -> T:
        """Persist changes to an existing entity."""
        pass
