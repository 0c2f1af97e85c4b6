"""Base mapper between domain entities and table models."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import TypeVar

E = TypeVar("E")  # Entity type
M = TypeVar("M")  # Model type


class BaseMapper[E, M](ABC):
    """Converts rows to entities and back."""

    @abstractmethod
    def to_domain(self, model: M) -> E:
        pass

    @abstractmethod
    def to_model(self, entity: E) -> M:
        pass

    def to_domain_list(self, models: Iterable[M]) -> list[E]:
        return [self.to_domain(model) for model in models]
