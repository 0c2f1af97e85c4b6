"""Users module application dependencies.

Provides services and repository without importing infrastructure.
"""

from typing import NoReturn

from fastapi import Depends

from keydash.modules.users.application.services import (
    UserQueryService,
    UserQueryServiceScope,
)
from keydash.modules.users.domain.repository import UserRepository


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


async def get_user_repository() -> UserRepository:
    _missing_dependency("UserRepository")


async def get_user_query_service_scope() -> UserQueryServiceScope:
    _missing_dependency("UserQueryServiceScope")


async def get_user_query_service(
    repository: UserRepository = Depends(get_user_repository),
) -> UserQueryService:
    return UserQueryService(repository=repository)
