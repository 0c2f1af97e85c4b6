"""API Keys module application dependencies.

Provides service and repository without importing infrastructure.
"""

from typing import NoReturn

from fastapi import Depends

from keydash.core.config import settings
from keydash.modules.api_keys.application.service import (
    ApiKeyService,
    ApiKeyServiceScope,
)
from keydash.modules.api_keys.domain.repository import ApiKeyRepository


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


async def get_api_key_repository() -> ApiKeyRepository:
    _missing_dependency("ApiKeyRepository")


async def get_api_key_service_scope() -> ApiKeyServiceScope:
    _missing_dependency("ApiKeyServiceScope")


async def get_api_key_service(
    repository: ApiKeyRepository = Depends(get_api_key_repository),
) -> ApiKeyService:
    return ApiKeyService(
        repository=repository,
        strict_usage_cap=settings.API_KEY_STRICT_USAGE_CAP,
    )
