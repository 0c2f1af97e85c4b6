"""
pytest configuration and shared fixtures.

Layout:
- unit/: no external services, repositories are in-memory

Usage:
    pytest
    pytest tests/unit/test_api_keys.py
"""

from collections.abc import AsyncGenerator, AsyncIterator, Callable
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from keydash.core.infrastructure.security.jwt import create_session_token
from keydash.modules.api_keys.application.service import ApiKeyService
from keydash.modules.api_keys.domain.entities import ApiKey
from keydash.modules.api_keys.domain.exceptions import DuplicateApiKeyError
from keydash.modules.api_keys.domain.repository import ApiKeyRepository
from keydash.modules.summarizer.domain.entities import (
    RepoRef,
    RepoSnapshot,
    RepoSummary,
)
from keydash.modules.users.application.services import UserQueryService
from keydash.modules.users.domain.entities import User
from keydash.modules.users.domain.repository import UserRepository


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


# ============================================
# In-memory repositories
# ============================================


class InMemoryUserRepository(UserRepository):
    """In-memory user repository keyed by id."""

    def __init__(self) -> None:
        self.users: dict[str, User] = {}

    async def get_by_id(self, user_id: str) -> User | None:
        user = self.users.get(user_id)
        return user.model_copy() if user else None

    async def get_by_email(self, email: str) -> User | None:
        for user in self.users.values():
            if user.email == email:
                return user.model_copy()
        return None

    async def create(self, entity: User) -> User:
        self.users[entity.id] = entity.model_copy()
        return entity

    async def update(self, entity: User) -> User:
        self.users[entity.id] = entity.model_copy()
        return entity


class InMemoryApiKeyRepository(ApiKeyRepository):
    """In-memory key store mirroring the unique key_value constraint."""

    def __init__(self) -> None:
        self.keys: dict[str, ApiKey] = {}
        self.increment_calls: list[tuple[str, int | None]] = []

    def _check_unique(self, entity: ApiKey) -> None:
        for key in self.keys.values():
            if key.key_value == entity.key_value and key.id != entity.id:
                raise DuplicateApiKeyError()

    async def list_by_user(self, user_id: str) -> list[ApiKey]:
        owned = [k for k in self.keys.values() if k.user_id == user_id]
        return [k.model_copy() for k in sorted(owned, key=lambda k: (k.name, k.id))]

    async def get_for_owner(self, key_id: str, user_id: str) -> ApiKey | None:
        key = self.keys.get(key_id)
        if key is None or key.user_id != user_id:
            return None
        return key.model_copy()

    async def get_by_value_for_owner(
        self, key_value: str, user_id: str
    ) -> ApiKey | None:
        for key in self.keys.values():
            if key.key_value == key_value and key.user_id == user_id:
                return key.model_copy()
        return None

    async def exists_by_value(
        self, key_value: str, exclude_id: str | None = None
    ) -> bool:
        return any(
            k.key_value == key_value and k.id != exclude_id
            for k in self.keys.values()
        )

    async def delete(self, key_id: str, user_id: str) -> bool:
        key = self.keys.get(key_id)
        if key is None or key.user_id != user_id:
            return False
        del self.keys[key_id]
        return True

    async def increment_usage(
        self, key_value: str, cap: int | None = None
    ) -> int | None:
        self.increment_calls.append((key_value, cap))
        for key in self.keys.values():
            if key.key_value != key_value:
                continue
            if cap is not None and key.usage_count >= cap:
                return None
            key.usage_count += 1
            return key.usage_count
        return None

    async def create(self, entity: ApiKey) -> ApiKey:
        self._check_unique(entity)
        self.keys[entity.id] = entity.model_copy()
        return entity

    async def update(self, entity: ApiKey) -> ApiKey:
        self._check_unique(entity)
        self.keys[entity.id] = entity.model_copy()
        return entity

    def add(self, user_id: str, name: str, key_value: str, usage: int = 0) -> ApiKey:
        """Seed a key directly, bypassing the service rules."""
        key = ApiKey(user_id=user_id, name=name, key_value=key_value, usage_count=usage)
        self.keys[key.id] = key
        return key


class StubRepositoryFetcher:
    """RepositoryFetcher returning a fixed snapshot or raising."""

    def __init__(
        self,
        snapshot: RepoSnapshot | None = None,
        error: Exception | None = None,
    ) -> None:
        self.snapshot = snapshot or RepoSnapshot(
            readme="# demo\n\nA demo project.", stars=42, latest_version="v1.2.0"
        )
        self.error = error
        self.calls: list[RepoRef] = []

    async def fetch_snapshot(self, ref: RepoRef) -> RepoSnapshot:
        self.calls.append(ref)
        if self.error is not None:
            raise self.error
        return self.snapshot


class ServiceScope[T]:
    """Service factory standing in for a per-transaction scope.

    ``active`` counts scopes currently entered; ``opened`` counts all of them.
    """

    def __init__(self, factory: Callable[[], T]) -> None:
        self.factory = factory
        self.active = 0
        self.opened = 0

    @asynccontextmanager
    async def __call__(self) -> AsyncIterator[T]:
        self.active += 1
        self.opened += 1
        try:
            yield self.factory()
        finally:
            self.active -= 1


# ============================================
# Repository / service fixtures
# ============================================


@pytest.fixture
def user_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def api_key_repo() -> InMemoryApiKeyRepository:
    return InMemoryApiKeyRepository()


@pytest.fixture
def alice(user_repo: InMemoryUserRepository) -> User:
    user = User(email="alice@example.com", name="alice")
    user_repo.users[user.id] = user
    return user


@pytest.fixture
def bob(user_repo: InMemoryUserRepository) -> User:
    user = User(email="bob@example.com", name="bob")
    user_repo.users[user.id] = user
    return user


@pytest.fixture
def api_key_scope(
    api_key_repo: InMemoryApiKeyRepository,
) -> ServiceScope[ApiKeyService]:
    return ServiceScope(lambda: ApiKeyService(repository=api_key_repo))


@pytest.fixture
def user_scope(user_repo: InMemoryUserRepository) -> ServiceScope[UserQueryService]:
    return ServiceScope(lambda: UserQueryService(repository=user_repo))


@pytest.fixture
def repository_fetcher() -> StubRepositoryFetcher:
    return StubRepositoryFetcher()


@pytest.fixture
def readme_summarizer() -> MagicMock:
    summarizer = MagicMock()
    summarizer.summarize = AsyncMock(
        return_value=RepoSummary(
            summary="A demo project.", cool_facts=["fact one", "fact two"]
        )
    )
    return summarizer


# ============================================
# HTTP Client Fixtures
# ============================================


@pytest.fixture
def auth_headers() -> Callable[..., dict[str, str]]:
    """Build a Bearer header carrying a freshly signed session token."""

    def _headers(email: str, name: str | None = None) -> dict[str, str]:
        token = create_session_token(email, name=name)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
async def async_client(
    user_repo: InMemoryUserRepository,
    api_key_repo: InMemoryApiKeyRepository,
    api_key_scope: ServiceScope[ApiKeyService],
    user_scope: ServiceScope[UserQueryService],
    repository_fetcher: StubRepositoryFetcher,
    readme_summarizer: MagicMock,
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with real JWT sessions and in-memory repositories and services."""
    from main import app
    from keydash.modules.api_keys.application import dependencies as api_keys_deps
    from keydash.modules.summarizer.application import (
        dependencies as summarizer_deps,
    )
    from keydash.modules.users.application import dependencies as users_deps

    original_overrides = dict(app.dependency_overrides)
    app.dependency_overrides[users_deps.get_user_repository] = lambda: user_repo
    app.dependency_overrides[users_deps.get_user_query_service_scope] = (
        lambda: user_scope
    )
    app.dependency_overrides[api_keys_deps.get_api_key_repository] = (
        lambda: api_key_repo
    )
    app.dependency_overrides[api_keys_deps.get_api_key_service_scope] = (
        lambda: api_key_scope
    )
    app.dependency_overrides[summarizer_deps.get_repository_fetcher] = (
        lambda: repository_fetcher
    )
    app.dependency_overrides[summarizer_deps.get_readme_summarizer] = (
        lambda: readme_summarizer
    )

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()
    app.dependency_overrides.update(original_overrides)
