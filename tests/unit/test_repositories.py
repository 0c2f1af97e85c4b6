"""Tests for the PostgreSQL key repository against a mocked session."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.ext.asyncio import AsyncSession

from keydash.core.infrastructure.logging import mask_key
from keydash.modules.api_keys.application.service import ApiKeyService
from keydash.modules.api_keys.domain.entities import USAGE_LIMIT, ApiKey
from keydash.modules.api_keys.infrastructure.dependencies import (
    get_api_key_service_scope,
)
from keydash.modules.api_keys.infrastructure.mappers import ApiKeyMapper
from keydash.modules.api_keys.infrastructure.repositories import (
    PostgreSQLApiKeyRepository,
)

pytestmark = pytest.mark.anyio


def _sql(statement) -> str:
    return str(
        statement.compile(
            dialect=postgresql.dialect(), compile_kwargs={"literal_binds": True}
        )
    )


@pytest.fixture
def session() -> AsyncMock:
    session = AsyncMock(spec=AsyncSession)
    result = MagicMock()
    result.scalar_one_or_none.return_value = 5
    session.execute = AsyncMock(return_value=result)
    return session


@pytest.fixture
def repo(session) -> PostgreSQLApiKeyRepository:
    return PostgreSQLApiKeyRepository(session, ApiKeyMapper())


class TestIncrementUsage:
    async def test_unconditional_increment(self, repo, session) -> None:
        assert await repo.increment_usage("stan-usage-01") == 5

        sql = _sql(session.execute.await_args.args[0])
        assert "UPDATE user_keys SET usage_count=(user_keys.usage_count + 1)" in sql
        assert "user_keys.key_value = 'stan-usage-01'" in sql
        assert "RETURNING user_keys.usage_count" in sql
        assert "usage_count <" not in sql

    async def test_capped_increment(self, repo, session) -> None:
        await repo.increment_usage("stan-usage-01", cap=USAGE_LIMIT)

        sql = _sql(session.execute.await_args.args[0])
        assert f"user_keys.usage_count < {USAGE_LIMIT}" in sql

    async def test_no_row_returns_none(self, repo, session) -> None:
        session.execute.return_value.scalar_one_or_none.return_value = None
        assert await repo.increment_usage("stan-missing", cap=USAGE_LIMIT) is None


class TestOwnerScopedQueries:
    async def test_list_filters_by_owner_and_orders_by_name(
        self, repo, session
    ) -> None:
        session.execute.return_value.scalars.return_value.all.return_value = []

        assert await repo.list_by_user("5f0c2a8e-0000-4000-8000-000000000001") == []

        sql = _sql(session.execute.await_args.args[0])
        assert "WHERE user_keys.user_id =" in sql
        assert "ORDER BY user_keys.name ASC, user_keys.id ASC" in sql

    async def test_delete_requires_owner_match(self, repo, session) -> None:
        session.execute.return_value.rowcount = 0

        assert await repo.delete("key-id", "user-id") is False

        sql = _sql(session.execute.await_args.args[0])
        assert "DELETE FROM user_keys" in sql
        assert "user_keys.user_id" in sql


class TestApiKeyMapper:
    def test_round_trip_keeps_usage(self) -> None:
        mapper = ApiKeyMapper()
        entity = ApiKey(
            user_id="5f0c2a8e-0000-4000-8000-000000000001",
            name="mapped-key-name",
            key_value="stan-mapped-01",
        )

        restored = mapper.to_domain(mapper.to_model(entity))

        assert restored == entity
        assert restored.usage_count == 0
        assert restored.key_value == "stan-mapped-01"


class FakeDatabase:
    """Database stand-in that records each transaction it opens."""

    def __init__(self) -> None:
        self.transactions: list[str] = []

    @asynccontextmanager
    async def session(self):
        self.transactions.append("begin")
        yield AsyncMock(spec=AsyncSession)
        self.transactions.append("commit")


async def test_service_scope_runs_one_transaction_per_use() -> None:
    database = FakeDatabase()
    scope = get_api_key_service_scope(database)

    async with scope() as service:
        assert isinstance(service, ApiKeyService)
        assert database.transactions == ["begin"]
    async with scope():
        pass

    assert database.transactions == ["begin", "commit", "begin", "commit"]

def test_mask_key_hides_the_tail() -> None:
    assert mask_key("stan-0123456789") == "stan-01********"
    assert mask_key("stan") == "stan"
