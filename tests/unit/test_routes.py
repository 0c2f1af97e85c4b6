"""HTTP tests for the key dashboard, summarizer and session routes."""

from unittest.mock import AsyncMock, patch

import pytest

from keydash.core.config import settings
from keydash.modules.api_keys.domain.entities import USAGE_LIMIT
from keydash.modules.summarizer.domain.exceptions import ReadmeNotFoundError

pytestmark = pytest.mark.anyio


@pytest.fixture
def alice_headers(alice, auth_headers) -> dict[str, str]:
    return auth_headers(alice.email)


class TestAuthentication:
    async def test_missing_session_is_401(self, async_client) -> None:
        response = await async_client.get("/api/keys")

        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHORIZED"

    async def test_bad_token_is_401(self, async_client) -> None:
        response = await async_client.get(
            "/api/keys", headers={"Authorization": "Bearer nope"}
        )
        assert response.status_code == 401

    async def test_unknown_user_is_404(self, async_client, auth_headers) -> None:
        response = await async_client.get(
            "/api/keys", headers=auth_headers("stranger@example.com")
        )

        assert response.status_code == 404
        assert response.json() == {"error": "User not found", "code": "USER_NOT_FOUND"}


class TestKeyManagement:
    async def test_create_then_list(self, async_client, alice_headers) -> None:
        created = await async_client.post(
            "/api/keys",
            json={"name": "my-agent-key", "key": "stan-0123456789"},
            headers=alice_headers,
        )
        assert created.status_code == 201
        body = created.json()
        assert body["name"] == "my-agent-key"
        assert body["key"] == "stan-0123456789"
        assert body["usage"] == 0

        listed = await async_client.get("/api/keys", headers=alice_headers)
        assert listed.status_code == 200
        assert listed.json() == [body]

    async def test_list_is_ordered_and_owner_scoped(
        self, async_client, alice, bob, alice_headers, api_key_repo
    ) -> None:
        api_key_repo.add(alice.id, "zeta-key-name", "stan-zzzzzzzz")
        api_key_repo.add(alice.id, "alpha-key-name", "stan-aaaaaaaa")
        api_key_repo.add(bob.id, "bobs-key-name", "stan-bbbbbbbb")

        response = await async_client.get("/api/keys", headers=alice_headers)

        assert [k["name"] for k in response.json()] == [
            "alpha-key-name",
            "zeta-key-name",
        ]

    async def test_create_missing_fields_is_400(
        self, async_client, alice_headers
    ) -> None:
        response = await async_client.post(
            "/api/keys", json={"name": "my-agent-key"}, headers=alice_headers
        )

        assert response.status_code == 400
        assert response.json() == {
            "error": "Missing name or key",
            "code": "VALIDATION_ERROR",
        }

    async def test_create_malformed_body_is_400(
        self, async_client, alice_headers
    ) -> None:
        response = await async_client.post(
            "/api/keys", json={"name": 123, "key": ["x"]}, headers=alice_headers
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_create_duplicate_is_400(
        self, async_client, bob, alice_headers, api_key_repo
    ) -> None:
        api_key_repo.add(bob.id, "bobs-key-name", "stan-taken-0001")

        response = await async_client.post(
            "/api/keys",
            json={"name": "my-agent-key", "key": "stan-taken-0001"},
            headers=alice_headers,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "DUPLICATE_API_KEY"

    async def test_create_bad_prefix_is_400(self, async_client, alice_headers) -> None:
        response = await async_client.post(
            "/api/keys",
            json={"name": "my-agent-key", "key": "sk-0123456789"},
            headers=alice_headers,
        )

        assert response.status_code == 400
        assert response.json() == {
            "error": "API key must start with 'stan'",
            "code": "INVALID_API_KEY_FORMAT",
        }

    async def test_update_own_key(
        self, async_client, alice, alice_headers, api_key_repo
    ) -> None:
        key = api_key_repo.add(alice.id, "old-key-name", "stan-old-value", usage=2)

        response = await async_client.put(
            f"/api/keys/{key.id}",
            json={"name": "new-key-name", "key": "stan-new-value"},
            headers=alice_headers,
        )

        assert response.status_code == 200
        assert response.json() == {
            "id": key.id,
            "name": "new-key-name",
            "usage": 2,
            "key": "stan-new-value",
        }

    async def test_update_spent_key_is_400(
        self, async_client, alice, alice_headers, api_key_repo
    ) -> None:
        key = api_key_repo.add(
            alice.id, "old-key-name", "stan-old-value", usage=USAGE_LIMIT
        )

        response = await async_client.put(
            f"/api/keys/{key.id}",
            json={"name": "new-key-name", "key": "stan-new-value"},
            headers=alice_headers,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "API_KEY_INACTIVE"

    async def test_update_other_users_key_is_404(
        self, async_client, bob, alice_headers, api_key_repo
    ) -> None:
        key = api_key_repo.add(bob.id, "bobs-key-name", "stan-bobs-value")

        response = await async_client.put(
            f"/api/keys/{key.id}",
            json={"name": "new-key-name", "key": "stan-new-value"},
            headers=alice_headers,
        )

        assert response.status_code == 404
        assert api_key_repo.keys[key.id].name == "bobs-key-name"

    async def test_delete_own_key(
        self, async_client, alice, alice_headers, api_key_repo
    ) -> None:
        key = api_key_repo.add(alice.id, "doomed-key-name", "stan-doomed-01")

        response = await async_client.delete(f"/api/keys/{key.id}", headers=alice_headers)

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert api_key_repo.keys == {}

    async def test_delete_unknown_id_is_404(self, async_client, alice_headers) -> None:
        response = await async_client.delete(
            "/api/keys/not-a-uuid", headers=alice_headers
        )
        assert response.status_code == 404
        assert response.json()["code"] == "API_KEY_NOT_FOUND"

    async def test_generate_returns_fresh_value(
        self, async_client, alice_headers, api_key_repo
    ) -> None:
        response = await async_client.get("/api/keys/generate", headers=alice_headers)

        assert response.status_code == 200
        assert response.json()["key"].startswith("stan-")
        assert api_key_repo.keys == {}


class TestValidateRoute:
    async def test_valid_key_bills_one_use(
        self, async_client, alice, alice_headers, api_key_repo
    ) -> None:
        key = api_key_repo.add(alice.id, "valid-key-name", "stan-valid-01", usage=1)

        response = await async_client.get(
            "/api/keys/validate", params={"key": "stan-valid-01"}, headers=alice_headers
        )

        assert response.status_code == 200
        assert response.json() == {
            "valid": True,
            "message": "API key is valid",
            "data": {"id": key.id, "name": "valid-key-name", "usageCount": 2},
        }
        assert api_key_repo.keys[key.id].usage_count == 2

    async def test_missing_param_is_400(self, async_client, alice_headers) -> None:
        response = await async_client.get("/api/keys/validate", headers=alice_headers)

        assert response.status_code == 400
        assert response.json() == {
            "valid": False,
            "error": "API key parameter is required",
        }

    async def test_policy_failure_is_reported_in_body(
        self, async_client, bob, alice_headers, api_key_repo
    ) -> None:
        api_key_repo.add(bob.id, "bobs-key-name", "stan-bobs-value")

        response = await async_client.get(
            "/api/keys/validate",
            params={"key": "stan-bobs-value"},
            headers=alice_headers,
        )

        assert response.status_code == 200
        assert response.json() == {"valid": False, "error": "API key not found"}
        assert api_key_repo.increment_calls == []


class TestSummarizerRoute:
    async def test_success_shape(
        self, async_client, alice, alice_headers, api_key_repo
    ) -> None:
        api_key_repo.add(alice.id, "summarizer-key", "stan-summarize-01", usage=3)

        response = await async_client.post(
            "/api/github-summarizer",
            json={
                "apiKey": "stan-summarize-01",
                "githubUrl": "https://github.com/octo/demo",
            },
            headers=alice_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"] == {
            "githubUrl": "https://github.com/octo/demo",
            "apiKeyOwner": "summarizer-key",
            "usageCount": 4,
            "summary": "A demo project.",
            "coolFacts": ["fact one", "fact two"],
            "stars": 42,
            "latestVersion": "v1.2.0",
        }

    @pytest.mark.parametrize(
        ("payload", "error"),
        [
            ({"githubUrl": "https://github.com/octo/demo"}, "API key is required"),
            ({"apiKey": "stan-summarize-01"}, "GitHub URL is required"),
        ],
    )
    async def test_missing_fields_are_400(
        self, async_client, alice_headers, payload, error
    ) -> None:
        response = await async_client.post(
            "/api/github-summarizer", json=payload, headers=alice_headers
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": error}

    async def test_invalid_key_is_401(self, async_client, alice_headers) -> None:
        response = await async_client.post(
            "/api/github-summarizer",
            json={
                "apiKey": "stan-unknown-01",
                "githubUrl": "https://github.com/octo/demo",
            },
            headers=alice_headers,
        )

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "API key not found"}

    async def test_invalid_url_is_400(
        self, async_client, alice, alice_headers, api_key_repo
    ) -> None:
        api_key_repo.add(alice.id, "summarizer-key", "stan-summarize-01")

        response = await async_client.post(
            "/api/github-summarizer",
            json={"apiKey": "stan-summarize-01", "githubUrl": "https://github.com/x"},
            headers=alice_headers,
        )

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert "Invalid GitHub repository URL" in response.json()["error"]

    async def test_missing_readme_is_404_and_not_billed(
        self, async_client, alice, alice_headers, api_key_repo, repository_fetcher
    ) -> None:
        key = api_key_repo.add(alice.id, "summarizer-key", "stan-summarize-01")
        repository_fetcher.error = ReadmeNotFoundError()

        response = await async_client.post(
            "/api/github-summarizer",
            json={
                "apiKey": "stan-summarize-01",
                "githubUrl": "https://github.com/octo/demo",
            },
            headers=alice_headers,
        )

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "error": "Could not find README for this repository",
        }
        assert api_key_repo.keys[key.id].usage_count == 0

    async def test_unexpected_error_is_generic_500(
        self, async_client, alice, alice_headers, api_key_repo, repository_fetcher
    ) -> None:
        api_key_repo.add(alice.id, "summarizer-key", "stan-summarize-01")
        repository_fetcher.error = KeyError("boom")

        response = await async_client.post(
            "/api/github-summarizer",
            json={
                "apiKey": "stan-summarize-01",
                "githubUrl": "https://github.com/octo/demo",
            },
            headers=alice_headers,
        )

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Internal server error"}

    async def test_missing_session_uses_summarizer_body(self, async_client) -> None:
        response = await async_client.post(
            "/api/github-summarizer",
            json={
                "apiKey": "stan-summarize-01",
                "githubUrl": "https://github.com/octo/demo",
            },
        )

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Unauthorized"}

    async def test_unknown_user_uses_summarizer_body(
        self, async_client, auth_headers
    ) -> None:
        response = await async_client.post(
            "/api/github-summarizer",
            json={
                "apiKey": "stan-summarize-01",
                "githubUrl": "https://github.com/octo/demo",
            },
            headers=auth_headers("stranger@example.com"),
        )

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "User not found"}

    async def test_non_string_api_key_is_400(self, async_client, alice_headers) -> None:
        response = await async_client.post(
            "/api/github-summarizer",
            json={"apiKey": 123, "githubUrl": "https://github.com/octo/demo"},
            headers=alice_headers,
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert "apiKey" in body["error"]
        assert "code" not in body

    async def test_invalid_json_is_400(self, async_client, alice_headers) -> None:
        response = await async_client.post(
            "/api/github-summarizer",
            content=b"{not json",
            headers={**alice_headers, "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["success"] is False

    async def test_disabled_llm_fails_and_is_not_billed(
        self,
        async_client,
        alice,
        alice_headers,
        api_key_repo,
        repository_fetcher,
        readme_summarizer,
        monkeypatch,
    ) -> None:
        monkeypatch.setattr(settings, "LLM_ENABLED", False)
        key = api_key_repo.add(alice.id, "summarizer-key", "stan-summarize-01")

        response = await async_client.post(
            "/api/github-summarizer",
            json={
                "apiKey": "stan-summarize-01",
                "githubUrl": "https://github.com/octo/demo",
            },
            headers=alice_headers,
        )

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "Summarization is disabled",
        }
        assert repository_fetcher.calls == []
        readme_summarizer.summarize.assert_not_awaited()
        assert api_key_repo.keys[key.id].usage_count == 0


class TestSessionRoutes:
    async def test_register_session_schedules_tracking(
        self, async_client, auth_headers
    ) -> None:
        from keydash.core.infrastructure.database.session import get_database
        from main import app

        database = object()
        app.dependency_overrides[get_database] = lambda: database

        with patch(
            "keydash.modules.users.interfaces.router.track_login_task",
            new_callable=AsyncMock,
        ) as task:
            response = await async_client.post(
                "/api/auth/session",
                headers=auth_headers("carol@example.com", name="Carol"),
            )

        assert response.status_code == 200
        assert response.json() == {"email": "carol@example.com", "name": "Carol"}
        task.assert_awaited_once_with(database, "carol@example.com", "Carol")

    async def test_me_returns_user_record(
        self, async_client, alice, alice_headers
    ) -> None:
        response = await async_client.get("/api/auth/me", headers=alice_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == alice.id
        assert body["email"] == "alice@example.com"
        assert body["name"] == "alice"
