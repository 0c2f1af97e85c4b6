"""GitHub REST fetcher for README and repository metadata.

Only the README is required. Stars and the latest release are best-effort
and fall back to 0 / None on any failure.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Self

import httpx
from loguru import logger

from keydash.core.config import Settings
from keydash.modules.summarizer.domain.entities import RepoRef, RepoSnapshot
from keydash.modules.summarizer.domain.exceptions import (
    ReadmeNotFoundError,
    RepositoryFetchError,
)

RAW_MEDIA_TYPE = "application/vnd.github.v3.raw"
JSON_MEDIA_TYPE = "application/vnd.github+json"


class GithubRepositoryFetcher:
    """Fetch repository data from the GitHub REST API."""

    def __init__(
        self,
        api_base: str = "https://api.github.com",
        *,
        token: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self._token = token
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> Self:
        return cls(
            settings.GITHUB_API_BASE,
            token=settings.GITHUB_TOKEN,
            timeout=settings.GITHUB_TIMEOUT_SEC,
        )

    def _build_client(self) -> httpx.AsyncClient:
        headers = {"Accept": JSON_MEDIA_TYPE}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return httpx.AsyncClient(
            base_url=self.api_base,
            headers=headers,
            timeout=self.timeout,
            follow_redirects=True,
            transport=self._transport,
        )

    @asynccontextmanager
    async def _client(
        self, client: httpx.AsyncClient | None
    ) -> AsyncIterator[httpx.AsyncClient]:
        if client is not None:
            yield client
            return
        async with self._build_client() as owned:
            yield owned

    async def fetch_readme(
        self, ref: RepoRef, client: httpx.AsyncClient | None = None
    ) -> str:
        """Fetch the raw README text.

        Raises:
            ReadmeNotFoundError: GitHub answered with a non-2xx status
            RepositoryFetchError: GitHub could not be reached
        """
        path = f"/repos/{ref.owner}/{ref.repo}/readme"
        try:
            async with self._client(client) as http:
                response = await http.get(path, headers={"Accept": RAW_MEDIA_TYPE})
        except httpx.HTTPError as e:
            logger.exception(f"README fetch failed for {ref.full_name}: {e}")
            raise RepositoryFetchError() from e

        if not response.is_success:
            logger.warning(
                f"README not available for {ref.full_name}: "
                f"HTTP {response.status_code}"
            )
            raise ReadmeNotFoundError()
        return response.text

    async def fetch_stars(
        self, ref: RepoRef, client: httpx.AsyncClient | None = None
    ) -> int:
        data = await self._get_json(f"/repos/{ref.owner}/{ref.repo}", client)
        stars = data.get("stargazers_count") if data else None
        return stars if isinstance(stars, int) else 0

    async def fetch_latest_version(
        self, ref: RepoRef, client: httpx.AsyncClient | None = None
    ) -> str | None:
        data = await self._get_json(
            f"/repos/{ref.owner}/{ref.repo}/releases/latest", client
        )
        tag = data.get("tag_name") if data else None
        return tag if isinstance(tag, str) else None

    async def _get_json(
        self, path: str, client: httpx.AsyncClient | None
    ) -> dict[str, Any] | None:
        try:
            async with self._client(client) as http:
                response = await http.get(path)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.debug(f"GitHub {path} returned HTTP {e.response.status_code}")
            return None
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"GitHub {path} failed: {e}")
            return None
        return data if isinstance(data, dict) else None

    async def fetch_snapshot(self, ref: RepoRef) -> RepoSnapshot:
        """Fetch README, stars and latest release concurrently."""
        async with self._build_client() as client:
            readme, stars, latest_version = await asyncio.gather(
                self.fetch_readme(ref, client),
                self.fetch_stars(ref, client),
                self.fetch_latest_version(ref, client),
                return_exceptions=True,
            )

        if isinstance(readme, BaseException):
            raise readme
        if isinstance(stars, BaseException):
            logger.warning(f"Stars lookup failed for {ref.full_name}: {stars}")
            stars = 0
        if isinstance(latest_version, BaseException):
            logger.warning(
                f"Release lookup failed for {ref.full_name}: {latest_version}"
            )
            latest_version = None

        return RepoSnapshot(
            readme=readme, stars=stars, latest_version=latest_version
        )
