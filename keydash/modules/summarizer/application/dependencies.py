"""Summarizer application dependencies."""

from typing import NoReturn

from fastapi import Depends

from keydash.core.config import settings
from keydash.modules.api_keys.application.dependencies import (
    get_api_key_service_scope,
)
from keydash.modules.api_keys.application.service import ApiKeyServiceScope
from keydash.modules.summarizer.application.service import GithubSummarizerService
from keydash.modules.summarizer.domain.ports import (
    ReadmeSummarizer,
    RepositoryFetcher,
)


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


async def get_repository_fetcher() -> RepositoryFetcher:
    _missing_dependency("RepositoryFetcher")


async def get_readme_summarizer() -> ReadmeSummarizer:
    _missing_dependency("ReadmeSummarizer")


async def get_github_summarizer_service(
    api_keys: ApiKeyServiceScope = Depends(get_api_key_service_scope),
    fetcher: RepositoryFetcher = Depends(get_repository_fetcher),
    summarizer: ReadmeSummarizer = Depends(get_readme_summarizer),
) -> GithubSummarizerService:
    return GithubSummarizerService(
        api_keys, fetcher, summarizer, llm_enabled=settings.LLM_ENABLED
    )
