"""Summarizer infrastructure dependencies."""

from functools import lru_cache

from keydash.core.config import settings
from keydash.modules.summarizer.application.pipeline import LLMReadmeSummarizer
from keydash.modules.summarizer.infrastructure.github_fetcher import (
    GithubRepositoryFetcher,
)
from keydash.modules.summarizer.infrastructure.openai_chat import OpenAIChatModel


@lru_cache
def get_chat_model() -> OpenAIChatModel:
    # one client, one connection pool for the process
    return OpenAIChatModel(settings.OPENAI_SUMMARY_MODEL)


async def get_repository_fetcher() -> GithubRepositoryFetcher:
    return GithubRepositoryFetcher.from_settings(settings)


async def get_readme_summarizer() -> LLMReadmeSummarizer:
    return LLMReadmeSummarizer(get_chat_model())
