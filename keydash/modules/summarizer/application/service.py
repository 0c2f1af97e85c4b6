"""Repository summary orchestration."""

import time

from loguru import logger

from keydash.core.infrastructure.logging import BusinessEvents
from keydash.modules.api_keys.application.service import ApiKeyServiceScope
from keydash.modules.api_keys.domain.exceptions import ApiKeyInvalidError
from keydash.modules.summarizer.domain.entities import SummarizeOutcome
from keydash.modules.summarizer.domain.exceptions import SummarizationFailedError
from keydash.modules.summarizer.domain.ports import (
    ReadmeSummarizer,
    RepositoryFetcher,
)
from keydash.modules.summarizer.domain.repo_url import parse_repo_url


class GithubSummarizerService:
    """Spend one use of an API key on a repository summary.

    Steps run in order and stop at the first failure. Usage is billed only
    after the summary exists, so a failed request never costs a use.
    Key validation and billing each run in their own short transaction; no
    transaction is open while GitHub or the model is being called.
    """

    def __init__(
        self,
        api_keys: ApiKeyServiceScope,
        fetcher: RepositoryFetcher,
        summarizer: ReadmeSummarizer,
        *,
        llm_enabled: bool = True,
    ) -> None:
        self.api_keys = api_keys
        self.fetcher = fetcher
        self.summarizer = summarizer
        self.llm_enabled = llm_enabled

    async def summarize_repository(
        self, user_id: str, api_key: str, github_url: str
    ) -> SummarizeOutcome:
        """Validate, fetch, summarize, then bill.

        Raises:
            SummarizationFailedError: LLM features are disabled, or the model
                call failed
            ApiKeyInvalidError: key malformed, unknown to this user or spent
            InvalidRepoUrlError: not a github.com repository URL
            ReadmeNotFoundError / RepositoryFetchError: README unavailable
        """
        if not self.llm_enabled:
            BusinessEvents.feature_degraded(
                feature="summarizer", reason="llm_disabled", user_id=user_id
            )
            raise SummarizationFailedError("Summarization is disabled")

        started = time.monotonic()

        async with self.api_keys() as api_keys:
            validation = await api_keys.validate_for_use(api_key, user_id)
        if not validation.valid or validation.key is None:
            raise ApiKeyInvalidError(validation.message or "Invalid API key")
        key = validation.key

        ref = parse_repo_url(github_url)
        logger.info(f"Summarizing {ref.full_name} with key {key.id}")

        snapshot = await self.fetcher.fetch_snapshot(ref)

        try:
            summary = await self.summarizer.summarize(snapshot.readme)
        except Exception as e:
            logger.exception(f"Summarization failed for {ref.full_name}: {e}")
            raise SummarizationFailedError() from e

        async with self.api_keys() as api_keys:
            usage_count = await api_keys.record_usage(key.key_value)

        BusinessEvents.repository_summarized(
            user_id=user_id,
            owner=ref.owner,
            repo=ref.repo,
            readme_chars=len(snapshot.readme),
            fact_count=len(summary.cool_facts),
            latency_ms=int((time.monotonic() - started) * 1000),
        )

        return SummarizeOutcome(
            github_url=github_url,
            api_key_owner=key.name,
            usage_count=usage_count,
            summary=summary.summary,
            cool_facts=summary.cool_facts,
            stars=snapshot.stars,
            latest_version=snapshot.latest_version,
        )
