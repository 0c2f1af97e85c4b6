"""Summarizer ports.

The orchestration depends on these protocols only; GitHub and the model
vendor live in infrastructure.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal, Protocol

from keydash.modules.summarizer.domain.entities import (
    RepoRef,
    RepoSnapshot,
    RepoSummary,
)

ChatRole = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    role: ChatRole
    content: str


class RepositoryFetcher(Protocol):
    async def fetch_snapshot(self, ref: RepoRef) -> RepoSnapshot: ...


class ChatModel(Protocol):
    """A chat completion endpoint that answers with a JSON object."""

    async def complete(self, messages: Sequence[ChatMessage]) -> str: ...


class ReadmeSummarizer(Protocol):
    async def summarize(self, readme: str) -> RepoSummary: ...
