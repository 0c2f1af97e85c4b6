"""Summarizer domain entities."""

from dataclasses import dataclass

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class RepoRef:
    """A GitHub repository identified by owner and name."""

    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class RepoSnapshot:
    """README plus best-effort metadata for one repository."""

    readme: str
    stars: int = 0
    latest_version: str | None = None


class RepoSummary(BaseModel):
    """Structured summary produced from a README."""

    summary: str = Field(default="", description="README summary")
    cool_facts: list[str] = Field(default_factory=list, description="Notable facts")


class SummarizeOutcome(BaseModel):
    """Result of spending an API key on a repository summary."""

    github_url: str
    api_key_owner: str = Field(..., description="Name of the key that was spent")
    usage_count: int = Field(..., description="Usage count after billing")
    summary: str
    cool_facts: list[str]
    stars: int
    latest_version: str | None
