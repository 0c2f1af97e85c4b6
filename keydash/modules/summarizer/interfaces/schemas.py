"""Summarizer API schemas."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SummarizeRequest(BaseModel):
    """Summarize request; both fields are checked by the route."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "apiKey": "stan-Q3p9xv0LmA7cT2bR8nW4kY6sH1dJ5fGz",
                "githubUrl": "https://github.com/fastapi/fastapi",
            }
        },
    )

    api_key: str | None = Field(None, description="API key to spend")
    github_url: str | None = Field(None, description="GitHub repository URL")


class SummaryData(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    github_url: str
    api_key_owner: str = Field(..., description="Name of the key that was spent")
    usage_count: int = Field(..., description="Usage count after billing")
    summary: str
    cool_facts: list[str]
    stars: int
    latest_version: str | None = Field(None, description="Tag of the latest release")


class SummarizeResponse(BaseModel):
    success: bool = True
    message: str = "GitHub repository summarized successfully"
    data: SummaryData


class SummarizeErrorResponse(BaseModel):
    success: bool = False
    error: str
