"""Summarizer domain exceptions."""

from fastapi import status

from keydash.core.domain.exceptions import UpstreamServiceError, ValidationError


class InvalidRepoUrlError(ValidationError):
    """Raised when a URL is not a github.com repository URL."""

    error_code = "INVALID_REPO_URL"

    def __init__(self) -> None:
        super().__init__(
            "Invalid GitHub repository URL format. "
            "Expected: https://github.com/username/repo"
        )


class ReadmeNotFoundError(UpstreamServiceError):
    """Raised when GitHub does not return a README."""

    http_status_code = status.HTTP_404_NOT_FOUND
    error_code = "README_NOT_FOUND"

    def __init__(self) -> None:
        super().__init__("Could not find README for this repository")


class RepositoryFetchError(UpstreamServiceError):
    """Raised when GitHub cannot be reached for the README."""

    error_code = "REPOSITORY_FETCH_FAILED"

    def __init__(self) -> None:
        super().__init__("Error fetching repository README")


class SummarizationFailedError(UpstreamServiceError):
    """Raised when the language model call fails."""

    error_code = "SUMMARIZATION_FAILED"

    def __init__(self, message: str = "Error summarizing repository README") -> None:
        super().__init__(message)
