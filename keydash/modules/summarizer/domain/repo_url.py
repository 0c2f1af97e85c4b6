"""GitHub repository URL parsing."""

import re

from keydash.modules.summarizer.domain.entities import RepoRef
from keydash.modules.summarizer.domain.exceptions import InvalidRepoUrlError

_GITHUB_REPO_URL = re.compile(
    r"^https?://(?:www\.)?github\.com/(?P<owner>[\w.-]+)/(?P<repo>[\w.-]+)/?$",
    re.IGNORECASE | re.ASCII,
)

# Path segments that would walk the GitHub API path instead of naming a repo.
_DOT_SEGMENTS = frozenset({".", ".."})


def parse_repo_url(url: str) -> RepoRef:
    """Extract owner and repo from ``https://github.com/<owner>/<repo>``.

    Raises:
        InvalidRepoUrlError: any other host, path depth or character set
    """
    match = _GITHUB_REPO_URL.match(url.strip())
    if not match:
        raise InvalidRepoUrlError()

    owner, repo = match.group("owner"), match.group("repo")
    if owner in _DOT_SEGMENTS or repo in _DOT_SEGMENTS:
        raise InvalidRepoUrlError()
    return RepoRef(owner=owner, repo=repo)
