"""GitHub access for the review service, built on PyGithub.

Only three reads are needed: pull request metadata, its changed files, and
the head-commit content of a file. GitHub failures are translated into the
HostingError family here so nothing above this module imports PyGithub.
"""

from __future__ import annotations

import logging

import requests
from github import (
    Auth,
    BadCredentialsException,
    Github,
    GithubException,
    RateLimitExceededException,
    UnknownObjectException,
)

from gitgud_core.errors import HostingError, PullRequestNotFound, RateLimited, TransportError
from gitgud_core.models import ChangedFile, FileStatus, PullRequest

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.github.com"


def _translate(exc: Exception, what: str) -> HostingError:
    if isinstance(exc, UnknownObjectException):
        return PullRequestNotFound(f"{what} not found")
    if isinstance(exc, RateLimitExceededException):
        return RateLimited(f"GitHub rate limit exceeded while fetching {what}")
    if isinstance(exc, BadCredentialsException):
        return TransportError(f"GitHub rejected the credentials while fetching {what}")
    if isinstance(exc, GithubException):
        return TransportError(f"GitHub API error while fetching {what}: status {exc.status}")
    return TransportError(f"could not reach GitHub while fetching {what}: {exc}")


def to_changed_file(f) -> ChangedFile:
    """Convert a PyGithub File into a ChangedFile.

    ``changes`` is recomputed from additions and deletions so the
    ChangedFile invariant holds even if GitHub's own count disagrees.
    """
    additions = f.additions or 0
    deletions = f.deletions or 0
    return ChangedFile(
        name=f.filename,
        status=FileStatus.from_github(f.status),
        additions=additions,
        deletions=deletions,
        changes=additions + deletions,
        contents_url=f.contents_url or "",
    )


class GitHubContentFetcher:
    """Reads changed files at a fixed commit so every read sees one snapshot."""

    def __init__(self, repo, ref: str):
        self._repo = repo
        self.ref = ref

    def fetch(self, file: ChangedFile) -> bytes:
        what = f"{file.name}@{self.ref[:7]}"
        try:
            contents = self._repo.get_contents(file.name, ref=self.ref)
        except (GithubException, requests.RequestException) as e:
            raise _translate(e, what) from e
        if isinstance(contents, list):
            raise TransportError(f"{what} is a directory, not a file")
        return contents.decoded_content


class GitHubClient:
    """Thin client over PyGithub configured with explicit credentials."""

    def __init__(self, token: str | None = None, base_url: str = DEFAULT_BASE_URL, timeout: int = 30):
        auth = Auth.Token(token) if token else None
        self._gh = Github(auth=auth, base_url=base_url, timeout=timeout)

    def _get_repo(self, owner: str, repo: str):
        try:
            return self._gh.get_repo(f"{owner}/{repo}")
        except (GithubException, requests.RequestException) as e:
            raise _translate(e, f"repository {owner}/{repo}") from e

    def _get_pull(self, owner: str, repo: str, number: int):
        this_repo = self._get_repo(owner, repo)
        try:
            return this_repo, this_repo.get_pull(number)
        except (GithubException, requests.RequestException) as e:
            raise _translate(e, f"PR #{number} in {owner}/{repo}") from e

    def fetch_pull_request_files(self, owner: str, repo: str, number: int) -> list[ChangedFile]:
        _, pr = self._get_pull(owner, repo, number)
        return self._files(pr, owner, repo, number)

    def fetch_pull_request(self, owner: str, repo: str, number: int) -> PullRequest:
        """Fetch metadata and changed files, merged into one PullRequest."""
        _, pr = self._get_pull(owner, repo, number)
        files = self._files(pr, owner, repo, number)
        logger.debug("Fetched %s/%s#%d with %d changed file(s)", owner, repo, number, len(files))
        return PullRequest(
            owner=owner,
            repo=repo,
            number=number,
            title=pr.title or "",
            description=pr.body or "",
            head_sha=pr.head.sha,
            files=files,
        )

    def content_fetcher(self, owner: str, repo: str, ref: str) -> GitHubContentFetcher:
        return GitHubContentFetcher(self._get_repo(owner, repo), ref)

    @staticmethod
    def _files(pr, owner: str, repo: str, number: int) -> list[ChangedFile]:
        try:
            return [to_changed_file(f) for f in pr.get_files()]
        except (GithubException, requests.RequestException) as e:
            raise _translate(e, f"files of PR #{number} in {owner}/{repo}") from e
