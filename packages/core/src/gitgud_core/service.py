"""Review service: the seam between the analysis pipeline and the store.

Both the HTTP API and the CLI go through ReviewService, so a review created
from either surface is built and persisted the same way.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from gitgud_core.analysis.analyzers.registry import AnalyzerRegistry
from gitgud_core.analysis.pipeline import AnalysisPipeline
from gitgud_core.cancel import CancelToken
from gitgud_core.errors import ReviewNotFound
from gitgud_core.feedback import render_feedback
from gitgud_core.gh.pull_request import DEFAULT_BASE_URL, GitHubClient
from gitgud_core.models import AnalysisResult, PullRequest
from gitgud_store.base import BaseStore
from gitgud_store.models import Review, ReviewStatus

logger = logging.getLogger(__name__)


@dataclass
class ReviewRequest:
    pr_number: int
    repo_owner: str
    repo_name: str
    commit_hash: str = ""


class ReviewService:
    def __init__(
        self,
        github: GitHubClient,
        store: BaseStore,
        max_workers: int = 1,
        registry: AnalyzerRegistry | None = None,
    ):
        self.github = github
        self.store = store
        self.max_workers = max_workers
        self.registry = registry

    @classmethod
    def from_config(cls, config: dict, store: BaseStore) -> ReviewService:
        github = GitHubClient(
            token=config.get("github_token"),
            base_url=config.get("github_base_url", DEFAULT_BASE_URL),
            timeout=config.get("request_timeout", 30),
        )
        return cls(github, store, max_workers=config.get("max_workers", 1))

    def analyze(
        self,
        owner: str,
        repo: str,
        number: int,
        cancel_token: CancelToken | None = None,
    ) -> tuple[PullRequest, AnalysisResult]:
        """Fetch a pull request and run the analysis pipeline over it.

        Nothing is persisted. Every file is read at the pull request's head
        commit so the run sees one consistent snapshot.
        """
        pull_request = self.github.fetch_pull_request(owner, repo, number)
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        fetcher = self.github.content_fetcher(owner, repo, pull_request.head_sha)
        pipeline = AnalysisPipeline(fetcher, registry=self.registry, max_workers=self.max_workers)
        return pull_request, pipeline.run(pull_request, cancel_token)

    def create_review(self, request: ReviewRequest, cancel_token: CancelToken | None = None) -> Review:
        pull_request, result = self.analyze(
            request.repo_owner, request.repo_name, request.pr_number, cancel_token
        )
        review = Review(
            pr_number=request.pr_number,
            repo_owner=request.repo_owner,
            repo_name=request.repo_name,
            status=ReviewStatus.PENDING,
            title=pull_request.title,
            description=pull_request.description,
            feedback=render_feedback(result),
            commit_hash=request.commit_hash or pull_request.head_sha,
            code_quality=result.code_quality,
            performance=result.performance,
            best_practices=result.best_practices,
        )
        review = self.store.save(review)
        logger.info("Created review %s for %s#%d", review.id, pull_request.full_name, request.pr_number)
        return review

    def get_review(self, review_id: str) -> Review:
        review = self.store.get(review_id)
        if review is None:
            raise ReviewNotFound(review_id)
        return review

    def list_reviews(
        self,
        repo_owner: str | None = None,
        repo_name: str | None = None,
        pr_number: int | None = None,
    ) -> list[Review]:
        return self.store.list_reviews(repo_owner=repo_owner, repo_name=repo_name, pr_number=pr_number)

    def update_review(
        self,
        review_id: str,
        status: ReviewStatus | str | None = None,
        feedback: str | None = None,
    ) -> Review:
        """Change a review's status and/or feedback.

        Raises ReviewNotFound for an unknown id and ValueError for a status
        outside ReviewStatus.
        """
        review = self.get_review(review_id)
        if status is not None:
            review.status = ReviewStatus(status)
        if feedback is not None:
            review.feedback = feedback
        return self.store.update(review)
