"""No-op store for dry runs.

Reviews are analyzed and returned but not persisted anywhere. Using a
NoOpStore rather than None lets the service always call store.save()
without conditional checks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from gitgud_store.base import BaseStore

if TYPE_CHECKING:
    from gitgud_store.models import Review


class NoOpStore(BaseStore):
    """Stamps and returns reviews without keeping them."""

    def save(self, review: Review) -> Review:
        self._stamp_new(review)
        return review

    def get(self, review_id: str) -> Review | None:
        return None

    def list_reviews(
        self,
        repo_owner: str | None = None,
        repo_name: str | None = None,
        pr_number: int | None = None,
    ) -> list[Review]:
        return []

    def update(self, review: Review) -> Review:
        self._stamp_update(review)
        return review
