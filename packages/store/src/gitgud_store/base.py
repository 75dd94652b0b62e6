"""Abstract store interface.

Any storage backend (SQLite, Postgres, an in-memory stub for tests)
implements this interface. The review service depends on BaseStore, not on
a concrete backend, so backends are swappable without touching it.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gitgud_store.models import Review


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


class BaseStore(ABC):
    """Pluggable persistence layer for reviews."""

    @abstractmethod
    def save(self, review: Review) -> Review:
        """Persist a new review, assigning its id and timestamps."""

    @abstractmethod
    def get(self, review_id: str) -> Review | None:
        """Return one review, or None if the id is unknown."""

    @abstractmethod
    def list_reviews(
        self,
        repo_owner: str | None = None,
        repo_name: str | None = None,
        pr_number: int | None = None,
    ) -> list[Review]:
        """Return reviews newest first, optionally filtered.

        Returns an empty list if nothing matches; never raises for that.
        """

    @abstractmethod
    def update(self, review: Review) -> Review:
        """Write back a changed review, refreshing updated_at."""

    def close(self) -> None:
        """Release any resources held by the store (connections, file handles).

        Default is a no-op so callers can always call close() safely.
        """

    @staticmethod
    def _stamp_new(review: Review) -> None:
        if not review.id:
            review.id = uuid.uuid4().hex
        now = _utcnow()
        review.created_at = now
        review.updated_at = now

    @staticmethod
    def _stamp_update(review: Review) -> None:
        review.updated_at = _utcnow()
