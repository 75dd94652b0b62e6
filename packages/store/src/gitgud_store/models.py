"""Review persistence model.

The analysis pipeline never sees these types; only the review service maps
an AnalysisResult onto a Review.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum


class ReviewStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    NEEDS_WORK = "needs_work"


@dataclass
class Review:
    """A persisted code review.

    Created by the review service after the analysis pipeline returns.
    ``id`` and the timestamps are filled in by the store on save().
    """

    pr_number: int
    repo_owner: str
    repo_name: str
    status: ReviewStatus = ReviewStatus.PENDING
    title: str = ""
    description: str = ""
    feedback: str = ""
    commit_hash: str = ""
    code_quality: float = 0.0
    performance: float = 0.0
    best_practices: float = 0.0
    id: str = ""
    created_at: str = ""  # ISO-8601 UTC timestamp
    updated_at: str = ""  # ISO-8601 UTC timestamp

    def to_dict(self) -> dict:
        d = asdict(self)
        d["status"] = self.status.value
        return d
