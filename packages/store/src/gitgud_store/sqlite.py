"""SQLiteStore: local file-based review store.

Schema:
  reviews  one row per review, scores flattened into columns so listing
           never has to decode JSON.
"""

from __future__ import annotations

import logging
import sqlite3
import threading

from gitgud_store.base import BaseStore
from gitgud_store.models import Review, ReviewStatus

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS reviews (
    id              TEXT PRIMARY KEY,
    pr_number       INTEGER NOT NULL,
    repo_owner      TEXT NOT NULL,
    repo_name       TEXT NOT NULL,
    status          TEXT NOT NULL,
    title           TEXT,
    description     TEXT,
    feedback        TEXT,
    commit_hash     TEXT,
    code_quality    REAL DEFAULT 0,
    performance     REAL DEFAULT 0,
    best_practices  REAL DEFAULT 0,
    created_at      TEXT NOT NULL,
    updated_at      TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_reviews_pr ON reviews (repo_owner, repo_name, pr_number);
"""

_COLUMNS = (
    "id",
    "pr_number",
    "repo_owner",
    "repo_name",
    "status",
    "title",
    "description",
    "feedback",
    "commit_hash",
    "code_quality",
    "performance",
    "best_practices",
    "created_at",
    "updated_at",
)


class SQLiteStore(BaseStore):
    """Stores reviews in a local SQLite database file.

    The database file path defaults to `.gitgud.db` in the current working
    directory. Configure via .gitgud.yml: `store_path: /path/to/gitgud.db`.

    The connection is shared between the API's worker threads, so every
    statement runs under a lock.
    """

    def __init__(self, db_path: str = ".gitgud.db"):
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    def save(self, review: Review) -> Review:
        self._stamp_new(review)
        placeholders = ", ".join("?" for _ in _COLUMNS)
        with self._lock:
            self._conn.execute(
                f"INSERT INTO reviews ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
                self._to_row(review),
            )
            self._conn.commit()
        logger.debug("Saved review %s for %s/%s#%d", review.id, review.repo_owner, review.repo_name, review.pr_number)
        return review

    def get(self, review_id: str) -> Review | None:
        with self._lock:
            row = self._conn.execute("SELECT * FROM reviews WHERE id=?", (review_id,)).fetchone()
        return self._row_to_review(row) if row else None

    def list_reviews(
        self,
        repo_owner: str | None = None,
        repo_name: str | None = None,
        pr_number: int | None = None,
    ) -> list[Review]:
        clauses = []
        params: list = []
        for column, value in (("repo_owner", repo_owner), ("repo_name", repo_name), ("pr_number", pr_number)):
            if value is not None:
                clauses.append(f"{column}=?")
                params.append(value)
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        # rowid breaks ties between reviews created within the same timestamp.
        query = f"SELECT * FROM reviews{where} ORDER BY created_at DESC, rowid DESC"
        with self._lock:
            rows = self._conn.execute(query, params).fetchall()
        return [self._row_to_review(r) for r in rows]

    def update(self, review: Review) -> Review:
        self._stamp_update(review)
        with self._lock:
            self._conn.execute(
                "UPDATE reviews SET status=?, feedback=?, updated_at=? WHERE id=?",
                (review.status.value, review.feedback, review.updated_at, review.id),
            )
            self._conn.commit()
        return review

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    @staticmethod
    def _to_row(review: Review) -> tuple:
        return (
            review.id,
            review.pr_number,
            review.repo_owner,
            review.repo_name,
            review.status.value,
            review.title,
            review.description,
            review.feedback,
            review.commit_hash,
            review.code_quality,
            review.performance,
            review.best_practices,
            review.created_at,
            review.updated_at,
        )

    @staticmethod
    def _row_to_review(row: sqlite3.Row) -> Review:
        return Review(
            id=row["id"],
            pr_number=row["pr_number"],
            repo_owner=row["repo_owner"],
            repo_name=row["repo_name"],
            status=ReviewStatus(row["status"]),
            title=row["title"] or "",
            description=row["description"] or "",
            feedback=row["feedback"] or "",
            commit_hash=row["commit_hash"] or "",
            code_quality=row["code_quality"] or 0.0,
            performance=row["performance"] or 0.0,
            best_practices=row["best_practices"] or 0.0,
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
