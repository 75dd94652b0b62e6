"""Tests for gitgud-store implementations."""

from __future__ import annotations

import sqlite3

import pytest

from gitgud_store.factory import open_store
from gitgud_store.models import Review, ReviewStatus
from gitgud_store.noop import NoOpStore
from gitgud_store.sqlite import SQLiteStore


def _make_review(owner="octo", name="hello", pr_number=1, quality=90.0):
    return Review(
        pr_number=pr_number,
        repo_owner=owner,
        repo_name=name,
        title="Fix auth bug",
        description="Closes #12",
        feedback="## Review summary",
        commit_hash="a" * 40,
        code_quality=quality,
        performance=95.5,
        best_practices=75.0,
    )


# ---------------------------------------------------------------------------
# Review model
# ---------------------------------------------------------------------------


def test_review_to_dict_serialises_status():
    d = _make_review().to_dict()
    assert d["status"] == "pending"
    assert d["repo_owner"] == "octo"
    assert set(d) >= {"id", "created_at", "updated_at", "code_quality"}


# ---------------------------------------------------------------------------
# NoOpStore
# ---------------------------------------------------------------------------


class TestNoOpStore:
    def test_save_stamps_review(self):
        review = NoOpStore().save(_make_review())
        assert len(review.id) == 32
        assert review.created_at == review.updated_at != ""

    def test_nothing_is_kept(self):
        store = NoOpStore()
        review = store.save(_make_review())
        assert store.get(review.id) is None
        assert store.list_reviews() == []
        assert store.list_reviews(repo_owner="octo", pr_number=1) == []


# ---------------------------------------------------------------------------
# SQLiteStore
# ---------------------------------------------------------------------------


@pytest.fixture
def store(tmp_path):
    s = SQLiteStore(db_path=str(tmp_path / "test.db"))
    yield s
    s.close()


class TestSQLiteStore:
    def test_save_and_get(self, store):
        saved = store.save(_make_review())
        loaded = store.get(saved.id)
        assert loaded == saved
        assert loaded.status == ReviewStatus.PENDING
        assert loaded.code_quality == 90.0

    def test_existing_id_kept(self, store):
        review = _make_review()
        review.id = "fixed-id"
        store.save(review)
        assert store.get("fixed-id") is not None

    def test_get_unknown_returns_none(self, store):
        assert store.get("missing") is None

    def test_list_newest_first(self, store):
        first = store.save(_make_review(pr_number=1))
        second = store.save(_make_review(pr_number=2))
        assert [r.id for r in store.list_reviews()] == [second.id, first.id]

    def test_list_filters(self, store):
        store.save(_make_review(pr_number=1))
        store.save(_make_review(pr_number=2))
        store.save(_make_review(name="other", pr_number=1))
        store.save(_make_review(owner="someone", pr_number=1))

        assert len(store.list_reviews()) == 4
        assert len(store.list_reviews(repo_owner="octo")) == 3
        assert len(store.list_reviews(repo_owner="octo", repo_name="hello")) == 2
        hits = store.list_reviews(repo_owner="octo", repo_name="hello", pr_number=1)
        assert [(r.repo_name, r.pr_number) for r in hits] == [("hello", 1)]

    def test_list_no_match_is_empty(self, store):
        store.save(_make_review())
        assert store.list_reviews(repo_owner="nobody") == []

    def test_update_status_and_feedback(self, store):
        review = store.save(_make_review())
        created_at = review.created_at

        review.status = ReviewStatus.NEEDS_WORK
        review.feedback = "Please add tests"
        store.update(review)

        loaded = store.get(review.id)
        assert loaded.status == ReviewStatus.NEEDS_WORK
        assert loaded.feedback == "Please add tests"
        assert loaded.created_at == created_at
        assert loaded.updated_at >= created_at

    def test_persists_across_connections(self, tmp_path):
        path = str(tmp_path / "persist.db")
        first = SQLiteStore(db_path=path)
        review = first.save(_make_review())
        first.close()

        second = SQLiteStore(db_path=path)
        assert second.get(review.id) == review
        second.close()

    def test_index_on_pull_request_columns(self, tmp_path):
        path = str(tmp_path / "schema.db")
        SQLiteStore(db_path=path).close()
        conn = sqlite3.connect(path)
        indexes = {row[1] for row in conn.execute("PRAGMA index_list('reviews')")}
        columns = [row[2] for row in conn.execute("PRAGMA index_info('idx_reviews_pr')")]
        conn.close()
        assert "idx_reviews_pr" in indexes
        assert columns == ["repo_owner", "repo_name", "pr_number"]


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


class TestOpenStore:
    def test_sqlite(self, tmp_path):
        store = open_store({"store": "sqlite", "store_path": str(tmp_path / "x.db")})
        assert isinstance(store, SQLiteStore)
        store.close()

    def test_noop(self):
        assert isinstance(open_store({"store": "noop"}), NoOpStore)

    def test_unknown(self):
        with pytest.raises(ValueError, match="gist"):
            open_store({"store": "gist"})
