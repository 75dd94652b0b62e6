"""Tests for the CLI entry point."""

import json
from unittest.mock import MagicMock

import click
import pytest
from click.testing import CliRunner

from gitgud_cli.cli import _build_store, main
from gitgud_core.config import DEFAULT_CONFIG
from gitgud_core.errors import PullRequestNotFound
from gitgud_core.models import AnalysisResult, Issue, Metric, PullRequest, Severity
from gitgud_core.service import ReviewRequest, ReviewService
from gitgud_store.models import Review, ReviewStatus
from gitgud_store.noop import NoOpStore
from gitgud_store.sqlite import SQLiteStore


def _make_config(**overrides):
    return {**DEFAULT_CONFIG, "github_token": "tok", **overrides}


def _result():
    return AnalysisResult(
        code_quality=91.0,
        performance=98.5,
        best_practices=50.0,
        issues=(Issue("main.go", 4, "bug-risk", Severity.WARNING, "panic aborts"),),
        metrics_by_file={"main.go": (Metric("churn", 6.0, "Code churn"),), "app.py": ()},
    )


def _review(review_id="r1", pr_number=7, status=ReviewStatus.PENDING, quality=80.0):
    return Review(
        id=review_id,
        pr_number=pr_number,
        repo_owner="octo",
        repo_name="hello",
        status=status,
        title="Fix",
        code_quality=quality,
        performance=90.0,
        best_practices=60.0,
        created_at="2026-01-02T03:04:05+00:00",
        updated_at="2026-01-02T03:04:05+00:00",
    )


def _patch_common(mocker, config=None):
    """Patch load_config, logging setup and _build_store for most tests."""
    cfg = config or _make_config()
    mocker.patch("gitgud_core.config.load_config", return_value=cfg)
    mocker.patch("gitgud_cli.cli._setup_logging")
    # SQLiteStore spec so isinstance(store, NoOpStore) is False and
    # history/stats treat it as a configured store.
    mock_store = MagicMock(spec=SQLiteStore)
    mock_store.list_reviews.return_value = []
    mocker.patch("gitgud_cli.cli._build_store", return_value=mock_store)
    return cfg, mock_store


def _patch_service(mocker, module):
    service = MagicMock(spec=ReviewService)
    build = mocker.patch(f"gitgud_cli.commands.{module}.build_service", return_value=service)
    return service, build


class TestAnalyze:
    def test_prints_scores_and_issues(self, mocker):
        _patch_common(mocker)
        service, _ = _patch_service(mocker, "analyze")
        service.analyze.return_value = (PullRequest("octo", "hello", 7), _result())

        result = CliRunner().invoke(main, ["analyze", "--repo", "octo/hello", "--pr", "7"])

        assert result.exit_code == 0, result.output
        service.analyze.assert_called_once_with("octo", "hello", 7)
        assert "91.00" in result.output
        assert "panic aborts" in result.output

    def test_json_output(self, mocker):
        _patch_common(mocker)
        service, _ = _patch_service(mocker, "analyze")
        service.analyze.return_value = (PullRequest("octo", "hello", 7), _result())

        result = CliRunner().invoke(main, ["analyze", "--repo", "octo/hello", "--pr", "7", "--json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == _result().to_dict()

    def test_workers_override(self, mocker):
        _patch_common(mocker)
        service, build = _patch_service(mocker, "analyze")
        service.analyze.return_value = (PullRequest("octo", "hello", 7), _result())

        CliRunner().invoke(main, ["analyze", "--repo", "octo/hello", "--pr", "7", "--workers", "8"])

        assert build.call_args.kwargs == {"max_workers": 8}

    def test_zero_workers_rejected(self, mocker):
        _patch_common(mocker)
        _patch_service(mocker, "analyze")
        result = CliRunner().invoke(main, ["analyze", "--repo", "octo/hello", "--pr", "7", "--workers", "0"])
        assert result.exit_code == 2

    @pytest.mark.parametrize("repo", ["octo", "octo/", "/hello", "a/b/c"])
    def test_bad_repo_format(self, mocker, repo):
        _patch_common(mocker)
        _patch_service(mocker, "analyze")
        result = CliRunner().invoke(main, ["analyze", "--repo", repo, "--pr", "7"])
        assert result.exit_code == 2
        assert "owner/name" in result.output

    def test_errors_reported_without_traceback(self, mocker):
        _patch_common(mocker)
        service, _ = _patch_service(mocker, "analyze")
        service.analyze.side_effect = PullRequestNotFound("PR #7 in octo/hello not found")

        result = CliRunner().invoke(main, ["analyze", "--repo", "octo/hello", "--pr", "7"])

        assert result.exit_code == 1
        assert "PR #7 in octo/hello not found" in result.output


class TestReview:
    def test_creates_review(self, mocker):
        _patch_common(mocker)
        service, _ = _patch_service(mocker, "review")
        service.create_review.return_value = _review()

        result = CliRunner().invoke(main, ["review", "--repo", "octo/hello", "--pr", "7", "--commit", "abc1234"])

        assert result.exit_code == 0, result.output
        service.create_review.assert_called_once_with(
            ReviewRequest(pr_number=7, repo_owner="octo", repo_name="hello", commit_hash="abc1234")
        )
        assert "Review r1 created" in result.output

    def test_warns_without_token(self, mocker):
        _patch_common(mocker, config=_make_config(github_token=None))
        service, _ = _patch_service(mocker, "review")
        service.create_review.return_value = _review()

        result = CliRunner().invoke(main, ["review", "--repo", "octo/hello", "--pr", "7"])

        assert result.exit_code == 0, result.output
        assert "anonymous" in result.output


class TestHistory:
    def test_requires_configured_store(self, mocker):
        _patch_common(mocker)
        mocker.patch("gitgud_cli.cli._build_store", return_value=NoOpStore())
        result = CliRunner().invoke(main, ["history"])
        assert result.exit_code != 0
        assert "No store configured" in result.output

    def test_empty(self, mocker):
        _patch_common(mocker)
        result = CliRunner().invoke(main, ["history", "--repo", "octo/hello"])
        assert result.exit_code == 0
        assert "No reviews found" in result.output

    def test_filters_and_limit(self, mocker):
        _, store = _patch_common(mocker)
        store.list_reviews.return_value = [_review("r3", 9), _review("r2", 8), _review("r1", 7)]

        result = CliRunner().invoke(main, ["history", "--repo", "octo/hello", "--pr", "9", "--limit", "2"])

        assert result.exit_code == 0, result.output
        store.list_reviews.assert_called_once_with(repo_owner="octo", repo_name="hello", pr_number=9)
        assert "#9" in result.output
        assert "#8" in result.output
        assert "#7" not in result.output


class TestStats:
    def test_aggregates(self, mocker):
        _, store = _patch_common(mocker)
        store.list_reviews.return_value = [
            _review("r2", 8, ReviewStatus.APPROVED, quality=90.0),
            _review("r1", 7, ReviewStatus.PENDING, quality=70.0),
        ]

        result = CliRunner().invoke(main, ["stats", "--repo", "octo/hello"])

        assert result.exit_code == 0, result.output
        store.list_reviews.assert_called_once_with(repo_owner="octo", repo_name="hello")
        assert "Total reviews:       2" in result.output
        assert "Avg code quality:    80.0" in result.output

    def test_empty(self, mocker):
        _patch_common(mocker)
        result = CliRunner().invoke(main, ["stats", "--repo", "octo/hello"])
        assert result.exit_code == 0
        assert "No reviews found" in result.output


def test_serve_runs_uvicorn(mocker):
    cfg, store = _patch_common(mocker)
    create_app = mocker.patch("gitgud_api.app.create_app")
    run = mocker.patch("gitgud_cli.commands.serve.uvicorn.run")

    result = CliRunner().invoke(main, ["serve", "--port", "9999"])

    assert result.exit_code == 0, result.output
    config_arg = create_app.call_args.args[0]
    assert config_arg["port"] == 9999
    assert create_app.call_args.kwargs["service"].store is store
    run.assert_called_once_with(create_app.return_value, host="0.0.0.0", port=9999, log_level="info")


def test_store_closed_after_command(mocker):
    _, store = _patch_common(mocker)
    CliRunner().invoke(main, ["history"])
    store.close.assert_called_once()


def test_bad_config_file_is_usage_error(mocker):
    mocker.patch("gitgud_core.config.load_config", side_effect=ValueError(".gitgud.yml: expected a mapping"))
    result = CliRunner().invoke(main, ["history"])
    assert result.exit_code == 2
    assert "expected a mapping" in result.output


class TestBuildStore:
    def test_sqlite(self, tmp_path):
        store = _build_store({"store": "sqlite", "store_path": str(tmp_path / "cli.db")})
        assert isinstance(store, SQLiteStore)
        store.close()

    def test_unknown_store_is_usage_error(self):
        with pytest.raises(click.UsageError, match="unknown store"):
            _build_store({"store": "gist"})
