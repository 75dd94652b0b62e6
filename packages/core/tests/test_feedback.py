"""Tests for Markdown feedback rendering."""

from gitgud_core.feedback import render_feedback
from gitgud_core.models import AnalysisResult, Issue, Metric, Severity


def _result(issues=(), files=("a.go",)):
    return AnalysisResult(
        code_quality=86.0,
        performance=97.25,
        best_practices=50.0,
        issues=tuple(issues),
        metrics_by_file={name: (Metric("churn", 3.0, ""),) for name in files},
    )


def test_clean_result():
    body = render_feedback(_result())
    assert body.startswith("## Review summary")
    assert "No issues found. The changes look good." in body
    assert "**Code quality** 86.0" in body
    assert "**1** file(s) analyzed · **0** issue(s)" in body
    assert "| File |" not in body
    assert "_Clean: 1 file(s) with no issues._" in body


def test_issue_table_follows_file_order():
    issues = [
        Issue("b.go", 3, "bug-risk", Severity.WARNING, "panic"),
        Issue("a.go", 1, "style", Severity.INFO, "long"),
        Issue("b.go", 9, "style", Severity.INFO, "long"),
    ]
    body = render_feedback(_result(issues, files=("a.go", "b.go", "c.go")))

    assert "> 1 warning, 2 info issue(s). Most flagged: `b.go`." in body
    assert "Changes required." not in body
    rows = [line for line in body.splitlines() if line.startswith("| `")]
    assert rows == [
        "| `a.go` | — | — | 1 | 1 |",
        "| `b.go` | — | 1 | 1 | 2 |",
    ]
    assert "_Clean: 1 file(s) with no issues._" in body


def test_errors_require_changes():
    body = render_feedback(_result([Issue("a.go", 5, "complexity", Severity.ERROR, "too complex")]))
    assert "1 error issue(s)." in body
    assert body.count("Changes required.") == 1
