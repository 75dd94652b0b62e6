"""Render an AnalysisResult as the Markdown feedback stored on a review."""

from __future__ import annotations

from gitgud_core.models import AnalysisResult, Severity

_SEVERITIES = (Severity.ERROR, Severity.WARNING, Severity.INFO)


def render_feedback(result: AnalysisResult) -> str:
    # Per-file severity counts.
    file_counts: dict[str, dict[Severity, int]] = {}
    for issue in result.issues:
        counts = file_counts.setdefault(issue.file, {s: 0 for s in _SEVERITIES})
        counts[issue.severity] += 1

    totals = {s: sum(c[s] for c in file_counts.values()) for s in _SEVERITIES}
    total_issues = sum(totals.values())

    lines = ["## Review summary\n"]

    if total_issues == 0:
        verdict = "No issues found. The changes look good."
    else:
        parts = [f"{totals[s]} {s.value}" for s in _SEVERITIES if totals[s]]
        flagged = sorted(file_counts, key=lambda p: sum(file_counts[p].values()), reverse=True)
        verdict = f"{', '.join(parts)} issue(s). Most flagged: `{flagged[0]}`."
        if totals[Severity.ERROR]:
            verdict += " Changes required."
    lines.append(f"> {verdict}\n")

    lines.append(
        f"**Code quality** {result.code_quality:.1f} · "
        f"**Performance** {result.performance:.1f} · "
        f"**Best practices** {result.best_practices:.1f}\n"
    )
    lines.append(f"**{len(result.metrics_by_file)}** file(s) analyzed · **{total_issues}** issue(s)\n")

    if file_counts:
        lines.append("| File | Error | Warning | Info | Total |")
        lines.append("|------|:-----:|:-------:|:----:|:-----:|")
        # Walk metrics_by_file so rows follow pull-request order.
        for name in result.metrics_by_file:
            counts = file_counts.get(name)
            if counts is None:
                continue
            lines.append(
                f"| `{name}` "
                f"| {counts[Severity.ERROR] or '—'} "
                f"| {counts[Severity.WARNING] or '—'} "
                f"| {counts[Severity.INFO] or '—'} "
                f"| {sum(counts.values())} |"
            )

    clean = [name for name in result.metrics_by_file if name not in file_counts]
    if clean:
        lines.append(f"\n_Clean: {len(clean)} file(s) with no issues._")

    return "\n".join(lines)
