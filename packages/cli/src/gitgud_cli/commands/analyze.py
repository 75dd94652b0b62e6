"""analyze command: run the analysis pipeline on a pull request and print the result."""

from __future__ import annotations

import json

import click
from rich.console import Console
from rich.table import Table

from gitgud_cli.commands.options import build_service, score_style, split_repo
from gitgud_core.errors import GitGudError
from gitgud_core.models import AnalysisResult, Severity

console = Console()

_SEVERITY_STYLE = {Severity.ERROR: "red", Severity.WARNING: "yellow", Severity.INFO: "blue"}


@click.command("analyze")
@click.option("--repo", required=True, help="GitHub repository in owner/name format.")
@click.option("--pr", "pr_number", type=int, required=True, help="Pull request number.")
@click.option("--workers", type=click.IntRange(min=1), default=None, help="Files analyzed in parallel. Overrides config.")
@click.option("--json", "as_json", is_flag=True, help="Print the raw result as JSON.")
@click.pass_context
def analyze_cmd(ctx, repo: str, pr_number: int, workers: int | None, as_json: bool):
    """Analyze a pull request without storing a review.

    Prints the three scores, the metrics of every analyzed file and the
    issues found.
    """
    owner, name = split_repo(repo)
    service = build_service(ctx, max_workers=workers)

    try:
        if as_json:
            _, result = service.analyze(owner, name, pr_number)
        else:
            with console.status(f"Analyzing {repo}#{pr_number}..."):
                _, result = service.analyze(owner, name, pr_number)
    except GitGudError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    _print_result(repo, pr_number, result)


def _print_result(repo: str, pr_number: int, result: AnalysisResult) -> None:
    console.print(f"\n[bold]Analysis of [cyan]{repo}#{pr_number}[/cyan][/bold]")
    for label, score in (
        ("Code quality", result.code_quality),
        ("Performance", result.performance),
        ("Best practices", result.best_practices),
    ):
        style = score_style(score)
        console.print(f"  {label + ':':<16}[{style}]{score:6.2f}[/{style}]")

    if result.metrics_by_file:
        metric_table = Table(title="Metrics", show_header=True, header_style="bold cyan")
        metric_table.add_column("File")
        metric_table.add_column("Metric")
        metric_table.add_column("Value", justify="right")
        for file_name, metrics in result.metrics_by_file.items():
            if not metrics:
                metric_table.add_row(file_name, "[dim]not analyzed yet[/dim]", "")
                continue
            for i, metric in enumerate(metrics):
                metric_table.add_row(file_name if i == 0 else "", metric.name, f"{metric.value:g}")
        console.print(metric_table)

    if not result.issues:
        console.print("[green]No issues found.[/green]")
        return

    issue_table = Table(title=f"Issues ({len(result.issues)})", show_header=True, header_style="bold cyan")
    issue_table.add_column("File")
    issue_table.add_column("Line", justify="right", width=6)
    issue_table.add_column("Severity", width=9)
    issue_table.add_column("Type", width=14)
    issue_table.add_column("Description")
    for issue in result.issues:
        style = _SEVERITY_STYLE[issue.severity]
        issue_table.add_row(
            issue.file,
            str(issue.line) if issue.line else "",
            f"[{style}]{issue.severity.value}[/{style}]",
            issue.kind,
            issue.description,
        )
    console.print(issue_table)
