"""stats command: aggregate scores across stored reviews."""

from __future__ import annotations

from collections import Counter
from statistics import mean

import click
from rich.console import Console
from rich.table import Table

from gitgud_cli.commands.options import split_repo
from gitgud_store.models import ReviewStatus

console = Console()


@click.command("stats")
@click.option("--repo", required=True, help="GitHub repository (owner/name).")
@click.option("--top", default=5, show_default=True, help="Number of lowest-scoring PRs to show.")
@click.pass_context
def stats_cmd(ctx, repo: str, top: int):
    """Show aggregated review statistics for a repository.

    Reports average scores, the status distribution, and the pull requests
    with the lowest code quality, which is where review effort pays off most.
    """
    from gitgud_store.noop import NoOpStore

    store = ctx.obj.get("store") if ctx.obj else None
    if store is None or isinstance(store, NoOpStore):
        raise click.UsageError("No store configured. Set 'store: sqlite' in .gitgud.yml.")

    owner, name = split_repo(repo)
    reviews = store.list_reviews(repo_owner=owner, repo_name=name)
    if not reviews:
        console.print("[yellow]No reviews found for this repository.[/yellow]")
        return

    console.print(f"\n[bold]Review stats for [cyan]{repo}[/cyan][/bold]")
    console.print(f"  Total reviews:       {len(reviews)}")
    console.print(f"  Pull requests:       {len({r.pr_number for r in reviews})}")
    console.print(f"  Avg code quality:    {mean(r.code_quality for r in reviews):.1f}")
    console.print(f"  Avg performance:     {mean(r.performance for r in reviews):.1f}")
    console.print(f"  Avg best practices:  {mean(r.best_practices for r in reviews):.1f}")

    # --- Status breakdown ---
    status_counter = Counter(r.status for r in reviews)
    status_table = Table(title="Status Breakdown", show_header=True)
    status_table.add_column("Status", style="bold")
    status_table.add_column("Count", justify="right")
    status_table.add_column("% of total", justify="right")
    for status in ReviewStatus:
        count = status_counter.get(status, 0)
        status_table.add_row(status.value, str(count), f"{count / len(reviews) * 100:.1f}%")
    console.print(status_table)

    # --- Lowest code quality, latest review per PR ---
    latest: dict[int, object] = {}
    for r in reviews:
        latest.setdefault(r.pr_number, r)  # reviews arrive newest first
    worst = sorted(latest.values(), key=lambda r: r.code_quality)[:top]
    worst_table = Table(title=f"Lowest Code Quality (top {top})", show_header=True)
    worst_table.add_column("PR", style="bold")
    worst_table.add_column("Title", max_width=40)
    worst_table.add_column("Quality", justify="right")
    for r in worst:
        worst_table.add_row(f"#{r.pr_number}", r.title[:40], f"{r.code_quality:.1f}")
    console.print(worst_table)
