"""history command: display stored reviews."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from gitgud_cli.commands.options import score_style, split_repo

console = Console()

_STATUS_STYLE = {
    "approved": "green",
    "pending": "yellow",
    "needs_work": "magenta",
    "rejected": "red",
}


@click.command("history")
@click.option("--repo", default=None, help="Filter by GitHub repository (owner/name).")
@click.option("--pr", "pr_number", type=int, default=None, help="Filter by PR number.")
@click.option("--limit", default=20, show_default=True, help="Maximum number of records to show.")
@click.pass_context
def history_cmd(ctx, repo: str | None, pr_number: int | None, limit: int):
    """Show stored reviews, newest first."""
    from gitgud_store.noop import NoOpStore

    store = ctx.obj.get("store") if ctx.obj else None
    if store is None or isinstance(store, NoOpStore):
        raise click.UsageError("No store configured. Set 'store: sqlite' in .gitgud.yml.")

    owner, name = split_repo(repo) if repo else (None, None)
    reviews = store.list_reviews(repo_owner=owner, repo_name=name, pr_number=pr_number)
    if not reviews:
        console.print("[yellow]No reviews found.[/yellow]")
        return

    reviews = reviews[:limit]

    title = f"Review History for {repo}" if repo else "Review History"
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("ID", width=8)
    if not repo:
        table.add_column("Repository")
    table.add_column("PR", style="bold", width=6)
    table.add_column("Title", max_width=40)
    table.add_column("Status", width=10)
    table.add_column("Quality", justify="right")
    table.add_column("Perf", justify="right")
    table.add_column("Practices", justify="right")
    table.add_column("Created At", width=20)

    for r in reviews:
        status_style = _STATUS_STYLE.get(r.status.value, "white")
        row = [r.id[:8]]
        if not repo:
            row.append(f"{r.repo_owner}/{r.repo_name}")
        row += [
            f"#{r.pr_number}",
            r.title[:40],
            f"[{status_style}]{r.status.value}[/{status_style}]",
            *(
                f"[{score_style(s)}]{s:.1f}[/{score_style(s)}]"
                for s in (r.code_quality, r.performance, r.best_practices)
            ),
            r.created_at[:19].replace("T", " "),
        ]
        table.add_row(*row)

    console.print(table)
