"""review command: analyze a pull request and store the resulting review."""

from __future__ import annotations

import click
from rich.console import Console

from gitgud_cli.commands.options import build_service, score_style, split_repo
from gitgud_core.errors import GitGudError
from gitgud_core.service import ReviewRequest

console = Console()


@click.command("review")
@click.option("--repo", required=True, help="GitHub repository in owner/name format.")
@click.option("--pr", "pr_number", type=int, required=True, help="Pull request number.")
@click.option("--commit", "commit_hash", default="", help="Commit the review refers to. Defaults to the PR head.")
@click.option("--workers", type=click.IntRange(min=1), default=None, help="Files analyzed in parallel. Overrides config.")
@click.pass_context
def review_cmd(ctx, repo: str, pr_number: int, commit_hash: str, workers: int | None):
    """Analyze a pull request and save the review to the configured store.

    \b
    Environment variables:
      GITHUB_TOKEN   GitHub personal access token (or use gh CLI).
                     Without one, only public repositories can be read.
    """
    owner, name = split_repo(repo)
    config = ctx.obj["config"]
    if not config.get("github_token"):
        console.print("[yellow]No GitHub token found; using anonymous access.[/yellow]")

    service = build_service(ctx, max_workers=workers)
    request = ReviewRequest(pr_number=pr_number, repo_owner=owner, repo_name=name, commit_hash=commit_hash)

    try:
        with console.status(f"Reviewing {repo}#{pr_number}..."):
            review = service.create_review(request)
    except GitGudError as e:
        raise click.ClickException(str(e)) from e

    console.print(f"[bold green]Review {review.id} created[/bold green] for {repo}#{pr_number}")
    for label, score in (
        ("Code quality", review.code_quality),
        ("Performance", review.performance),
        ("Best practices", review.best_practices),
    ):
        style = score_style(score)
        console.print(f"  {label + ':':<16}[{style}]{score:6.2f}[/{style}]")
    if config.get("store") == "noop":
        console.print("[dim]store: noop, the review was not persisted.[/dim]")
