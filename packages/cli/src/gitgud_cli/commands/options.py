"""Helpers shared by the CLI commands."""

from __future__ import annotations

import click

from gitgud_core.service import ReviewService


def split_repo(repo: str) -> tuple[str, str]:
    """Split ``owner/name`` into its two parts."""
    owner, sep, name = repo.partition("/")
    if not sep or not owner or not name or "/" in name:
        raise click.BadParameter(f"expected owner/name, got {repo!r}", param_hint="--repo")
    return owner, name


def build_service(ctx: click.Context, **overrides) -> ReviewService:
    config = {**ctx.obj["config"], **{k: v for k, v in overrides.items() if v is not None}}
    return ReviewService.from_config(config, ctx.obj["store"])


def score_style(score: float) -> str:
    if score >= 80:
        return "green"
    if score >= 50:
        return "yellow"
    return "red"
