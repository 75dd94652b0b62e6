"""CLI entry point for gitgud.

Commands:
  analyze  run the analysis pipeline on a pull request and print the result
  review   analyze a pull request and store the review
  history  display stored reviews
  stats    aggregate scores across stored reviews
  serve    run the HTTP API
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from gitgud_cli.commands.analyze import analyze_cmd
from gitgud_cli.commands.history import history_cmd
from gitgud_cli.commands.review import review_cmd
from gitgud_cli.commands.serve import serve_cmd
from gitgud_cli.commands.stats import stats_cmd
from gitgud_store.factory import open_store

console = Console()


def _build_store(config: dict):
    """Instantiate the configured store, turning a bad `store` value into a usage error."""
    try:
        return open_store(config)
    except ValueError as e:
        raise click.UsageError(str(e)) from e


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("gitgud"),
    prog_name="gitgud",
)
@click.option(
    "--config",
    "config_path",
    default=".gitgud.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="GITGUD_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Static analysis and code review for GitHub pull requests."""
    from gitgud_core.config import load_config

    ctx.ensure_object(dict)

    try:
        config = load_config(config_path)
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    _setup_logging("DEBUG" if verbose else str(config.get("log_level", "INFO")).upper())

    store = _build_store(config)
    ctx.obj["store"] = store
    ctx.obj["config"] = config
    ctx.call_on_close(store.close)


main.add_command(analyze_cmd)
main.add_command(review_cmd)
main.add_command(history_cmd)
main.add_command(stats_cmd)
main.add_command(serve_cmd)
