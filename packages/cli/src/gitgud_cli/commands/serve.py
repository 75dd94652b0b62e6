"""serve command: run the HTTP API with uvicorn."""

from __future__ import annotations

import click
import uvicorn

from gitgud_cli.commands.options import build_service


@click.command("serve")
@click.option("--host", default=None, help="Interface to bind. Overrides config.")
@click.option("--port", type=int, default=None, help="Port to listen on. Overrides config and $PORT.")
@click.pass_context
def serve_cmd(ctx, host: str | None, port: int | None):
    """Run the gitgud HTTP API."""
    from gitgud_api.app import create_app

    config = dict(ctx.obj["config"])
    if host is not None:
        config["host"] = host
    if port is not None:
        config["port"] = port

    # Reuse the store the CLI group opened; it is closed when the command exits.
    app = create_app(config, service=build_service(ctx))
    uvicorn.run(app, host=config["host"], port=int(config["port"]), log_level=str(config["log_level"]).lower())
