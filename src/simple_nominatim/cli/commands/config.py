"""
Configuration commands.
"""

from __future__ import annotations

import typer

from simple_nominatim.core.config import ClientConfig

from ..common import console

app = typer.Typer(help="Inspect client configuration", no_args_is_help=True)


@app.command("show")
def show(ctx: typer.Context) -> None:
    """Print the effective configuration as JSON."""
    config: ClientConfig = ctx.obj if isinstance(ctx.obj, ClientConfig) else ClientConfig()
    console.print_json(config.model_dump_json())
