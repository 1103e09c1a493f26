"""
Simple Nominatim CLI - Main entry point.

Geocoding, reverse geocoding and status checks against the Nominatim
API with caching, rate limiting and retries built in.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.traceback import install as install_rich_traceback

from simple_nominatim import __app_name__, __version__
from simple_nominatim.core.config import ConfigError, load_client_config
from simple_nominatim.core.logging import setup_logging

from .common import console, err_console

# Load environment variables from .env (if present)
load_dotenv()

# Install rich traceback for better error display
install_rich_traceback(show_locals=False, width=120)

# Create main app
app = typer.Typer(
    name=__app_name__,
    help="Simple client for the OpenStreetMap Nominatim API",
    rich_markup_mode="rich",
    no_args_is_help=True,
    pretty_exceptions_show_locals=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold cyan]{__app_name__}[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a YAML configuration file (default: ./nominatim.yaml)",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Log level (DEBUG, INFO, WARNING, ERROR)",
    ),
) -> None:
    """Simple Nominatim - search, reverse geocode and check service status."""
    try:
        config = load_client_config(config_path)
    except ConfigError as e:
        err_console.print(f"[red]Configuration error:[/red] {e}", highlight=False)
        if e.details:
            err_console.print(f"[dim]{e.details}[/dim]", highlight=False)
        raise typer.Exit(1)

    if log_level:
        try:
            config = config.model_copy(
                update={"logging": config.logging.model_validate(
                    {**config.logging.model_dump(), "level": log_level}
                )}
            )
        except ValueError:
            err_console.print(f"[red]Invalid log level:[/red] {log_level}", highlight=False)
            raise typer.Exit(1)

    setup_logging(
        level=config.logging.level,
        log_file=config.logging.file,
        json_format=config.logging.json_format,
        rich_console=config.logging.rich_console,
    )

    ctx.obj = config


# =============================================================================
# Import and register subcommand modules
# =============================================================================

from .commands import config, reverse, search, status  # noqa: E402

app.add_typer(search.app, name="search", help="Search by query or address components")
app.add_typer(reverse.app, name="reverse", help="Reverse geocode a coordinate")
app.add_typer(status.app, name="status", help="Check the Nominatim service status")
app.add_typer(config.app, name="config", help="Inspect the effective configuration")


# =============================================================================
# Entry Point
# =============================================================================


def run() -> None:
    """Run the CLI application."""
    app()


if __name__ == "__main__":
    run()
