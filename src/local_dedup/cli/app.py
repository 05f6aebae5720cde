"""Main CLI application."""

from typing import Optional

import typer

from .. import __version__
from ..common.constants import APP_NAME
from ..common.logging import setup_logging
from ..config.settings import get_settings
from .config_cmd import config_app
from .scan_cmd import scan

app = typer.Typer(
    name=APP_NAME,
    help="Find groups of identical files in a directory tree",
    add_completion=False,
)

# Register subcommands
app.add_typer(config_app, name="config")

# Add main commands
app.command(name="scan")(scan)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"{APP_NAME} version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Print version and exit",
    ),
) -> None:
    """Local duplicate file finder."""
    settings = get_settings()
    log_level = "DEBUG" if verbose else settings.log_level
    setup_logging(level=log_level, log_file=settings.log_file)
