"""Configuration management commands."""

import typer

from ..config.settings import get_settings
from .formatters import console, create_table

config_app = typer.Typer(help="Inspect configuration settings")


@config_app.command()
def show() -> None:
    """Show current configuration."""
    settings = get_settings()

    table = create_table(title="Configuration")
    table.add_column("Setting", style="cyan", width=20)
    table.add_column("Value", style="white")

    table.add_row("Algorithm", settings.algorithm.value)
    table.add_row("Cryptographic", str(settings.algorithm.is_cryptographic))
    table.add_row("Workers", str(settings.workers) if settings.workers else "CPU count")
    table.add_row("Chunk size", str(settings.chunk_size))
    table.add_row("Strict", str(settings.strict))
    table.add_row("Log level", settings.log_level)
    table.add_row("Log file", str(settings.log_file) if settings.log_file else "None")

    console.print(table)
