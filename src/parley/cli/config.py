"""CLI: parley config show|set|reset"""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from parley.config import DEFAULT_SETTINGS, SETTINGS_FILE, load_config, save_settings

console = Console()

settings_option = click.option(
    "--settings", "settings_path", type=click.Path(path_type=Path), default=SETTINGS_FILE,
    show_default=True, help="Settings file",
)


@click.group()
def config():
    """Server settings."""


@config.command("show")
@settings_option
def config_show(settings_path: Path):
    """Print the server settings, creating the file if needed."""
    settings = load_config(settings_path)
    table = Table(title=str(settings_path))
    table.add_column("Key", style="bold")
    table.add_column("Value")
    table.add_row("host", settings.host)
    table.add_row("port", str(settings.port))
    console.print(table)


@config.command("set")
@settings_option
@click.option("--host", default=None)
@click.option("--port", default=None, type=click.IntRange(1, 65535))
def config_set(settings_path: Path, host: Optional[str], port: Optional[int]):
    """Change the server host and/or port."""
    settings = load_config(settings_path)
    update = {k: v for k, v in {"host": host, "port": port}.items() if v is not None}
    if not update:
        raise click.UsageError("Pass --host and/or --port")
    settings = settings.model_copy(update=update)
    save_settings(settings, settings_path)
    console.print(f"[green]Server set to {settings.address}[/green]")


@config.command("reset")
@settings_option
def config_reset(settings_path: Path):
    """Restore the default server settings."""
    save_settings(DEFAULT_SETTINGS, settings_path)
    console.print(f"[green]Server reset to {DEFAULT_SETTINGS.address}[/green]")
