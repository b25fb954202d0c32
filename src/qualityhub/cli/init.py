"""Init command — write a starter qualityhub.toml."""

from pathlib import Path

import typer

from ..config import CONFIG_FILE_NAME, write_default_config
from . import app
from ._common import console


@app.command()
def init(
    directory: Path = typer.Argument(
        Path("."), help="Project root", exists=True, file_okay=False, dir_okay=True,
    ),
):
    """Initialize QualityHub in a project directory."""
    target = directory / CONFIG_FILE_NAME
    if target.exists():
        console.print(f"[yellow]⚠️  {target} already exists[/yellow]")
        raise typer.Exit(0)

    write_default_config(target)
    console.print("[green]✅ QualityHub initialized![/green]")
    console.print()
    console.print(f"Created [cyan]{target}[/cyan]")
    console.print()
    console.print("Next steps:")
    console.print("  1. Run [cyan]qualityhub parse <format> <path>[/cyan] to normalize a report")
    console.print("  2. Run [cyan]qualityhub analyze qa-result.json[/cyan] to get a risk decision")
