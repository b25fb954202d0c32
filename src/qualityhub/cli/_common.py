"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..config import QualityHubConfig, load_config
from ..exceptions import QualityHubError
from ..logging_config import setup_logging

console = Console()
err_console = Console(stderr=True)


def resolve_config(
    ctx: Optional[typer.Context] = None, config: Optional[Path] = None, **overrides
) -> QualityHubConfig:
    """Build configuration from the config files and CLI options.

    Logging is reconfigured from the result so that a verbosity or log file
    set in TOML or the environment applies to the rest of the command.
    """
    if ctx is not None and ctx.obj:
        overrides.setdefault("verbose", ctx.obj.get("verbose", False))
        overrides.setdefault("quiet", ctx.obj.get("quiet", False))
    settings = load_config(config_file=config, **overrides)
    setup_logging(settings.verbosity, settings.log_file)
    return settings


def fail(error: QualityHubError, hint: Optional[str] = None) -> None:
    """Print an error (and its hint) and exit with status 1."""
    err_console.print(f"[red]Error:[/red] {escape(str(error))}", highlight=False)
    hint = hint or error.hint
    if hint:
        err_console.print(f"[dim]{escape(hint)}[/dim]")
    raise typer.Exit(1)
