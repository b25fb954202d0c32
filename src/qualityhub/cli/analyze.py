"""Analyze command — score a qa-result.json and decide."""

import json
from pathlib import Path
from typing import Optional

import click
import typer
from rich.markup import escape

from ..analysis import RiskAnalyzer
from ..exceptions import MalformedReportError, QualityHubError, ReportNotFoundError
from ..formatters import ReportContext, get_formatter
from ..history import HistoryStore
from ..models import CanonicalRecord
from . import app
from ._common import console, err_console, fail, resolve_config


def load_record(path: Path) -> CanonicalRecord:
    """Read a canonical record written by ``qualityhub parse``."""
    if not path.is_file():
        raise ReportNotFoundError(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise MalformedReportError(path, f"invalid JSON: {e}")
    except UnicodeDecodeError as e:
        raise MalformedReportError(path, f"not valid UTF-8: {e}")
    return CanonicalRecord.from_dict(data, source=path)


@app.command()
def analyze(
    ctx: typer.Context,
    input_file: Path = typer.Argument(..., metavar="FILE", help="qa-result.json to analyze"),
    output_format: Optional[str] = typer.Option(
        None, "--format", "-f",
        help="Output format: rich | markdown | json",
        click_type=click.Choice(["rich", "markdown", "json"], case_sensitive=False),
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the report to a file"),
    no_save: bool = typer.Option(False, "--no-save", help="Do not record this run in history"),
    history_path: Optional[Path] = typer.Option(
        None, "--history", help="History file (default: .qualityhub/history.json)"
    ),
    config: Optional[Path] = typer.Option(
        None, "--config",
        help="Configuration file path (TOML format)",
        exists=True, file_okay=True, dir_okay=False, readable=True,
    ),
):
    """
    Compare a qa-result.json against history and print a risk decision.

    Exits with status 1 when the decision is BLOCK.

    [bold cyan]Examples:[/bold cyan]

      qualityhub analyze qa-result.json

      qualityhub analyze qa-result.json --format markdown -o comment.md

      qualityhub analyze qa-result.json --no-save
    """
    try:
        settings = resolve_config(
            ctx,
            config,
            output_format=output_format.lower() if output_format else None,
            output_file=str(output) if output else None,
            save_history=False if no_save else None,
        )
        record = load_record(input_file)
    except QualityHubError as e:
        fail(e, hint="Run `qualityhub parse <format> <path>` first to generate a qa-result.json")

    target = Path(settings.output_file) if settings.output_file else None
    if target is not None and not target.parent.is_dir():
        # fail before the run is recorded in history
        err_console.print(f"[red]Error:[/red] output directory does not exist: {target.parent}")
        raise typer.Exit(1)

    store = HistoryStore(history_path or settings.history_path())
    context = ReportContext(history_count=len(store), history_location=str(store.path.parent))
    result = RiskAnalyzer(store).run(record, save=settings.save_history)
    formatter = get_formatter(settings.output_format)
    if target is not None:
        try:
            target.write_text(formatter.format(result, context), encoding="utf-8")
        except OSError as e:
            err_console.print(f"[red]Error:[/red] cannot write {target}: {escape(str(e))}")
            raise typer.Exit(1)
        console.print(f"[green]✅ Report saved to {target}[/green]")
    else:
        formatter.render(result, context)

    if result.is_blocking:
        raise typer.Exit(1)
