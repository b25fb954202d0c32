"""History command — list stored analysis runs."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from ..exceptions import QualityHubError
from ..history import HistoryStore
from . import app
from ._common import console, fail, resolve_config


@app.command()
def history(
    ctx: typer.Context,
    limit: int = typer.Option(
        20, "--limit", "-n",
        help="Maximum number of entries to list",
        min=1, max=100,
    ),
    branch: Optional[str] = typer.Option(None, "--branch", "-b", help="Only show this branch"),
    history_path: Optional[Path] = typer.Option(None, "--history", help="History file"),
    json_output: bool = typer.Option(False, "--json", help="Output in machine-readable JSON format"),
):
    """
    List past analysis runs, newest first.

    [bold cyan]Examples:[/bold cyan]

      qualityhub history

      qualityhub history --branch main --json
    """
    try:
        settings = resolve_config(ctx)
    except QualityHubError as e:
        fail(e)

    store = HistoryStore(history_path or settings.history_path())
    loaded = store.read()
    if not loaded.ok:
        console.print(f"[yellow]History at {store.path} is unreadable:[/yellow] {loaded.error}")
        raise typer.Exit(0)

    entries = [e for e in loaded.entries if branch is None or e.branch == branch]
    entries = list(reversed(entries))[:limit]
    if not entries:
        console.print(
            "[yellow]No history found.[/yellow] "
            "Run [bold]qualityhub analyze[/bold] first to record a run."
        )
        raise typer.Exit(0)

    if json_output:
        print(json.dumps([e.to_dict() for e in entries], indent=2))
        return

    table = Table(title="Analysis History", show_lines=False, pad_edge=True)
    table.add_column("Timestamp", style="green")
    table.add_column("Project")
    table.add_column("Branch", style="cyan")
    table.add_column("Commit", style="dim")
    table.add_column("Score", justify="right", style="bold")
    table.add_column("Tests", justify="right")
    table.add_column("Lines", justify="right")

    for e in entries:
        ts = e.timestamp.replace("T", " ")
        if "." in ts:
            ts = ts[: ts.index(".")]
        table.add_row(
            ts,
            e.project,
            e.branch,
            e.commit[:8],
            str(e.risk_score),
            f"{e.tests_passed}/{e.tests_total}",
            f"{e.coverage_lines:.1f}%",
        )

    console.print()
    console.print(table)
    console.print()
