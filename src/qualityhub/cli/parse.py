"""Parse command — turn a tool report into qa-result.json."""

import json
from pathlib import Path
from typing import Optional

import click
import typer
from rich.markup import escape

from ..environment import EnvironmentContext
from ..exceptions import QualityHubError
from ..parsers import ProjectInfo, ReportFormat, get_parser
from . import app
from ._common import console, err_console, fail, resolve_config


@app.command()
def parse(
    ctx: typer.Context,
    report_format: str = typer.Argument(
        ...,
        metavar="FORMAT",
        help="Report format: jest | jacoco | junit",
        click_type=click.Choice([f.value for f in ReportFormat], case_sensitive=False),
    ),
    path: Path = typer.Argument(..., help="Coverage directory, JaCoCo XML file or JUnit results directory"),
    output: Path = typer.Option(Path("qa-result.json"), "--output", "-o", help="Output file path"),
    project: Optional[str] = typer.Option(None, "--project", "-p", help="Project name"),
    project_version: Optional[str] = typer.Option(None, "--project-version", help="Project version"),
    commit: Optional[str] = typer.Option(None, "--commit", "-c", help="Git commit hash"),
    branch: Optional[str] = typer.Option(None, "--branch", "-b", help="Git branch name"),
    config: Optional[Path] = typer.Option(
        None, "--config",
        help="Configuration file path (TOML format)",
        exists=True, file_okay=True, dir_okay=False, readable=True,
    ),
):
    """
    Parse test/coverage results and write a canonical qa-result.json.

    [bold cyan]Examples:[/bold cyan]

      qualityhub parse jest coverage/

      qualityhub parse jacoco target/site/jacoco/jacoco.xml -p billing

      qualityhub parse junit target/surefire-reports -b main
    """
    try:
        settings = resolve_config(ctx, config)
        info = ProjectInfo(
            name=project,
            version=project_version,
            commit=commit,
            branch=branch,
        )
        parser = get_parser(
            report_format,
            project=info,
            env=EnvironmentContext.from_environ(),
            default_name=settings.project_name,
        )
        console.print(f"[blue]🔍 Parsing {report_format} results from: {path}[/blue]")
        record = parser.parse(path)
    except QualityHubError as e:
        fail(e)

    try:
        output.write_text(json.dumps(record.to_dict(), indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        err_console.print(f"[red]Error:[/red] cannot write {output}: {escape(str(e))}")
        raise typer.Exit(1)

    tests, coverage = record.tests, record.coverage
    console.print("[green]✅ QA result generated successfully![/green]")
    console.print()
    console.print(f"[cyan]Output:[/cyan] {output}")
    console.print(f"[cyan]Project:[/cyan] {record.project.name}")
    console.print(f"[cyan]Tests:[/cyan] {tests.passed}/{tests.total} passed")
    console.print(f"[cyan]Coverage:[/cyan] {coverage.lines:.1f}% lines")
    console.print()
    console.print(f"[dim]Next step:[/dim] qualityhub analyze {output}")
