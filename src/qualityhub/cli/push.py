"""Push command — upload a qa-result.json to a QualityHub server."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from ..client import APIClient
from ..exceptions import QualityHubError, UploadError
from . import app
from ._common import console, fail, resolve_config
from .analyze import load_record

_STATUS_STYLE = {
    "SAFE": "green",
    "LOW_RISK": "green",
    "MEDIUM_RISK": "yellow",
}

_DECISION_STYLE = {
    "PROCEED": "green",
    "CAUTION_PROCEED": "yellow",
    "CAUTION": "yellow",
}


def _score_style(score: int) -> str:
    if score >= 80:
        return "green"
    if score >= 60:
        return "yellow"
    return "red"


@app.command()
def push(
    ctx: typer.Context,
    input_file: Path = typer.Argument(..., metavar="FILE", help="qa-result.json to upload"),
    endpoint: Optional[str] = typer.Option(
        None, "--endpoint", "-e", help="Server base URL (default: api_endpoint from config)"
    ),
    api_key: Optional[str] = typer.Option(
        None, "--api-key", help="Bearer token (prefer QUALITYHUB_API_KEY)", show_default=False
    ),
    config: Optional[Path] = typer.Option(
        None, "--config",
        help="Configuration file path (TOML format)",
        exists=True, file_okay=True, dir_okay=False, readable=True,
    ),
):
    """
    Upload a qa-result.json and print the server's verdict.

    Exits with status 1 when the upload fails or the server rejects it.

    [bold cyan]Examples:[/bold cyan]

      qualityhub push qa-result.json

      qualityhub push qa-result.json --endpoint https://qualityhub.example.com
    """
    try:
        settings = resolve_config(ctx, config, api_endpoint=endpoint, api_key=api_key)
        record = load_record(input_file)
        with console.status("Uploading QA results..."):
            with APIClient(settings.api_endpoint, api_key=settings.api_key) as client:
                response = client.ingest(record.to_dict())
        if not response.success:
            raise UploadError(settings.api_endpoint, response.message or "rejected by server")
    except QualityHubError as e:
        fail(e)

    console.print("[green]✅ QA results uploaded successfully![/green]")
    console.print()
    if response.qa_result_id:
        console.print(f"[cyan]Result ID:[/cyan] {escape(response.qa_result_id)}")
    if response.risk_score is not None:
        style = _score_style(response.risk_score)
        console.print(f"[cyan]Risk Score:[/cyan] [{style}]{response.risk_score}[/{style}]/100")
    if response.risk_status:
        style = _STATUS_STYLE.get(response.risk_status, "red")
        console.print(f"[cyan]Status:[/cyan] [{style}]{escape(response.risk_status)}[/{style}]")
    if response.decision:
        style = _DECISION_STYLE.get(response.decision, "red")
        console.print(f"[cyan]Decision:[/cyan] [{style}]{escape(response.decision)}[/{style}]")
