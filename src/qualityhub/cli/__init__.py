"""CLI entry point — registers all subcommands."""

from typing import Optional

import typer

from .. import __version__
from ..logging_config import setup_logging, verbosity_from_flags
from ._common import console

app = typer.Typer(
    name="qualityhub",
    help="QualityHub - normalize test/coverage reports and score deploy risk",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"qualityhub {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """QualityHub — quality reports in, deploy decision out."""
    setup_logging(verbosity_from_flags(verbose, quiet))
    ctx.obj = {"verbose": verbose, "quiet": quiet}


# Import subcommands to register them
from .parse import parse as _parse  # noqa: F401, E402
from .analyze import analyze as _analyze  # noqa: F401, E402
from .history import history as _history  # noqa: F401, E402
from .init import init as _init  # noqa: F401, E402
from .push import push as _push  # noqa: F401, E402
