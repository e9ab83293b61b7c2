from __future__ import annotations

import os
from pathlib import Path

import typer

from errcode import __version__
from errcode.cli.commands.coverage import coverage
from errcode.cli.commands.lint import lint
from errcode.cli.commands.normalize import normalize
from errcode.cli.commands.render import render_cmd
from errcode.cli.context import VERBOSE_ENV_VAR
from errcode.core.config import CONFIG_ENV_VAR


app = typer.Typer(
    help="Render error payloads, lint error codes, and check code coverage.",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command("render")(render_cmd)
app.command()(lint)
app.command()(normalize)
app.command()(coverage)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    config: Path | None = typer.Option(
        None,
        "--config",
        help=f"Config file (default: ${CONFIG_ENV_VAR}, then ./errcode.toml)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print extra diagnostics."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if config is not None:
        os.environ[CONFIG_ENV_VAR] = str(config.expanduser())
    if verbose:
        os.environ[VERBOSE_ENV_VAR] = "1"


def main() -> None:
    app()
