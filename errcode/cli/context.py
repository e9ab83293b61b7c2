from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from errcode.core.config import Config, find_config, load_config
from errcode.core.result import Err
from errcode.output.console import ConsoleProtocol, RichConsole, Style
from errcode.output.errors import failure_exit_code, print_failure

VERBOSE_ENV_VAR = "ERRCODE_VERBOSE"


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    config_path: Path | None
    console: ConsoleProtocol
    verbose: bool = False

    def debug(self, message: str) -> None:
        if self.verbose:
            self.console.print(message, Style.DIM)


def build_context() -> CLIContext:
    console = RichConsole()
    verbose = os.environ.get(VERBOSE_ENV_VAR) == "1"

    path = find_config()
    config = Config()
    if path is not None:
        result = load_config(path)
        if isinstance(result, Err):
            print_failure(result.error, console)
            raise typer.Exit(code=failure_exit_code(result.error))
        config = result.value

    ctx = CLIContext(config=config, config_path=path, console=console, verbose=verbose)
    ctx.debug(f"config: {path if path is not None else '(defaults)'}")
    return ctx
