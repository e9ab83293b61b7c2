from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

import typer

from errcode.cli.context import CLIContext
from errcode.core.errors import ExitCode
from errcode.core.result import Err, Ok, Result

STDIN = "-"


@dataclass(frozen=True, slots=True)
class ReadError:
    message: str
    path: Path | None = None


def read_source(source: str) -> Result[str, ReadError]:
    """Read a file argument, or stdin when it is ``-``."""
    if source == STDIN:
        return Ok(sys.stdin.read())

    path = Path(source)
    try:
        return Ok(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return Err(ReadError(f"file not found: {path}", path))
    except IsADirectoryError:
        return Err(ReadError(f"is a directory: {path}", path))
    except PermissionError:
        return Err(ReadError(f"permission denied: {path}", path))
    except UnicodeDecodeError as e:
        return Err(ReadError(f"not valid UTF-8: {path} ({e.reason})", path))


def read_or_exit(ctx: CLIContext, source: str) -> str:
    result = read_source(source)
    if isinstance(result, Err):
        ctx.console.error(result.error.message)
        raise typer.Exit(code=int(ExitCode.IO_ERROR))
    return result.value
